"""
capordino.config.defaults - Default configuration values
"""

DEFAULT_CONFIG = {
    "oscal": {
        "version": "v1.1.2",
    },
    "catalog": {
        "generated_by": "Cybersecurity And Privacy Open Reference Datasets In OSCAL (CAPORDINO)",
        # Namespace of CPRT-specific props
        "prop_namespace": "https://csrc.nist.gov/ns/cprt",
    },
    "publisher": {
        "name": "National Institute of Standards and Technology",
        "short_name": "NIST",
        "type": "organization",
        "email": "capordino@nist.gov",
        "address": {
            "lines": [
                "National Institute of Standards and Technology",
                "Attn: Applied Cybersecurity Division",
                "Information Technology Laboratory",
                "100 Bureau Drive (Mail Stop 2000)",
            ],
            "city": "Gaithersburg",
            "state": "MD",
            "postal_code": "20899-2000",
        },
    },
    "roles": {
        "publisher": "Publisher",
        "contact": "Contact",
        "author": "Author",
    },
    "links": {
        "external_catalog_url": (
            "https://csrc.nist.gov/projects/cprt/catalog#/cprt/framework/version/"
            "SP_800_53_5_1_1/home?element={identifier}"
        ),
    },
    "api": {
        "base_url": "https://csrc.nist.gov/extensions/nudp/services/json/nudp",
        "timeout": 60,
    },
    "conversion": {
        "strict_leaf_references": False,
    },
    "frameworks": {},
}

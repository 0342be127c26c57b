"""Test helpers for building small CPRT exports.

This module provides factories for export dictionaries and a sample
SP 800-171 r3 export that exercises every branch of the catalog builder:
families, a full requirement, a withdrawn requirement, sub-requirements
with nested items, objectives, ODPs, methods, references and external
references.
"""

from __future__ import annotations

from typing import Any

from capordino.cprt.graph import ElementGraph

DOC = "SP_800_171_3_0_0"
SP_800_53_DOC = "SP_800_53_5_1_1"


# === Export Factories ===


def make_element(
    element_identifier: str,
    element_type: str,
    title: str = "",
    text: str = "",
    doc: str = DOC,
) -> dict[str, Any]:
    """Factory for an export element dict."""
    return {
        "doc_identifier": doc,
        "element_identifier": element_identifier,
        "element_type": element_type,
        "title": title,
        "text": text,
    }


def make_relationship(
    source: str,
    dest: str,
    relationship: str = "projection",
    source_doc: str = DOC,
    dest_doc: str = DOC,
) -> dict[str, Any]:
    """Factory for an export relationship dict."""
    return {
        "source_doc_identifier": source_doc,
        "source_element_identifier": source,
        "dest_doc_identifier": dest_doc,
        "dest_element_identifier": dest,
        "relationship_identifier": relationship,
        "provenance_doc_identifier": DOC,
    }


def build_graph(elements: list[dict], relationships: list[dict] | None = None) -> ElementGraph:
    """Build an ElementGraph from element and relationship dicts."""
    return ElementGraph.from_export(
        {"elements": elements, "relationships": relationships or []}
    )


def gid(element_identifier: str, doc: str = DOC) -> str:
    """Global identifier of an element in the sample document."""
    return f"{doc}:{element_identifier}"


# === Sample SP 800-171 r3 Export ===


def sample_elements() -> list[dict[str, Any]]:
    return [
        make_element("03.01", "family", "Access Control", "Overview of access control."),
        make_element(
            "03.01.01",
            "requirement",
            "Account Management",
            "Review accounts [Assignment: organization-defined frequency] and disable "
            "them within [Assignment: organization-defined time period].",
        ),
        make_element("03.01.01_disc", "discussion", "", "Examples of system account types."),
        make_element(
            "A.03.01.01.a",
            "determination",
            "",
            "accounts are reviewed <03.01.01.ODP[01]: frequency> and disabled after "
            "<03.01.01.ODP[02]: time period>.",
        ),
        make_element(
            "A.03.01.01.b",
            "determination",
            "",
            "accounts are disabled within <03.01.01.ODP[02]: time period>.",
        ),
        make_element(
            "03.01.01.ODP[01]",
            "odp",
            "frequency",
            "the frequency at which to review accounts",
        ),
        make_element(
            "03.01.01.ODP[02]",
            "odp",
            "time period",
            "the time period [after inactivity] for disabling accounts",
        ),
        make_element(
            "EXA-03.01.01",
            "examine",
            "",
            "[SELECT FROM: access control policy; procedures; system security plan]",
        ),
        make_element(
            "INT-03.01.01",
            "interview",
            "",
            "[SELECT FROM: personnel with account management responsibilities]",
        ),
        make_element(
            "TST-03.01.01",
            "test",
            "",
            "[SELECT FROM: mechanisms for managing accounts]",
        ),
        make_element(
            "SP-800-53-r5",
            "reference",
            "Security and Privacy Controls for Information Systems and Organizations",
            "https://doi.org/10.6028/NIST.SP.800-53r5",
        ),
        make_element("03.01.01.a", "security_requirement", "", "Define allowed account types."),
        make_element(
            "03.01.01.b",
            "security_requirement",
            "",
            "Disable accounts within [Assignment: organization-defined time period].",
        ),
        make_element("03.01.01.b.01", "security_requirement", "", "When accounts expire."),
        make_element("03.01.01.b.02", "security_requirement", "", "When accounts are inactive."),
        make_element("03.01.02", "requirement", "Access Enforcement", "Enforce approved authorizations."),
        make_element("03.01.13", "requirement", "", ""),
        make_element("03.01.13_wr", "withdraw_reason", "", "Incorporated into other requirements."),
        make_element("03.13", "family", "System and Communications Protection", "Overview of SC."),
        make_element(
            "03.13.08",
            "requirement",
            "Transmission and Storage Confidentiality",
            "Implement cryptographic mechanisms.",
        ),
    ]


def sample_relationships() -> list[dict[str, Any]]:
    return [
        make_relationship("03.01", "03.01.01"),
        make_relationship("03.01", "03.01.02"),
        make_relationship("03.01", "03.01.13"),
        make_relationship("03.13", "03.13.08"),
        make_relationship("03.01.01", "03.01.01_disc"),
        make_relationship("03.01.01", "A.03.01.01.a"),
        make_relationship("A.03.01.01.a", "03.01.01.ODP[01]"),
        make_relationship("A.03.01.01.a", "03.01.01.ODP[02]"),
        make_relationship("03.01.01.b", "A.03.01.01.b"),
        make_relationship("A.03.01.01.b", "03.01.01.ODP[02]"),
        make_relationship("03.01.01", "EXA-03.01.01"),
        make_relationship("03.01.01", "INT-03.01.01"),
        make_relationship("03.01.01", "TST-03.01.01"),
        make_relationship("03.01.01", "SP-800-53-r5"),
        make_relationship("03.01.01", "03.01.01.a"),
        make_relationship("03.01.01", "03.01.01.b"),
        make_relationship("03.01.01.b", "03.01.01.b.01"),
        make_relationship("03.01.01.b", "03.01.01.b.02"),
        make_relationship("03.01.01", "AC-02", "external_reference", dest_doc=SP_800_53_DOC),
        make_relationship("03.01.01", "AC-03", "external_reference", dest_doc=SP_800_53_DOC),
        make_relationship("03.01.02", "AC-02", "external_reference", dest_doc=SP_800_53_DOC),
        make_relationship("03.01.02", "SP-800-53-r5"),
        make_relationship("03.01.13", "03.01.13_wr"),
        make_relationship("03.01.13_wr", "03.01.12", "incorporated_into"),
        make_relationship("03.01.13_wr", "03.13.08", "addressed_by"),
    ]


def sample_export() -> dict[str, Any]:
    """Sample export in the shape returned by the CPRT export API."""
    return {
        "elements": {
            "documents": [{"doc_identifier": DOC, "name": "SP 800-171 Rev 3"}],
            "elements": sample_elements(),
            "relationship_types": [],
            "relationships": sample_relationships(),
        }
    }


def sample_metadata(framework_identifier: str = DOC) -> dict[str, Any]:
    """Sample metadata listing with one framework version."""
    return {
        "versions": [
            {
                "frameworkIdentifier": framework_identifier,
                "frameworkVersionIdentifier": framework_identifier,
                "frameworkVersionName": (
                    "Protecting Controlled Unclassified Information in Nonfederal "
                    "Systems and Organizations"
                ),
                "version": "3.0.0",
                "frameworkWebSite": "https://csrc.nist.gov/pubs/sp/800/171/r3/final",
                "frameworkVersionWebSite": "",
                "publicationStatus": "Final",
                "publicationReleaseDate": "2024-05-14T00:00:00Z",
                "pocEmailAddress": "sec-cert@nist.gov",
            }
        ]
    }


def sample_graph() -> ElementGraph:
    return ElementGraph.from_export(sample_export()["elements"])


# === Catalog Lookups ===


def find_control(controls, control_id: str):
    """Find a control by id in a list of controls (depth-first)."""
    for control in controls:
        if control.id == control_id:
            return control
        found = find_control(control.controls, control_id)
        if found is not None:
            return found
    return None


def part_names(parts) -> list[str]:
    return [p.name for p in parts]

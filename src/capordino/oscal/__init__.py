"""
capordino.oscal - OSCAL catalog model and serialization
"""

from capordino.oscal.model import (
    BackMatter,
    Catalog,
    Citation,
    Control,
    Group,
    Guideline,
    Link,
    Metadata,
    Parameter,
    Part,
    Property,
    Resource,
    ResourceLink,
)
from capordino.oscal.serialize import render_markdown, serialize_catalog, to_json

__all__ = [
    "BackMatter",
    "Catalog",
    "Citation",
    "Control",
    "Group",
    "Guideline",
    "Link",
    "Metadata",
    "Parameter",
    "Part",
    "Property",
    "Resource",
    "ResourceLink",
    "render_markdown",
    "serialize_catalog",
    "to_json",
]

"""CPRT data models.

This module provides the dataclasses for the CPRT export format:
- CprtElement: A typed node of a framework (family, requirement, odp, ...)
- CprtRelationship: A typed, directed edge between two elements
- CprtMetadataVersion: One framework version from the CPRT metadata listing

Field names follow the CPRT JSON payload so that exports can be loaded
without a mapping layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


def make_global_identifier(doc_identifier: str, element_identifier: str) -> str:
    """Build the graph-wide identifier ``doc:element`` used by the index."""
    return f"{doc_identifier}:{element_identifier}"


@dataclass(frozen=True)
class CprtElement:
    """A single element of a CPRT export.

    Attributes:
        element_type: Type tag (e.g., "family", "requirement", "odp").
        element_identifier: Identifier local to the owning document.
        doc_identifier: Identifier of the owning document.
        title: Human-readable title. Empty for withdrawn elements.
        text: Body text; may contain placeholder markers.
    """

    element_type: str
    element_identifier: str
    doc_identifier: str
    title: str = ""
    text: str = ""

    @property
    def global_identifier(self) -> str:
        """Identifier unique across the whole graph."""
        return make_global_identifier(self.doc_identifier, self.element_identifier)

    @property
    def is_withdrawn(self) -> bool:
        """True if the element has been withdrawn (signalled by an empty title)."""
        return not self.title

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CprtElement:
        """Create a CprtElement from an export dictionary.

        ``None`` titles and texts are normalized to empty strings.
        """
        return cls(
            element_type=data["element_type"],
            element_identifier=data["element_identifier"],
            doc_identifier=data["doc_identifier"],
            title=data.get("title") or "",
            text=data.get("text") or "",
        )


@dataclass(frozen=True)
class CprtRelationship:
    """A directed, typed relationship between two elements.

    Attributes:
        source_doc_identifier: Document owning the source element.
        source_element_identifier: Local identifier of the source element.
        dest_doc_identifier: Document owning the destination element.
        dest_element_identifier: Local identifier of the destination element.
        relationship_identifier: Relation type tag (e.g., "projection").
        provenance_doc_identifier: Document that declared the relationship.
    """

    source_doc_identifier: str
    source_element_identifier: str
    dest_doc_identifier: str
    dest_element_identifier: str
    relationship_identifier: str
    provenance_doc_identifier: str = ""

    @property
    def source_global_identifier(self) -> str:
        return make_global_identifier(self.source_doc_identifier, self.source_element_identifier)

    @property
    def dest_global_identifier(self) -> str:
        return make_global_identifier(self.dest_doc_identifier, self.dest_element_identifier)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CprtRelationship:
        """Create a CprtRelationship from an export dictionary."""
        return cls(
            source_doc_identifier=data["source_doc_identifier"],
            source_element_identifier=data["source_element_identifier"],
            dest_doc_identifier=data["dest_doc_identifier"],
            dest_element_identifier=data["dest_element_identifier"],
            relationship_identifier=data["relationship_identifier"],
            provenance_doc_identifier=data.get("provenance_doc_identifier") or "",
        )

    def __str__(self) -> str:
        """Human-readable representation."""
        return (
            f"{self.source_global_identifier} --[{self.relationship_identifier}]--> "
            f"{self.dest_global_identifier}"
        )


def _parse_date(value: str | None) -> datetime | None:
    """Parse a CPRT timestamp, accepting a trailing ``Z``."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass
class CprtMetadataVersion:
    """Metadata describing one published framework version.

    Attributes:
        framework_identifier: Framework identity (e.g., "SP_800_171_3_0_0").
        framework_version_identifier: Version identity used by the export API.
        framework_version_name: Display name, used as the catalog title.
        version: Version label (e.g., "3.0.0").
        framework_web_site: Landing page of the framework.
        framework_version_web_site: Landing page of this version, if any.
        publication_status: Publication status label, if any.
        publication_release_date: Release date, if known.
        poc_email_address: Point-of-contact email, if any.
    """

    framework_identifier: str
    framework_version_identifier: str
    framework_version_name: str = ""
    version: str = ""
    framework_web_site: str = ""
    framework_version_web_site: str = ""
    publication_status: str = ""
    publication_release_date: datetime | None = None
    poc_email_address: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CprtMetadataVersion:
        """Create from a CPRT metadata entry (camelCase keys)."""
        return cls(
            framework_identifier=data["frameworkIdentifier"],
            framework_version_identifier=data.get(
                "frameworkVersionIdentifier", data["frameworkIdentifier"]
            ),
            framework_version_name=data.get("frameworkVersionName") or data.get("name") or "",
            version=data.get("version") or "",
            framework_web_site=data.get("frameworkWebSite") or "",
            framework_version_web_site=data.get("frameworkVersionWebSite") or "",
            publication_status=data.get("publicationStatus") or "",
            publication_release_date=_parse_date(data.get("publicationReleaseDate")),
            poc_email_address=data.get("pocEmailAddress") or "",
        )

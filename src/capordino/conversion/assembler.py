"""Catalog assembler - wraps builder output into a complete OSCAL catalog.

Adds the front matter the builder does not produce: catalog UUID, metadata
(title, version, dates, CPRT props), links to the framework web sites, and
the publisher, contact and author parties and roles. Front-matter literals
come from configuration (see capordino.config.defaults).
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable

from capordino.config.defaults import DEFAULT_CONFIG
from capordino.conversion.builder import CatalogBuilder
from capordino.oscal.model import (
    Address,
    BackMatter,
    Catalog,
    Metadata,
    Party,
    Property,
    Resource,
    ResourceLink,
    ResponsibleParty,
    Role,
)

if TYPE_CHECKING:
    from capordino.conversion.descriptor import FrameworkDescriptor
    from capordino.cprt.graph import ElementGraph
    from capordino.cprt.models import CprtMetadataVersion

logger = logging.getLogger(__name__)


class CatalogAssembler:
    """Assembles a Catalog from a CPRT graph and its framework metadata.

    Example:
        assembler = CatalogAssembler(config)
        catalog = assembler.assemble(graph, version, descriptor)
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        uuid_factory: Callable[[], uuid.UUID] = uuid.uuid4,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the assembler.

        Args:
            config: Configuration dict (defaults if omitted).
            uuid_factory: Source of catalog and party UUIDs.
            now: Clock for last-modified (UTC now if omitted).
        """
        self.config = config if config is not None else DEFAULT_CONFIG
        self.uuid_factory = uuid_factory
        self.now = now or (lambda: datetime.now(timezone.utc))

    def assemble(
        self,
        graph: ElementGraph,
        version: CprtMetadataVersion,
        descriptor: FrameworkDescriptor,
    ) -> Catalog:
        """Build the complete catalog.

        The framework identity is checked before anything else is built.

        Raises:
            FrameworkMismatchError: If version names another framework.
            DataIntegrityError: If the graph has a broken reference.
        """
        descriptor.assert_framework(version)

        back_matter = BackMatter()
        metadata = self.build_metadata(version, back_matter)

        builder = CatalogBuilder(
            graph,
            descriptor,
            back_matter=back_matter,
            external_catalog_url=self.config["links"]["external_catalog_url"],
            strict_leaf_references=bool(self.config["conversion"]["strict_leaf_references"]),
        )
        groups = builder.build()
        logger.info(
            "Built %d groups and %d resources for %s",
            len(groups),
            len(back_matter),
            version.framework_version_identifier,
        )

        return Catalog(
            uuid=self.uuid_factory(),
            metadata=metadata,
            groups=groups,
            back_matter=back_matter if len(back_matter) else None,
        )

    def cprt_prop(self, name: str, value: str) -> Property:
        return Property(name=name, value=value, ns=self.config["catalog"]["prop_namespace"])

    def build_metadata(self, version: CprtMetadataVersion, back_matter: BackMatter) -> Metadata:
        """Build catalog metadata; web-site resources are added to back_matter."""
        metadata = Metadata(
            title=version.framework_version_name,
            last_modified=self.now(),
            version=version.version,
            oscal_version=self.config["oscal"]["version"],
            published=version.publication_release_date,
        )

        metadata.props.append(self.cprt_prop("framework-identifier", version.framework_identifier))
        metadata.props.append(
            self.cprt_prop("framework-version-identifier", version.framework_version_identifier)
        )
        metadata.props.append(self.cprt_prop("generated-by", self.config["catalog"]["generated_by"]))
        if version.publication_status:
            metadata.props.append(self.cprt_prop("publication-status", version.publication_status))

        if version.framework_web_site:
            metadata.links.append(
                back_matter.link_to(
                    self.web_site_resource(version.framework_version_name, version.framework_web_site),
                    "alternate",
                )
            )
        if version.framework_version_web_site:
            metadata.links.append(
                back_matter.link_to(
                    self.web_site_resource(
                        version.framework_version_name, version.framework_version_web_site
                    ),
                    "canonical",
                )
            )

        roles = self.config["roles"]
        publisher = self.build_publisher_party()
        metadata.parties.append(publisher)
        for role_id in ("publisher", "contact"):
            metadata.roles.append(Role(id=role_id, title=roles[role_id]))
            metadata.responsible_parties.append(
                ResponsibleParty(role_id=role_id, party_uuids=[publisher.uuid])
            )

        if version.poc_email_address:
            author = Party(
                uuid=self.uuid_factory(),
                type="organization",
                email_addresses=[version.poc_email_address],
            )
            metadata.parties.append(author)
            metadata.roles.append(Role(id="author", title=roles["author"]))
            metadata.responsible_parties.append(
                ResponsibleParty(role_id="author", party_uuids=[author.uuid])
            )

        return metadata

    @staticmethod
    def web_site_resource(title: str, href: str) -> Resource:
        return Resource(title=title, rlinks=[ResourceLink(href=href, media_type="application/html")])

    def build_publisher_party(self) -> Party:
        publisher = self.config["publisher"]
        address = publisher.get("address", {})
        party = Party(
            uuid=self.uuid_factory(),
            type=publisher.get("type", "organization"),
            name=publisher.get("name"),
            short_name=publisher.get("short_name"),
        )
        if publisher.get("email"):
            party.email_addresses.append(publisher["email"])
        if address:
            party.addresses.append(
                Address(
                    addr_lines=list(address.get("lines", [])),
                    city=address.get("city"),
                    state=address.get("state"),
                    postal_code=address.get("postal_code"),
                    country=address.get("country"),
                )
            )
        return party


def convert(
    graph: ElementGraph,
    version: CprtMetadataVersion,
    descriptor: FrameworkDescriptor,
    config: dict[str, Any] | None = None,
) -> Catalog:
    """Convert a CPRT graph into an OSCAL catalog with default front matter."""
    return CatalogAssembler(config).assemble(graph, version, descriptor)

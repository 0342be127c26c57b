"""OSCAL catalog model.

Dataclasses for the subset of the OSCAL catalog model produced by the
converter. Field order follows the OSCAL JSON layout; `class_` maps to the
OSCAL `class` key. Prose and markup-line fields hold OSCAL markdown.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

# Namespace for resource UUIDs, so that repeated builds are identical
RESOURCE_NAMESPACE = uuid.UUID("5f3b4c1e-8f0a-4b7e-9c2d-6a1e0b9d4c71")


@dataclass
class Property:
    name: str
    value: str
    ns: str | None = None
    class_: str | None = None
    remarks: str | None = None


@dataclass
class Link:
    href: str
    rel: str | None = None
    media_type: str | None = None
    text: str | None = None


@dataclass
class Part:
    """A named part of a group or control (statement, guidance, item, ...)."""

    name: str
    id: str | None = None
    ns: str | None = None
    class_: str | None = None
    title: str | None = None
    props: list[Property] = field(default_factory=list)
    prose: str | None = None
    parts: list[Part] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)


@dataclass
class Guideline:
    prose: str


@dataclass
class Parameter:
    id: str
    class_: str | None = None
    props: list[Property] = field(default_factory=list)
    label: str | None = None
    guidelines: list[Guideline] = field(default_factory=list)


@dataclass
class Control:
    id: str
    class_: str | None = None
    title: str | None = None
    params: list[Parameter] = field(default_factory=list)
    props: list[Property] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    parts: list[Part] = field(default_factory=list)
    controls: list[Control] = field(default_factory=list)

    @property
    def is_withdrawn(self) -> bool:
        return any(p.name == "status" and p.value == "withdrawn" for p in self.props)


@dataclass
class Group:
    id: str
    class_: str | None = None
    title: str = ""
    props: list[Property] = field(default_factory=list)
    parts: list[Part] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    controls: list[Control] = field(default_factory=list)


@dataclass
class Citation:
    text: str


@dataclass
class ResourceLink:
    href: str
    media_type: str | None = None


@dataclass(eq=False)
class Resource:
    """A back-matter resource.

    Resources compare by identity: the same instance is the same resource.
    The UUID is assigned when the resource is first added to a BackMatter.
    """

    title: str | None = None
    uuid: uuid.UUID | None = None
    description: str | None = None
    citation: Citation | None = None
    rlinks: list[ResourceLink] = field(default_factory=list)


@dataclass
class BackMatter:
    """Append-only collection of resources shared by the whole catalog."""

    resources: list[Resource] = field(default_factory=list)
    namespace: uuid.UUID = field(default=RESOURCE_NAMESPACE, repr=False)

    def __contains__(self, resource: object) -> bool:
        return any(r is resource for r in self.resources)

    def __len__(self) -> int:
        return len(self.resources)

    def add(self, resource: Resource) -> Resource:
        """Add a resource once, assigning its UUID if it has none.

        Adding the same instance again is a no-op.

        Returns:
            The resource, for chaining.
        """
        if resource in self:
            return resource
        if resource.uuid is None:
            resource.uuid = uuid.uuid5(self.namespace, f"resource-{len(self.resources)}")
        self.resources.append(resource)
        return resource

    def link_to(self, resource: Resource, rel: str) -> Link:
        """Add resource (if needed) and return a fragment link pointing at it."""
        self.add(resource)
        return Link(href=f"#{resource.uuid}", rel=rel)


@dataclass
class Address:
    addr_lines: list[str] = field(default_factory=list)
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


@dataclass
class Party:
    uuid: uuid.UUID
    type: str
    name: str | None = None
    short_name: str | None = None
    email_addresses: list[str] = field(default_factory=list)
    addresses: list[Address] = field(default_factory=list)


@dataclass
class Role:
    id: str
    title: str


@dataclass
class ResponsibleParty:
    role_id: str
    party_uuids: list[uuid.UUID] = field(default_factory=list)


@dataclass
class Metadata:
    title: str
    last_modified: datetime
    version: str
    oscal_version: str
    published: datetime | None = None
    props: list[Property] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    roles: list[Role] = field(default_factory=list)
    parties: list[Party] = field(default_factory=list)
    responsible_parties: list[ResponsibleParty] = field(default_factory=list)


@dataclass
class Catalog:
    uuid: uuid.UUID
    metadata: Metadata
    params: list[Parameter] = field(default_factory=list)
    controls: list[Control] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    back_matter: BackMatter | None = None

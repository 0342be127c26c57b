"""Catalog Builder - Turns a CPRT element graph into nested catalog nodes.

The builder walks the graph one layer at a time along the framework's
structural relation:

    root type        -> Group      (overview part)
    requirement type -> Control    (statement, guidance, objectives, methods,
                                    params, links; or a withdrawn stub)
    subrequirement   -> Control    (statement part)
    item type        -> Part       (nested items, unbounded depth)

Every text field passes through the rewrites in capordino.conversion.text
before it is escaped and attached.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from capordino.conversion.text import (
    escape_square_brackets,
    escape_square_brackets_with_parentheses,
    find_tagged_placeholders,
    rewrite_bracket_placeholders,
    rewrite_inline_list,
    rewrite_tagged_placeholders,
    to_token,
)
from capordino.cprt.graph import DataIntegrityError, ElementGraph
from capordino.cprt.models import CprtElement, make_global_identifier
from capordino.oscal.model import (
    BackMatter,
    Citation,
    Control,
    Group,
    Guideline,
    Link,
    Parameter,
    Part,
    Property,
    Resource,
    ResourceLink,
)

if TYPE_CHECKING:
    from capordino.conversion.descriptor import FrameworkDescriptor
    from capordino.cprt.models import CprtMetadataVersion

logger = logging.getLogger(__name__)

DEFAULT_EXTERNAL_CATALOG_URL = (
    "https://csrc.nist.gov/projects/cprt/catalog#/cprt/framework/version/"
    "SP_800_53_5_1_1/home?element={identifier}"
)


def build_prop(name: str, value: str) -> Property:
    return Property(name=name, value=value)


def build_label_prop(label: str) -> Property:
    return build_prop("label", label)


def build_withdrawn_prop() -> Property:
    return build_prop("status", "withdrawn")


def prose(text: str) -> str | None:
    """Escape text for a prose field; empty text yields no prose."""
    if not text:
        return None
    return escape_square_brackets_with_parentheses(text)


class CatalogBuilder:
    """Builds catalog groups and back matter from an ElementGraph.

    One builder performs one build. Resources created during the build are
    added to ``back_matter``; a resource for the same external reference or
    publication is created once and linked from every control that cites it.

    Example:
        builder = CatalogBuilder(graph, SP_800_171_R3)
        groups = builder.build(version)
        resources = builder.back_matter.resources
    """

    def __init__(
        self,
        graph: ElementGraph,
        descriptor: FrameworkDescriptor,
        back_matter: BackMatter | None = None,
        external_catalog_url: str = DEFAULT_EXTERNAL_CATALOG_URL,
        strict_leaf_references: bool = False,
    ) -> None:
        """Initialize the builder.

        Args:
            graph: Indexed CPRT export.
            descriptor: Conversion tables of the framework.
            back_matter: Back matter to add resources to (new if omitted).
            external_catalog_url: URL template with an {identifier} field
                for external control references.
            strict_leaf_references: If True, a broken reference below a
                sub-control aborts the build; otherwise the branch ends there.
        """
        self.graph = graph
        self.descriptor = descriptor
        self.back_matter = back_matter if back_matter is not None else BackMatter()
        self.external_catalog_url = external_catalog_url
        self.strict_leaf_references = strict_leaf_references
        self._bracket_pattern = descriptor.compiled_bracket_pattern()
        self._external_resources: dict[str, Resource] = {}
        self._reference_resources: dict[str, Resource] = {}

    def build(self, version: CprtMetadataVersion | None = None) -> list[Group]:
        """Build the top-level groups of the catalog.

        Args:
            version: Declared metadata of the input. When given, its framework
                identity is checked before any traversal.

        Raises:
            FrameworkMismatchError: If version names another framework.
            DataIntegrityError: If a required reference cannot be resolved.
        """
        if version is not None:
            self.descriptor.assert_framework(version)
        return self.build_groups()

    # ─────────────────────────────────────────────────────────────────────
    # Layers
    # ─────────────────────────────────────────────────────────────────────

    def build_groups(self) -> list[Group]:
        """Build one group per root element."""
        groups = []
        for elem in self.graph.elements_of_type(self.descriptor.root_type):
            logger.debug("Building group %s", elem.element_identifier)
            group = Group(
                id=to_token(elem.element_identifier),
                class_=elem.element_type,
                title=escape_square_brackets_with_parentheses(elem.title),
            )
            group.parts.append(self.build_text_part(elem, "overview"))
            group.controls = self.build_controls(elem.global_identifier)
            group.props.append(build_label_prop(f"{elem.title} ({elem.element_identifier})"))
            groups.append(group)
        return groups

    def build_controls(self, parent_id: str) -> list[Control]:
        """Build the controls for the requirement elements under a parent."""
        d = self.descriptor
        controls = []
        for elem in self.graph.by_relation(parent_id, d.requirement_type, d.structural_relation):
            if elem.is_withdrawn:
                controls.append(self.build_withdrawn_control(elem))
            else:
                controls.append(self.build_control(elem))
        return controls

    def build_withdrawn_control(self, elem: CprtElement) -> Control:
        """Build a withdrawn control: a status marker plus redirect links."""
        logger.debug("Control %s is withdrawn", elem.element_identifier)
        control = Control(
            id=to_token(elem.element_identifier),
            class_=elem.element_type,
            title=elem.element_identifier,
        )
        control.props.append(build_withdrawn_prop())
        control.links = self.build_withdrawn_links(elem)
        return control

    def build_control(self, elem: CprtElement) -> Control:
        """Build a full control for a requirement element."""
        d = self.descriptor
        gid = elem.global_identifier
        logger.debug("Building control %s", elem.element_identifier)

        control = Control(
            id=to_token(elem.element_identifier),
            class_=elem.element_type,
            title=escape_square_brackets_with_parentheses(elem.title),
        )
        control.props.append(build_label_prop(f"{elem.title} ({elem.element_identifier})"))
        control.parts.append(self.build_text_part(elem, "statement"))

        if d.discussion_type:
            for discussion in self.graph.by_relation(gid, d.discussion_type, d.structural_relation):
                control.parts.append(self.build_text_part(discussion, "guidance"))

        objectives = self.find_objectives(elem)
        for objective in objectives:
            control.parts.append(self.build_objective_part(objective))

        for method_type in d.method_types:
            for method in self.graph.by_relation(gid, method_type, d.structural_relation):
                control.parts.append(self.build_method_part(method))

        control.params = self.build_params(objectives)
        control.links.extend(self.build_external_reference_links(elem))
        control.links.extend(self.build_reference_links(elem))
        control.controls = self.build_subcontrols(gid)
        return control

    def build_subcontrols(self, parent_id: str) -> list[Control]:
        """Build sub-controls, each with a statement holding its items."""
        d = self.descriptor
        if d.subrequirement_type is None:
            return []
        controls = []
        for elem in self.graph.by_relation(
            parent_id, d.subrequirement_type, d.structural_relation
        ):
            statement = self.build_text_part(elem, "statement")
            statement.parts = self.build_items(elem.global_identifier)
            control = Control(id=to_token(elem.element_identifier), class_=elem.element_type)
            control.parts.append(statement)
            control.props.append(build_label_prop(elem.element_identifier))
            controls.append(control)
        return controls

    def build_items(self, parent_id: str) -> list[Part]:
        """Build nested item parts until an element has no more children.

        Leaf detection is an explicit existence query. A broken reference
        met while building this level ends the branch here, unless
        strict_leaf_references is set.
        """
        d = self.descriptor
        if d.item_type is None:
            return []
        if not self.graph.has_children(parent_id, d.item_type, d.structural_relation):
            return []
        try:
            return [
                self.build_item(elem)
                for elem in self.graph.by_relation(parent_id, d.item_type, d.structural_relation)
            ]
        except DataIntegrityError as e:
            if self.strict_leaf_references:
                raise
            logger.warning("Ending branch at %s: %s", parent_id, e)
            return []

    def build_item(self, elem: CprtElement) -> Part:
        part = self.build_text_part(elem, "item")
        part.id = to_token(elem.element_identifier)
        part.parts = self.build_items(elem.global_identifier)
        part.props.append(build_label_prop(elem.element_identifier))
        return part

    # ─────────────────────────────────────────────────────────────────────
    # Parts and parameters
    # ─────────────────────────────────────────────────────────────────────

    def find_placeholder_identifiers(self, elem: CprtElement) -> list[str]:
        """Resolve the placeholders a statement refers to implicitly.

        Hops from the element to its objective children, then from each
        objective to its placeholder children.

        Returns:
            Placeholder identifiers in discovery order, without duplicates.
        """
        d = self.descriptor
        if not d.objective_type or not d.placeholder_type:
            return []
        identifiers: list[str] = []
        for objective in self.graph.by_relation(
            elem.global_identifier, d.objective_type, d.structural_relation
        ):
            for placeholder in self.graph.by_relation(
                objective.global_identifier, d.placeholder_type, d.structural_relation
            ):
                if placeholder.element_identifier not in identifiers:
                    identifiers.append(placeholder.element_identifier)
        return identifiers

    def build_text_part(self, elem: CprtElement, name: str) -> Part:
        """Build a part from an element's text, with implicit placeholders rewritten."""
        text = rewrite_bracket_placeholders(
            elem.text, self.find_placeholder_identifiers(elem), self._bracket_pattern
        )
        return Part(
            name=name,
            id=f"{to_token(elem.element_identifier)}_{name}",
            prose=prose(text),
        )

    def find_objectives(self, elem: CprtElement) -> list[CprtElement]:
        """Return the assessment objectives of a requirement.

        Objectives are matched by identifier containment, which also picks
        up objectives attached to the requirement's sub-requirements.
        """
        if not self.descriptor.objective_type:
            return []
        return self.graph.by_type_and_identifier_contains(
            self.descriptor.objective_type, elem.element_identifier
        )

    def build_objective_part(self, elem: CprtElement) -> Part:
        """Build an assessment objective with its tagged placeholders inserted."""
        return Part(
            name="assessment-objective",
            id=f"{to_token(elem.element_identifier)}_assessment-objective",
            props=[build_label_prop(elem.element_identifier)],
            prose=prose(rewrite_tagged_placeholders(elem.text)),
        )

    def build_method_part(self, elem: CprtElement) -> Part:
        """Build an assessment method with one paragraph per assessment object."""
        d = self.descriptor
        objects = Part(
            name="assessment-objects",
            prose=prose(
                rewrite_inline_list(
                    elem.text,
                    d.method_list_prefix,
                    d.method_list_suffix,
                    d.method_list_separator,
                )
            ),
        )
        return Part(
            name="assessment-method",
            id=f"{to_token(elem.element_identifier)}_assessment-method_{elem.element_type}",
            props=[build_prop("method", elem.element_type.upper())],
            parts=[objects],
        )

    def build_params(self, objectives: list[CprtElement]) -> list[Parameter]:
        """Build one parameter per distinct placeholder tagged in the objectives."""
        params: list[Parameter] = []
        seen: set[str] = set()
        for objective in objectives:
            for identifier in find_tagged_placeholders(objective.text):
                if identifier in seen:
                    continue
                seen.add(identifier)
                params.append(self.build_param(identifier, objective))
        return params

    def build_param(self, identifier: str, objective: CprtElement) -> Parameter:
        """Build a parameter for a placeholder referenced by an objective.

        The placeholder element lives in the objective's document.

        Raises:
            DataIntegrityError: If the placeholder element does not exist.
        """
        global_id = make_global_identifier(objective.doc_identifier, identifier)
        placeholder = self.graph.by_id(global_id)
        if placeholder is None:
            raise DataIntegrityError(objective.global_identifier, global_id)

        param = Parameter(id=to_token(identifier), label=escape_square_brackets(identifier))
        param.props.append(build_label_prop(identifier))
        guidance = prose(placeholder.text)
        if guidance:
            param.guidelines.append(Guideline(prose=guidance))
        return param

    # ─────────────────────────────────────────────────────────────────────
    # Links
    # ─────────────────────────────────────────────────────────────────────

    def build_withdrawn_links(self, elem: CprtElement) -> list[Link]:
        """Link a withdrawn control to the controls that replaced it.

        The redirect relations hang off the withdraw-reason children of the
        element, not off the element itself.
        """
        d = self.descriptor
        if not d.withdraw_reason_type:
            return []
        links = []
        for reason in self.graph.by_relation(
            elem.global_identifier, d.withdraw_reason_type, d.structural_relation
        ):
            for relation, rel in d.redirect_relations.items():
                for identifier in self.graph.by_relation_identifiers_only(
                    reason.global_identifier, relation
                ):
                    links.append(Link(href=f"#{to_token(identifier)}", rel=rel))
        return links

    def build_external_reference_links(self, elem: CprtElement) -> list[Link]:
        """Link a control to the external catalog controls it references."""
        d = self.descriptor
        if not d.external_reference_relation:
            return []
        links = []
        for identifier in self.graph.by_relation_identifiers_only(
            elem.global_identifier, d.external_reference_relation
        ):
            resource = self._external_resources.get(identifier)
            if resource is None:
                resource = Resource(
                    title=identifier,
                    rlinks=[
                        ResourceLink(href=self.external_catalog_url.format(identifier=identifier))
                    ],
                )
                self._external_resources[identifier] = resource
            links.append(self.back_matter.link_to(resource, d.external_reference_rel))
        return links

    def build_reference_links(self, elem: CprtElement) -> list[Link]:
        """Link a control to its supporting publications."""
        d = self.descriptor
        if not d.reference_type:
            return []
        links = []
        for reference in self.graph.by_relation(
            elem.global_identifier, d.reference_type, d.structural_relation
        ):
            resource = self._reference_resources.get(reference.global_identifier)
            if resource is None:
                resource = build_resource(reference)
                self._reference_resources[reference.global_identifier] = resource
            links.append(self.back_matter.link_to(resource, d.reference_rel))
        return links


def build_resource(elem: CprtElement) -> Resource:
    """Build a publication resource: identifier as title, title as citation, text as URL."""
    resource = Resource(title=elem.element_identifier)
    if elem.title:
        resource.citation = Citation(text=elem.title)
    if elem.text:
        resource.rlinks.append(ResourceLink(href=elem.text.strip()))
    return resource

"""ElementGraph - Indexed, read-only view over a CPRT export.

The export is a flat list of elements and a flat list of relationships.
ElementGraph indexes both once at construction:
- elements by global identifier ("doc:element")
- relationships by source, and by (source, relation type)

All traversal performed by the catalog builder goes through the queries
defined here.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable, Iterator

from capordino.cprt.models import CprtElement, CprtRelationship

logger = logging.getLogger(__name__)


class DataIntegrityError(ValueError):
    """A relationship points at an element that is not in the graph.

    Attributes:
        source_id: Global identifier of the element the query started from.
        dest_id: Global identifier that could not be resolved.
        relationship: The offending relationship, if the reference came
            from one rather than from element text.
    """

    def __init__(
        self, source_id: str, dest_id: str, relationship: CprtRelationship | None = None
    ) -> None:
        self.source_id = source_id
        self.dest_id = dest_id
        self.relationship = relationship
        super().__init__(
            f"Error getting elements related to {source_id}. "
            f"Destination identifier {dest_id} not found"
        )


class ElementGraph:
    """Container for the elements and relationships of one CPRT export.

    Example:
        graph = ElementGraph.from_export(export["elements"])
        for family in graph.elements_of_type("family"):
            graph.by_relation(family.global_identifier, "requirement", "projection")
    """

    def __init__(
        self,
        elements: Iterable[CprtElement],
        relationships: Iterable[CprtRelationship],
    ) -> None:
        self._elements: list[CprtElement] = list(elements)
        self._relationships: list[CprtRelationship] = list(relationships)

        self._index: dict[str, CprtElement] = {}
        for element in self._elements:
            self._index[element.global_identifier] = element

        self._by_source: dict[str, list[CprtRelationship]] = defaultdict(list)
        self._by_source_and_type: dict[tuple[str, str], list[CprtRelationship]] = defaultdict(
            list
        )
        for rel in self._relationships:
            self._by_source[rel.source_global_identifier].append(rel)
            self._by_source_and_type[
                (rel.source_global_identifier, rel.relationship_identifier)
            ].append(rel)

        logger.debug(
            "Indexed %d elements and %d relationships",
            len(self._elements),
            len(self._relationships),
        )

    @classmethod
    def from_export(cls, data: dict[str, Any]) -> ElementGraph:
        """Build a graph from the ``elements`` object of a CPRT export.

        Args:
            data: Dict with "elements" and "relationships" lists.

        Returns:
            A fully indexed ElementGraph.
        """
        return cls(
            elements=(CprtElement.from_dict(e) for e in data.get("elements", [])),
            relationships=(CprtRelationship.from_dict(r) for r in data.get("relationships", [])),
        )

    # Iterator access
    def iter_elements(self) -> Iterator[CprtElement]:
        """Iterate over all elements in export order."""
        yield from self._elements

    def iter_relationships(self) -> Iterator[CprtRelationship]:
        """Iterate over all relationships in export order."""
        yield from self._relationships

    def element_count(self) -> int:
        return len(self._elements)

    def relationship_count(self) -> int:
        return len(self._relationships)

    def elements_of_type(self, element_type: str) -> list[CprtElement]:
        """Return all elements of a type, in export order."""
        return [e for e in self._elements if e.element_type == element_type]

    # Queries
    def by_id(self, global_id: str) -> CprtElement | None:
        """Find an element by global identifier.

        Args:
            global_id: Identifier of the form "doc:element".

        Returns:
            The matching element, or None if not found.
        """
        return self._index.get(global_id)

    def by_type_and_identifier_contains(
        self, element_type: str, substring: str
    ) -> list[CprtElement]:
        """Return elements of a type whose local identifier contains substring.

        Used where membership is encoded in identifiers rather than in
        relationships, e.g. the assessment objectives of a requirement.
        """
        return [
            e
            for e in self._elements
            if e.element_type == element_type and substring in e.element_identifier
        ]

    def _matching(self, source_id: str, relation_type: str | None) -> list[CprtRelationship]:
        if relation_type is None:
            return self._by_source.get(source_id, [])
        return self._by_source_and_type.get((source_id, relation_type), [])

    def by_relation(
        self,
        source_id: str,
        dest_type: str,
        relation_type: str | None = None,
    ) -> list[CprtElement]:
        """Resolve the destinations of a source's relationships, filtered by type.

        Every matching relationship is resolved before type filtering, so a
        broken relationship aborts the call even when its destination would
        not have matched ``dest_type``.

        Args:
            source_id: Global identifier of the source element.
            dest_type: Element type the destinations must have.
            relation_type: Relation type tag; None matches any relation.

        Returns:
            Resolved destination elements of type ``dest_type``.

        Raises:
            DataIntegrityError: If a destination is not in the graph.
        """
        resolved: list[CprtElement] = []
        for rel in self._matching(source_id, relation_type):
            element = self._index.get(rel.dest_global_identifier)
            if element is None:
                raise DataIntegrityError(source_id, rel.dest_global_identifier, rel)
            resolved.append(element)
        return [e for e in resolved if e.element_type == dest_type]

    def by_relation_identifiers_only(self, source_id: str, relation_type: str) -> list[str]:
        """Return raw destination element identifiers without resolving them.

        Useful for relationships whose targets live outside this export,
        such as the controls a withdrawn requirement was incorporated into.
        Never raises.
        """
        return [rel.dest_element_identifier for rel in self._matching(source_id, relation_type)]

    def has_children(self, source_id: str, dest_type: str, relation_type: str) -> bool:
        """Check whether a source has children of a type under a relation.

        An unresolvable destination counts as a child, so that resolving the
        children afterwards reports it instead of silently ending the branch.
        Never raises.
        """
        for rel in self._matching(source_id, relation_type):
            element = self._index.get(rel.dest_global_identifier)
            if element is None or element.element_type == dest_type:
                return True
        return False

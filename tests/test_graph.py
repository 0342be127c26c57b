"""Tests for ElementGraph indexing and queries."""

import logging

import pytest

from capordino.cprt.graph import DataIntegrityError, ElementGraph
from tests.cprt_test_helpers import build_graph, gid, make_element, make_relationship


class TestIndexing:
    def test_counts(self, sample_graph):
        assert sample_graph.element_count() == 20
        assert sample_graph.relationship_count() == 25

    def test_iteration_preserves_export_order(self, sample_graph):
        ids = [e.element_identifier for e in sample_graph.iter_elements()]
        assert ids[:2] == ["03.01", "03.01.01"]
        assert len(list(sample_graph.iter_relationships())) == 25

    def test_elements_of_type(self, sample_graph):
        families = sample_graph.elements_of_type("family")
        assert [f.element_identifier for f in families] == ["03.01", "03.13"]

    def test_empty_export(self):
        graph = ElementGraph.from_export({})
        assert graph.element_count() == 0
        assert graph.elements_of_type("family") == []

    def test_logs_counts(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="capordino.cprt.graph"):
            build_graph([make_element("a", "family", "A")])
        assert "Indexed 1 elements and 0 relationships" in caplog.text


class TestById:
    def test_found(self, sample_graph):
        elem = sample_graph.by_id(gid("03.01.01"))
        assert elem is not None
        assert elem.title == "Account Management"

    def test_missing_returns_none(self, sample_graph):
        assert sample_graph.by_id(gid("99.99")) is None

    def test_same_identifier_in_two_documents(self):
        graph = build_graph(
            [
                make_element("X", "family", "In A", doc="A"),
                make_element("X", "family", "In B", doc="B"),
            ]
        )
        assert graph.by_id("A:X").title == "In A"
        assert graph.by_id("B:X").title == "In B"


class TestByTypeAndIdentifierContains:
    def test_objectives_by_containment(self, sample_graph):
        found = sample_graph.by_type_and_identifier_contains("determination", "03.01.01")
        assert [e.element_identifier for e in found] == ["A.03.01.01.a", "A.03.01.01.b"]

    def test_type_filter(self, sample_graph):
        assert sample_graph.by_type_and_identifier_contains("odp", "03.01.02") == []


class TestByRelation:
    def test_filters_by_type(self, sample_graph):
        found = sample_graph.by_relation(gid("03.01"), "requirement", "projection")
        assert [e.element_identifier for e in found] == ["03.01.01", "03.01.02", "03.01.13"]

    def test_any_relation(self, sample_graph):
        found = sample_graph.by_relation(gid("03.01.01.b"), "determination")
        assert [e.element_identifier for e in found] == ["A.03.01.01.b"]

    def test_no_relationships(self, sample_graph):
        assert sample_graph.by_relation(gid("03.13.08"), "requirement", "projection") == []

    def test_missing_destination_raises(self):
        graph = build_graph(
            [make_element("p", "family", "P")],
            [make_relationship("p", "ghost")],
        )
        with pytest.raises(DataIntegrityError) as exc_info:
            graph.by_relation(gid("p"), "requirement", "projection")
        err = exc_info.value
        assert err.source_id == gid("p")
        assert err.dest_id == gid("ghost")
        assert err.relationship is not None
        assert "Destination identifier SP_800_171_3_0_0:ghost not found" in str(err)

    def test_missing_destination_raises_even_if_type_would_not_match(self):
        graph = build_graph(
            [make_element("p", "family", "P"), make_element("c", "requirement", "C")],
            [make_relationship("p", "c"), make_relationship("p", "ghost")],
        )
        with pytest.raises(DataIntegrityError):
            graph.by_relation(gid("p"), "discussion", "projection")

    def test_external_reference_is_not_resolved_for_other_relations(self, sample_graph):
        # AC-02 is outside the export, but only under external_reference
        found = sample_graph.by_relation(gid("03.01.01"), "reference", "projection")
        assert [e.element_identifier for e in found] == ["SP-800-53-r5"]

    def test_external_reference_resolution_raises(self, sample_graph):
        with pytest.raises(DataIntegrityError):
            sample_graph.by_relation(gid("03.01.01"), "requirement", "external_reference")


class TestByRelationIdentifiersOnly:
    def test_unresolved_targets(self, sample_graph):
        ids = sample_graph.by_relation_identifiers_only(gid("03.01.01"), "external_reference")
        assert ids == ["AC-02", "AC-03"]

    def test_target_missing_from_graph(self, sample_graph):
        ids = sample_graph.by_relation_identifiers_only(gid("03.01.13_wr"), "incorporated_into")
        assert ids == ["03.01.12"]

    def test_no_match(self, sample_graph):
        assert sample_graph.by_relation_identifiers_only(gid("03.13"), "addressed_by") == []


class TestHasChildren:
    def test_true(self, sample_graph):
        assert sample_graph.has_children(gid("03.01.01.b"), "security_requirement", "projection")

    def test_false_for_leaf(self, sample_graph):
        assert not sample_graph.has_children(
            gid("03.01.01.b.01"), "security_requirement", "projection"
        )

    def test_false_when_only_other_types(self, sample_graph):
        assert not sample_graph.has_children(gid("03.01.02"), "security_requirement", "projection")

    def test_unresolved_destination_counts(self):
        graph = build_graph(
            [make_element("p", "security_requirement")],
            [make_relationship("p", "ghost")],
        )
        assert graph.has_children(gid("p"), "security_requirement", "projection")

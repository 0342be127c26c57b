"""Tests for CatalogAssembler front matter."""

import uuid
from datetime import datetime, timezone
from itertools import count

import pytest

from capordino.config import merge_configs
from capordino.config.defaults import DEFAULT_CONFIG
from capordino.conversion.assembler import CatalogAssembler, convert
from capordino.conversion.descriptor import CSF_2_0, FrameworkMismatchError
from capordino.cprt.models import CprtMetadataVersion

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _uuid_sequence():
    counter = count(1)
    return lambda: uuid.UUID(int=next(counter))


@pytest.fixture
def assembler():
    return CatalogAssembler(uuid_factory=_uuid_sequence(), now=lambda: FIXED_NOW)


@pytest.fixture
def catalog(assembler, sample_graph, sample_version, descriptor):
    return assembler.assemble(sample_graph, sample_version, descriptor)


class TestMetadata:
    def test_title_and_version(self, catalog):
        metadata = catalog.metadata
        assert metadata.title.startswith("Protecting Controlled Unclassified Information")
        assert metadata.version == "3.0.0"
        assert metadata.oscal_version == "v1.1.2"
        assert metadata.last_modified == FIXED_NOW
        assert metadata.published == datetime(2024, 5, 14, tzinfo=timezone.utc)

    def test_cprt_props(self, catalog):
        props = {p.name: p for p in catalog.metadata.props}
        assert props["framework-identifier"].value == "SP_800_171_3_0_0"
        assert props["framework-version-identifier"].value == "SP_800_171_3_0_0"
        assert props["publication-status"].value == "Final"
        assert "CAPORDINO" in props["generated-by"].value
        assert all(p.ns == "https://csrc.nist.gov/ns/cprt" for p in props.values())

    def test_web_site_link(self, catalog):
        links = catalog.metadata.links
        assert [link.rel for link in links] == ["alternate"]
        resource = catalog.back_matter.resources[0]
        assert links[0].href == f"#{resource.uuid}"
        assert resource.rlinks[0].href == "https://csrc.nist.gov/pubs/sp/800/171/r3/final"
        assert resource.rlinks[0].media_type == "application/html"

    def test_canonical_link_when_version_site_present(self, assembler, sample_graph, descriptor):
        version = CprtMetadataVersion(
            "SP_800_171_3_0_0",
            "SP_800_171_3_0_0",
            framework_version_web_site="https://example.org/v3",
        )
        catalog = assembler.assemble(sample_graph, version, descriptor)
        assert [link.rel for link in catalog.metadata.links] == ["canonical"]

    def test_publisher_party_and_roles(self, catalog):
        metadata = catalog.metadata
        publisher = metadata.parties[0]
        assert publisher.name == "National Institute of Standards and Technology"
        assert publisher.short_name == "NIST"
        assert publisher.email_addresses == ["capordino@nist.gov"]
        assert publisher.addresses[0].city == "Gaithersburg"
        assert [r.id for r in metadata.roles] == ["publisher", "contact", "author"]
        assert metadata.responsible_parties[0].party_uuids == [publisher.uuid]
        assert metadata.responsible_parties[1].party_uuids == [publisher.uuid]

    def test_author_party_from_poc(self, catalog):
        author = catalog.metadata.parties[1]
        assert author.email_addresses == ["sec-cert@nist.gov"]
        assert catalog.metadata.responsible_parties[2].role_id == "author"
        assert catalog.metadata.responsible_parties[2].party_uuids == [author.uuid]

    def test_no_author_without_poc(self, assembler, sample_graph, descriptor):
        version = CprtMetadataVersion("SP_800_171_3_0_0", "SP_800_171_3_0_0")
        catalog = assembler.assemble(sample_graph, version, descriptor)
        assert len(catalog.metadata.parties) == 1
        assert [r.id for r in catalog.metadata.roles] == ["publisher", "contact"]
        assert catalog.metadata.props[-1].name == "generated-by"

    def test_configured_publisher(self, sample_graph, sample_version, descriptor):
        config = merge_configs(DEFAULT_CONFIG, {"publisher": {"name": "Example Org", "email": ""}})
        catalog = CatalogAssembler(config).assemble(sample_graph, sample_version, descriptor)
        publisher = catalog.metadata.parties[0]
        assert publisher.name == "Example Org"
        assert publisher.email_addresses == []


class TestCatalog:
    def test_uuids_from_factory(self, catalog):
        # publisher, author, then catalog
        assert catalog.uuid == uuid.UUID(int=3)

    def test_groups_and_back_matter(self, catalog):
        assert [g.id for g in catalog.groups] == ["03.01", "03.13"]
        titles = [r.title for r in catalog.back_matter.resources]
        assert titles[1:] == ["AC-02", "AC-03", "SP-800-53-r5"]

    def test_framework_checked_first(self, assembler, sample_graph, sample_version):
        with pytest.raises(FrameworkMismatchError):
            assembler.assemble(sample_graph, sample_version, CSF_2_0)

    def test_empty_back_matter_is_omitted(self, sample_graph):
        version = CprtMetadataVersion("CSF_2_0_0", "CSF_2_0_0")
        catalog = CatalogAssembler().assemble(sample_graph, version, CSF_2_0)
        assert catalog.groups == []
        assert catalog.back_matter is None

    def test_convert(self, sample_graph, sample_version, descriptor):
        catalog = convert(sample_graph, sample_version, descriptor)
        assert len(catalog.groups) == 2
        assert catalog.metadata.last_modified.tzinfo is not None

    def test_strict_flag_from_config(self, sample_version, descriptor):
        from tests.cprt_test_helpers import build_graph, make_element, make_relationship

        graph = build_graph(
            [
                make_element("03.01", "family", "F"),
                make_element("03.01.01", "requirement", "R"),
                make_element("03.01.01.a", "security_requirement", "", "x"),
                make_element("03.01.01.a.1", "security_requirement", "", "y"),
            ],
            [
                make_relationship("03.01", "03.01.01"),
                make_relationship("03.01.01", "03.01.01.a"),
                make_relationship("03.01.01.a", "03.01.01.a.1"),
                make_relationship("03.01.01.a.1", "ghost"),
            ],
        )
        lenient = CatalogAssembler().assemble(graph, sample_version, descriptor)
        assert lenient.groups[0].controls[0].controls[0].parts[0].parts == []

        from capordino.cprt.graph import DataIntegrityError

        config = merge_configs(DEFAULT_CONFIG, {"conversion": {"strict_leaf_references": True}})
        with pytest.raises(DataIntegrityError):
            CatalogAssembler(config).assemble(graph, sample_version, descriptor)

"""Pytest fixtures for capordino tests."""

import json

import pytest


@pytest.fixture
def sample_graph():
    """Sample SP 800-171 r3 export as an ElementGraph."""
    from tests.cprt_test_helpers import sample_graph

    return sample_graph()


@pytest.fixture
def sample_version():
    """Metadata for the sample export."""
    from capordino.cprt.loader import select_version
    from tests.cprt_test_helpers import sample_metadata

    return select_version(sample_metadata())


@pytest.fixture
def descriptor():
    """Built-in SP 800-171 r3 descriptor."""
    from capordino.conversion.descriptor import SP_800_171_R3

    return SP_800_171_R3


@pytest.fixture
def builder(sample_graph, descriptor):
    """Fresh CatalogBuilder over the sample graph."""
    from capordino.conversion.builder import CatalogBuilder

    return CatalogBuilder(sample_graph, descriptor)


@pytest.fixture
def export_files(tmp_path):
    """Sample export and metadata written to JSON files."""
    from tests.cprt_test_helpers import sample_export, sample_metadata

    export_path = tmp_path / "cprt_800-171r3.json"
    metadata_path = tmp_path / "metadata.json"
    export_path.write_text(json.dumps(sample_export()), encoding="utf-8")
    metadata_path.write_text(json.dumps(sample_metadata()), encoding="utf-8")
    return export_path, metadata_path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from real config files and CAPORDINO_* variables."""
    import os

    for name in list(os.environ):
        if name.startswith("CAPORDINO_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)

"""Load CPRT exports and metadata from local JSON files.

Both the raw export response of the CPRT API ({"elements": {...}}) and the
bare elements object ({"elements": [...], "relationships": [...]}) are
accepted, so saved API responses and hand-trimmed fixtures load the same way.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from capordino.cprt.graph import ElementGraph
from capordino.cprt.models import CprtMetadataVersion


def unwrap_export(data: dict[str, Any]) -> dict[str, Any]:
    """Return the object holding the element and relationship lists."""
    elements = data.get("elements")
    if isinstance(elements, dict):
        return elements
    return data


def load_export(path: Path | str) -> ElementGraph:
    """Load a CPRT export file into an ElementGraph.

    Args:
        path: Path to a JSON export.

    Returns:
        Indexed ElementGraph.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return ElementGraph.from_export(unwrap_export(data))


def select_version(
    data: dict[str, Any], framework_version_identifier: str | None = None
) -> CprtMetadataVersion:
    """Pick one framework version out of a metadata payload.

    Args:
        data: Either a metadata response with a "versions" list or a
              single version entry.
        framework_version_identifier: Version to select from a listing.
              Required when the listing has more than one entry.

    Returns:
        The selected CprtMetadataVersion.

    Raises:
        ValueError: If the version cannot be determined.
    """
    if "versions" not in data:
        return CprtMetadataVersion.from_dict(data)

    versions = data["versions"]
    if framework_version_identifier is None:
        if len(versions) != 1:
            raise ValueError(
                f"Metadata lists {len(versions)} framework versions; "
                "specify which one to use"
            )
        return CprtMetadataVersion.from_dict(versions[0])

    for entry in versions:
        if entry.get("frameworkVersionIdentifier") == framework_version_identifier:
            return CprtMetadataVersion.from_dict(entry)
    raise ValueError(f"Framework version '{framework_version_identifier}' not found in metadata")


def load_metadata(
    path: Path | str, framework_version_identifier: str | None = None
) -> CprtMetadataVersion:
    """Load framework version metadata from a JSON file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return select_version(data, framework_version_identifier)

"""OSCAL Serialization - Export a Catalog to JSON and Markdown.

This module provides functions to serialize the catalog model to
JSON-compatible dicts using OSCAL key names, and to render a Markdown
preview of the catalog.
"""

from __future__ import annotations

import dataclasses
import json
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from capordino.oscal.model import Catalog

# Fields that never appear in the OSCAL output
_INTERNAL_FIELDS = {"namespace"}


def oscal_key(field_name: str) -> str:
    """Map a dataclass field name to its OSCAL JSON key."""
    if field_name == "class_":
        return "class"
    return field_name.replace("_", "-")


def to_oscal(value: Any) -> Any:
    """Convert a model object (or a value inside one) to JSON-compatible data.

    None values and empty lists are omitted from objects, as OSCAL
    forbids empty arrays.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result: dict[str, Any] = {}
        for f in dataclasses.fields(value):
            if f.name in _INTERNAL_FIELDS:
                continue
            item = getattr(value, f.name)
            if item is None or (isinstance(item, list) and not item):
                continue
            result[oscal_key(f.name)] = to_oscal(item)
        return result
    if isinstance(value, list):
        return [to_oscal(v) for v in value]
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def serialize_catalog(catalog: Catalog) -> dict[str, Any]:
    """Serialize a Catalog to an OSCAL JSON document.

    Args:
        catalog: The catalog to serialize.

    Returns:
        Dict of the form {"catalog": {...}}.
    """
    return {"catalog": to_oscal(catalog)}


def to_json(catalog: Catalog, indent: int = 2) -> str:
    """Serialize a Catalog to an OSCAL JSON string."""
    return json.dumps(serialize_catalog(catalog), indent=indent, ensure_ascii=False)


def render_markdown(catalog: Catalog) -> str:
    """Render a human-readable Markdown preview of a catalog.

    Args:
        catalog: The catalog to render.

    Returns:
        Markdown string.
    """
    from jinja2 import Environment, PackageLoader

    env = Environment(
        loader=PackageLoader("capordino", "templates"),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    template = env.get_template("catalog.md.j2")

    resources = {}
    if catalog.back_matter is not None:
        resources = {f"#{r.uuid}": r for r in catalog.back_matter.resources}

    return template.render(catalog=catalog, resources=resources)

"""Schema loading and normalization service."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from .schema_models import SchemaDocument


class SchemaError(Exception):
    """Raised for schema reading or parsing failures."""


def load_schema_document(schema_path: Path | str) -> SchemaDocument:
    """Read, parse and normalize a schema file."""
    path = Path(schema_path)
    if not path.exists():
        raise SchemaError(f"Schema file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaError(f"Failed to read schema file {path}: {exc}") from exc
    return parse_schema_text(text, source_path=path)


def parse_schema_text(text: str, *, source_path: Path | None = None) -> SchemaDocument:
    """Parse schema text into a normalized document."""
    label = source_path or "inline schema"
    try:
        root = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Invalid JSON in {label}: {exc}") from exc
    if not isinstance(root, (Mapping, bool)):
        raise SchemaError(f"Schema root in {label} must be an object or a boolean.")
    return SchemaDocument(root=normalize_schema(root), source_path=source_path)


def normalize_schema(node: Any) -> Any:
    """Return a copy of ``node`` using only standard ``required`` lists.

    Some schema generators mark a property with ``required: true`` instead of
    listing it in the parent's ``required`` array. Those hints are moved to
    the parent, the merged list is sorted, and object properties are ordered
    by name so the result does not depend on generator key order. A boolean
    ``required: true`` on an object with no property-level hints marks every
    property as required.
    """
    if isinstance(node, Sequence) and not isinstance(node, str):
        return [normalize_schema(item) for item in node]
    if not isinstance(node, Mapping):
        return node

    normalized = {key: _normalize_keyword(key, value) for key, value in node.items()}
    boolean_required = normalized.get("required") is True
    explicit_required = normalized.get("required")
    properties = normalized.get("properties")

    if normalized.get("type") == "object" and isinstance(properties, Mapping):
        raw_properties = node["properties"]
        hinted = [
            name
            for name in sorted(raw_properties)
            if isinstance(raw_properties[name], Mapping)
            and raw_properties[name].get("required") is True
        ]
        ordered = {name: properties[name] for name in sorted(properties)}
        normalized["properties"] = ordered

        if hinted:
            existing = explicit_required if isinstance(explicit_required, list) else []
            normalized["required"] = sorted({*existing, *hinted})
        elif boolean_required:
            normalized["required"] = sorted(ordered)

    if normalized.get("required") is True:
        del normalized["required"]
    return normalized


def _normalize_keyword(key: str, value: Any) -> Any:
    if key in ("properties", "patternProperties", "$defs", "definitions") and isinstance(
        value, Mapping
    ):
        return {name: normalize_schema(child) for name, child in value.items()}
    if key in ("enum", "const", "required", "examples", "default"):
        return value
    return normalize_schema(value)

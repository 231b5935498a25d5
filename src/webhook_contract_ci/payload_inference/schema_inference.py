"""Schema inference from a sample payload."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from webhook_contract_ci.schema_indexing.type_sets import TYPE_NAMES

from .payload_loader import PayloadError


def infer_schema_from_payload(payload: Any) -> dict[str, Any]:
    """Derive a JSON Schema describing exactly the shape of ``payload``.

    Every key observed in an object is treated as required, properties are
    ordered by name, and the element schema of an array is merged from all of
    its elements.
    """
    if payload is None:
        return {"type": "null"}
    if isinstance(payload, bool):
        return {"type": "boolean"}
    if isinstance(payload, int):
        return {"type": "integer"}
    if isinstance(payload, float):
        return {"type": "number"}
    if isinstance(payload, str):
        return {"type": "string"}
    if isinstance(payload, Mapping):
        names = sorted(payload)
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {name: infer_schema_from_payload(payload[name]) for name in names},
        }
        if names:
            schema["required"] = names
        return schema
    if isinstance(payload, Sequence):
        schema = {"type": "array"}
        if payload:
            schema["items"] = _merge_element_schemas(
                [infer_schema_from_payload(item) for item in payload]
            )
        return schema
    raise PayloadError(f"Unsupported payload value of type {type(payload).__name__}.")


def _merge_element_schemas(schemas: list[dict[str, Any]]) -> dict[str, Any]:
    first = schemas[0]
    if all(schema == first for schema in schemas[1:]):
        return first

    type_names: set[str] = set()
    for schema in schemas:
        declared = schema["type"]
        type_names.update(declared if isinstance(declared, list) else [declared])
    if type_names == {"object"}:
        return _merge_object_schemas(schemas)
    if type_names == {"array"}:
        element_schemas = [schema["items"] for schema in schemas if "items" in schema]
        merged: dict[str, Any] = {"type": "array"}
        if element_schemas:
            merged["items"] = _merge_element_schemas(element_schemas)
        return merged
    if type_names == {"integer", "number"}:
        return {"type": "number"}
    if "number" in type_names:
        type_names.discard("integer")
    return {"type": [name for name in TYPE_NAMES if name in type_names]}


def _merge_object_schemas(schemas: list[dict[str, Any]]) -> dict[str, Any]:
    collected: dict[str, list[dict[str, Any]]] = {}
    for schema in schemas:
        for name, child in schema["properties"].items():
            collected.setdefault(name, []).append(child)
    # a key is only required when every element carried it
    required = [
        name
        for name in sorted(collected)
        if all(name in schema["properties"] for schema in schemas)
    ]
    merged: dict[str, Any] = {
        "type": "object",
        "properties": {
            name: _merge_element_schemas(collected[name]) for name in sorted(collected)
        },
    }
    if required:
        merged["required"] = required
    return merged

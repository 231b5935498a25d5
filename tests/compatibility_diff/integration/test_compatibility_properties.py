"""Behavioral properties of the compatibility diff."""

from __future__ import annotations

import pytest
from webhook_contract_ci.compatibility_diff import ChangeKind, diff_indexes, diff_schemas
from webhook_contract_ci.schema_indexing import index_schema

_SCHEMAS = (
    True,
    False,
    {"type": "string", "format": "date-time"},
    {"enum": [1, 2, 3]},
    {
        "type": "object",
        "required": ["event", "data"],
        "properties": {
            "event": {"const": "invoice.paid"},
            "data": {
                "allOf": [
                    {"$ref": "#/$defs/invoice"},
                    {"properties": {"amount": {"exclusiveMinimum": 0}}},
                ]
            },
            "tags": {"type": "array", "items": {"type": "string", "maxLength": 32}},
            "extra": {"type": "object", "additionalProperties": {"type": "integer"}},
        },
        "additionalProperties": False,
        "$defs": {
            "invoice": {
                "type": "object",
                "properties": {
                    "amount": {"type": "number"},
                    "currency": {"anyOf": [{"type": "string"}, {"type": "null"}]},
                },
            }
        },
    },
)


def _is_empty(result) -> bool:
    sections = (*result.breaking_sections(), *result.informational_sections())
    return all(not entries for _, entries in sections)


@pytest.mark.parametrize("schema", _SCHEMAS)
def test_self_diff_is_empty(schema) -> None:
    result = diff_indexes(index_schema(schema), index_schema(schema))

    assert _is_empty(result)


@pytest.mark.parametrize(
    ("base", "candidate"),
    [
        ({"type": "number", "minimum": 1}, {"type": "number", "minimum": 2}),
        ({"type": "number", "exclusiveMaximum": 10}, {"type": "number", "maximum": 9}),
        ({"type": "string", "maxLength": 10}, {"type": "string", "maxLength": 5}),
        ({"type": "array", "minItems": 1}, {"type": "array", "minItems": 3}),
        ({"type": "object", "maxProperties": 4}, {"type": "object", "maxProperties": 2}),
        (
            {"type": "object", "additionalProperties": True},
            {"type": "object", "additionalProperties": False},
        ),
        (
            {
                "type": "object",
                "additionalProperties": {
                    "type": "object",
                    "required": ["id"],
                    "properties": {"id": {"type": "string"}},
                },
            },
            {"type": "object", "additionalProperties": False},
        ),
    ],
)
def test_tightening_never_breaks(base, candidate) -> None:
    assert diff_schemas(base, candidate).breaking_count == 0


def test_loosening_is_flagged() -> None:
    result = diff_schemas({"type": "number", "minimum": 10}, {"type": "number", "minimum": 5})

    assert [(entry.kind, entry.render()) for entry in result.constraints_changed] == [
        (ChangeKind.CONSTRAINT_CHANGED, "/ (minimum loosened (10 -> 5))")
    ]


def test_required_removal() -> None:
    result = diff_schemas(
        {"type": "object", "required": ["a"], "properties": {"a": {}}},
        {"type": "object", "properties": {}},
    )

    assert [entry.path for entry in result.removed_required] == ["/a"]


def test_closed_shape_violation() -> None:
    result = diff_schemas(
        {"type": "object", "properties": {"a": {}}, "additionalProperties": False},
        {"type": "object", "properties": {"a": {}, "b": {}}, "additionalProperties": False},
    )

    assert [entry.render() for entry in result.constraints_changed] == [
        "/b (new field under closed object /)"
    ]
    assert result.added == ()


def test_integer_number_subtyping() -> None:
    narrowed = diff_schemas({"type": "number"}, {"type": "integer"})
    widened = diff_schemas({"type": "integer"}, {"type": "number"})

    assert narrowed.type_changed == ()
    assert [entry.render() for entry in widened.type_changed] == [
        '/ ("integer" -> "number")'
    ]


def test_enum_widening() -> None:
    widened = diff_schemas({"enum": [1, 2, 3]}, {"enum": [1, 2, 3, 4]})
    reordered = diff_schemas({"enum": [1, 2, 3]}, {"enum": [3, 2, 1]})

    assert [entry.detail for entry in widened.constraints_changed] == ["enum widened"]
    assert reordered.breaking_count == 0


def test_additive_change_is_not_breaking() -> None:
    base = {"type": "object", "properties": {"id": {"type": "string"}}, "required": ["id"]}
    candidate = {
        "type": "object",
        "properties": {"id": {"type": "string"}, "name": {"type": "string"}},
        "required": ["id"],
    }

    result = diff_schemas(base, candidate)

    assert result.breaking_count == 0
    assert [entry.path for entry in result.added] == ["/name"]

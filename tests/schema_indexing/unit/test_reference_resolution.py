"""Reference resolver tests."""

from __future__ import annotations

import copy

from webhook_contract_ci.schema_indexing.reference_resolution import (
    lookup_fragment,
    resolve_references,
)


def test_sibling_keywords_win_over_reference_target() -> None:
    root = {"$defs": {"amount": {"type": "number", "minimum": 0, "description": "target"}}}
    node = {"$ref": "#/$defs/amount", "minimum": 5}

    resolved = resolve_references(root, node)

    assert resolved == {"type": "number", "minimum": 5, "description": "target"}
    assert "$ref" not in resolved


def test_resolution_follows_chains_and_reports_followed_references() -> None:
    root = {
        "$defs": {
            "first": {"$ref": "#/$defs/second", "title": "first"},
            "second": {"type": "string"},
        }
    }
    followed: list[str] = []

    resolved = resolve_references(root, {"$ref": "#/$defs/first"}, followed)

    assert resolved == {"type": "string", "title": "first"}
    assert followed == ["#/$defs/first", "#/$defs/second"]


def test_reference_cycle_stops_with_merged_node() -> None:
    root = {
        "$defs": {
            "a": {"$ref": "#/$defs/b", "title": "a"},
            "b": {"$ref": "#/$defs/a", "description": "b"},
        }
    }

    resolved = resolve_references(root, {"$ref": "#/$defs/a"})

    assert resolved == {"title": "a", "description": "b"}


def test_dangling_and_cross_document_references_fail_open() -> None:
    root = {"$defs": {}}

    assert resolve_references(root, {"$ref": "#/$defs/missing", "type": "string"}) == {
        "type": "string"
    }
    assert resolve_references(root, {"$ref": "other.json#/x", "minimum": 1}) == {"minimum": 1}


def test_boolean_targets_resolve_to_deny_all_or_siblings() -> None:
    root = {"$defs": {"never": False, "always": True}}

    assert resolve_references(root, {"$ref": "#/$defs/never"}) is False
    assert resolve_references(root, {"$ref": "#/$defs/always", "type": "integer"}) == {
        "type": "integer"
    }


def test_resolution_never_mutates_input() -> None:
    root = {"$defs": {"item": {"type": "object", "properties": {"id": {"type": "string"}}}}}
    snapshot = copy.deepcopy(root)

    resolved = resolve_references(root, {"$ref": "#/$defs/item", "required": ["id"]})
    resolved["properties"] = {}

    assert root == snapshot


def test_lookup_fragment_decodes_escapes_and_array_indexes() -> None:
    root = {"paths": {"a/b": [{"type": "string"}]}, "percent sign": {"const": 1}}

    assert lookup_fragment(root, "#/paths/a~1b/0") == {"type": "string"}
    assert lookup_fragment(root, "#/percent%20sign") == {"const": 1}
    assert lookup_fragment(root, "#") is root

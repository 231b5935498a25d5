"""Conservative flattening of ``allOf`` compositions.

The merge takes the tightest value where that is lossless and drops a
keyword where the branches cannot be combined without solving the schema.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .canonical_values import canonical_json
from .reference_resolution import resolve_references

_LOGGER = logging.getLogger("webhook_contract_ci.schema_indexing")
_LOGGER.addHandler(logging.NullHandler())

ChildKey = tuple[str, ...]

LOWER_BOUND_KEYWORDS = ("minimum", "exclusiveMinimum", "minLength", "minItems", "minProperties")
UPPER_BOUND_KEYWORDS = ("maximum", "exclusiveMaximum", "maxLength", "maxItems", "maxProperties")
CATEGORICAL_KEYWORDS = (
    "pattern",
    "format",
    "contentEncoding",
    "contentMediaType",
    "multipleOf",
    "propertyNames",
    "const",
)
# Handled by the type-set extractor through the retained ``allOf`` branches.
_NOT_LIFTED_KEYWORDS = frozenset({"type", "nullable", "anyOf", "oneOf", "allOf", "$ref"})
_CHILD_KEYWORDS = ("additionalProperties", "items", "prefixItems")
_RULE_KEYWORDS = frozenset(
    {
        "required",
        "properties",
        "additionalProperties",
        "enum",
        "items",
        *LOWER_BOUND_KEYWORDS,
        *UPPER_BOUND_KEYWORDS,
        *CATEGORICAL_KEYWORDS,
    }
)


def collapse_all_of(
    root: Any,
    node: Any,
    followed: list[str] | None = None,
    expanding: frozenset[str] = frozenset(),
    origins: dict[ChildKey, set[str]] | None = None,
) -> Any:
    """Return ``node`` with its ``allOf`` list merged into one synthetic node.

    The node's own keywords take part as the first branch. Nested
    conjunctions are collapsed before being merged upward. The collapsed
    branches stay available under ``allOf`` so type extraction can still
    intersect them.

    ``expanding`` holds the references already being collapsed further up
    this call chain; a branch that leads back into one of them is not
    expanded again.

    When given, ``origins`` receives, for each location directly below the
    result, the references it was reached through.
    """
    local: list[str] = []
    node = resolve_references(root, node, local)
    if followed is not None:
        followed.extend(local)
    if not isinstance(node, Mapping):
        return node
    branches = node.get("allOf")
    if not isinstance(branches, Sequence) or isinstance(branches, str) or not branches:
        _note_origins(origins, node, local)
        return node
    own_keywords = {key: value for key, value in node.items() if key != "allOf"}
    if expanding.intersection(local):
        _LOGGER.debug("not collapsing recursive allOf through %s", ", ".join(local))
        _note_origins(origins, own_keywords, local)
        return own_keywords

    expanding = expanding.union(local)
    branch_origins: dict[ChildKey, set[str]] = {}
    collapsed_branches = [
        collapse_all_of(root, branch, followed, expanding, branch_origins)
        for branch in branches
    ]
    if any(branch is False for branch in collapsed_branches):
        return False

    parts: list[Mapping[str, Any]] = [own_keywords]
    parts.extend(branch for branch in collapsed_branches if isinstance(branch, Mapping))

    merged: dict[str, Any] = dict(own_keywords)
    for part in parts[1:]:
        for key, value in part.items():
            if key in _RULE_KEYWORDS or key in _NOT_LIFTED_KEYWORDS:
                continue
            merged.setdefault(key, value)

    for key in _RULE_KEYWORDS:
        merged.pop(key, None)
    _merge_required(parts, merged)
    _merge_properties(parts, merged)
    _merge_additional_properties(parts, merged)
    _merge_bounds(parts, merged)
    _merge_categorical(parts, merged)
    _merge_enum(parts, merged)
    _merge_items(parts, merged)

    merged["allOf"] = collapsed_branches
    if origins is not None:
        _note_origins(branch_origins, own_keywords, local)
        for key, refs in branch_origins.items():
            origins.setdefault(key, set()).update(refs, local)
    return merged


def child_keys(node: Mapping[str, Any]) -> list[ChildKey]:
    """Keys naming the locations directly below ``node``."""
    keys: list[ChildKey] = []
    properties = node.get("properties")
    if isinstance(properties, Mapping):
        keys.extend(("properties", name) for name in properties)
    keys.extend((keyword,) for keyword in _CHILD_KEYWORDS if keyword in node)
    return keys


def _note_origins(
    origins: dict[ChildKey, set[str]] | None, part: Mapping[str, Any], refs: list[str]
) -> None:
    if origins is None:
        return
    for key in child_keys(part):
        origins.setdefault(key, set()).update(refs)


def _defined(parts: Sequence[Mapping[str, Any]], key: str) -> list[Any]:
    return [part[key] for part in parts if key in part]


def _merge_required(parts: Sequence[Mapping[str, Any]], merged: dict[str, Any]) -> None:
    names: list[str] = []
    for required in _defined(parts, "required"):
        if not isinstance(required, Sequence) or isinstance(required, str):
            continue
        for name in required:
            if isinstance(name, str) and name not in names:
                names.append(name)
    if names:
        merged["required"] = names


def _merge_properties(parts: Sequence[Mapping[str, Any]], merged: dict[str, Any]) -> None:
    by_name: dict[str, list[Any]] = {}
    for properties in _defined(parts, "properties"):
        if not isinstance(properties, Mapping):
            continue
        for name, schema in properties.items():
            by_name.setdefault(name, []).append(schema)
    if not by_name:
        return
    merged["properties"] = {
        name: schemas[0] if len(schemas) == 1 else {"allOf": list(schemas)}
        for name, schemas in by_name.items()
    }


def _merge_additional_properties(
    parts: Sequence[Mapping[str, Any]], merged: dict[str, Any]
) -> None:
    values = _defined(parts, "additionalProperties")
    if not values:
        return
    if any(value is False for value in values):
        merged["additionalProperties"] = False
        return
    schemas = [value for value in values if isinstance(value, Mapping)]
    if len(schemas) == 1:
        merged["additionalProperties"] = schemas[0]
    elif schemas:
        merged["additionalProperties"] = {"allOf": schemas}
    else:
        merged["additionalProperties"] = True


def _merge_bounds(parts: Sequence[Mapping[str, Any]], merged: dict[str, Any]) -> None:
    for keyword, pick in (
        *((keyword, max) for keyword in LOWER_BOUND_KEYWORDS),
        *((keyword, min) for keyword in UPPER_BOUND_KEYWORDS),
    ):
        numbers = [value for value in _defined(parts, keyword) if _is_number(value)]
        if numbers:
            merged[keyword] = pick(numbers)
        elif keyword in parts[0]:
            # Draft-4 boolean exclusive flags travel with their own node.
            merged[keyword] = parts[0][keyword]


def _merge_categorical(parts: Sequence[Mapping[str, Any]], merged: dict[str, Any]) -> None:
    for keyword in CATEGORICAL_KEYWORDS:
        values = _defined(parts, keyword)
        if not values:
            continue
        first = canonical_json(values[0])
        if all(canonical_json(value) == first for value in values[1:]):
            merged[keyword] = values[0]
        else:
            _LOGGER.debug("dropping %s: allOf branches disagree", keyword)


def _merge_enum(parts: Sequence[Mapping[str, Any]], merged: dict[str, Any]) -> None:
    enums = [
        value
        for value in _defined(parts, "enum")
        if isinstance(value, Sequence) and not isinstance(value, str)
    ]
    if not enums:
        return
    other_keys = [{canonical_json(value) for value in other} for other in enums[1:]]
    common = [
        value
        for value in enums[0]
        if all(canonical_json(value) in keys for keys in other_keys)
    ]
    if common:
        merged["enum"] = common
    else:
        _LOGGER.debug("dropping enum: allOf branches share no value")


def _merge_items(parts: Sequence[Mapping[str, Any]], merged: dict[str, Any]) -> None:
    values = _defined(parts, "items")
    if not values:
        return
    current = values[0]
    for value in values[1:]:
        if _is_schema_list(current) or _is_schema_list(value):
            continue
        current = {"allOf": [current, value]}
    merged["items"] = current


def _is_schema_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, Mapping))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

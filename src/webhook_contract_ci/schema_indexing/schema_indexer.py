"""Schema indexing service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .canonical_paths import (
    ADDITIONAL_PROPERTIES_MARKER,
    EVERY_ELEMENT_MARKER,
    ROOT_PATH,
    child_path,
    escape_token,
    tuple_element_token,
)
from .index_models import NodeInfo, SchemaIndex
from .intersection_collapsing import ChildKey, collapse_all_of
from .type_sets import TypeSet, types_of

_LOGGER = logging.getLogger("webhook_contract_ci.schema_indexing")
_LOGGER.addHandler(logging.NullHandler())


def index_schema(schema: Any) -> SchemaIndex:
    """Build the flattened structural index of ``schema``.

    Every statically reachable location gets one row keyed by its canonical
    path, in depth-first order starting at ``/``.
    """
    rows: dict[str, NodeInfo] = {}
    _walk(schema, root=schema, path=ROOT_PATH, required=True, ancestry=frozenset(), rows=rows)
    return SchemaIndex(rows)


def _walk(
    node: Any,
    *,
    root: Any,
    path: str,
    required: bool,
    ancestry: frozenset[str],
    rows: dict[str, NodeInfo],
) -> None:
    if path in rows:
        return
    followed: list[str] = []
    origins: dict[ChildKey, set[str]] = {}
    node = collapse_all_of(root, node, followed, origins=origins)
    type_set = types_of(node, root)
    rows[path] = _node_info(root, node, path=path, type_set=type_set, required=required)

    if not isinstance(node, Mapping):
        return
    if ancestry.intersection(followed):
        _LOGGER.debug("not expanding recursive reference at %s", path)
        return

    if _is_object_shaped(node, type_set):
        properties = node.get("properties")
        if isinstance(properties, Mapping):
            required_names = _required_names(node)
            for name, child in properties.items():
                _walk(
                    child,
                    root=root,
                    path=child_path(path, escape_token(name)),
                    required=name in required_names,
                    ancestry=_child_ancestry(ancestry, origins, ("properties", name)),
                    rows=rows,
                )
        extra = node.get("additionalProperties")
        if isinstance(extra, Mapping):
            _walk(
                extra,
                root=root,
                path=child_path(path, ADDITIONAL_PROPERTIES_MARKER),
                required=True,
                ancestry=_child_ancestry(ancestry, origins, ("additionalProperties",)),
                rows=rows,
            )

    if _is_array_shaped(node, type_set):
        items = node.get("items")
        tuple_items = node.get("prefixItems")
        tuple_key: ChildKey = ("prefixItems",)
        if _is_schema_list(items):
            tuple_items = items
            tuple_key = ("items",)
        elif isinstance(items, Mapping):
            _walk(
                items,
                root=root,
                path=child_path(path, EVERY_ELEMENT_MARKER),
                required=True,
                ancestry=_child_ancestry(ancestry, origins, ("items",)),
                rows=rows,
            )
        if _is_schema_list(tuple_items):
            for position, element in enumerate(tuple_items):
                if not isinstance(element, Mapping):
                    continue
                _walk(
                    element,
                    root=root,
                    path=child_path(path, tuple_element_token(position)),
                    required=True,
                    ancestry=_child_ancestry(ancestry, origins, tuple_key),
                    rows=rows,
                )


def _child_ancestry(
    ancestry: frozenset[str], origins: dict[ChildKey, set[str]], key: ChildKey
) -> frozenset[str]:
    # only refs the child was reached through, not allOf mixins of its siblings
    return ancestry.union(origins.get(key, ()))


def _node_info(
    root: Any, node: Any, *, path: str, type_set: TypeSet | None, required: bool
) -> NodeInfo:
    if not isinstance(node, Mapping):
        return NodeInfo(path=path, type_set=type_set, required=required)

    enum = node.get("enum")
    minimum, exclusive_minimum = _numeric_bound(node, "minimum", "exclusiveMinimum")
    maximum, exclusive_maximum = _numeric_bound(node, "maximum", "exclusiveMaximum")
    additional_properties = None
    if _is_object_shaped(node, type_set):
        extra = node.get("additionalProperties")
        if isinstance(extra, (bool, Mapping)):
            additional_properties = extra

    return NodeInfo(
        path=path,
        type_set=type_set,
        required=required,
        enum=tuple(enum) if _is_schema_list(enum) else None,
        const=node.get("const"),
        has_const="const" in node,
        additional_properties=additional_properties,
        property_names_pattern=_property_names_pattern(root, node.get("propertyNames")),
        minimum=minimum,
        exclusive_minimum=exclusive_minimum,
        maximum=maximum,
        exclusive_maximum=exclusive_maximum,
        multiple_of=_number(node.get("multipleOf")),
        min_length=_count(node.get("minLength")),
        max_length=_count(node.get("maxLength")),
        pattern=_text(node.get("pattern")),
        format=_text(node.get("format")),
        content_encoding=_text(node.get("contentEncoding")),
        content_media_type=_text(node.get("contentMediaType")),
        min_items=_count(node.get("minItems")),
        max_items=_count(node.get("maxItems")),
        min_properties=_count(node.get("minProperties")),
        max_properties=_count(node.get("maxProperties")),
    )


def _numeric_bound(
    node: Mapping[str, Any], inclusive_key: str, exclusive_key: str
) -> tuple[int | float | None, int | float | None]:
    inclusive = _number(node.get(inclusive_key))
    exclusive_flag = node.get(exclusive_key)
    if exclusive_flag is True:
        # draft-4 spelling: the boolean turns the inclusive bound exclusive
        return None, inclusive
    return inclusive, _number(exclusive_flag)


def _property_names_pattern(root: Any, property_names: Any) -> str | None:
    resolved = collapse_all_of(root, property_names)
    if isinstance(resolved, Mapping):
        return _text(resolved.get("pattern"))
    return None


def _required_names(node: Mapping[str, Any]) -> frozenset[str]:
    required = node.get("required")
    if not _is_schema_list(required):
        return frozenset()
    return frozenset(name for name in required if isinstance(name, str))


def _is_object_shaped(node: Mapping[str, Any], type_set: TypeSet | None) -> bool:
    if type_set is not None and "object" in type_set:
        return True
    return isinstance(node.get("properties"), Mapping)


def _is_array_shaped(node: Mapping[str, Any], type_set: TypeSet | None) -> bool:
    if type_set is not None and "array" in type_set:
        return True
    return "items" in node or "prefixItems" in node


def _is_schema_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, Mapping))


def _number(value: Any) -> int | float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


def _count(value: Any) -> int | None:
    number = _number(value)
    return int(number) if number is not None else None


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None

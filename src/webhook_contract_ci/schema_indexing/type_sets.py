"""Type-set extraction for schema nodes."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from .intersection_collapsing import collapse_all_of

TYPE_NAMES = ("null", "boolean", "integer", "number", "string", "array", "object")
UNCONSTRAINED_LABEL = "unconstrained"

TypeSet = tuple[str, ...]


def types_of(
    node: Any, root: Any = None, expanding: frozenset[str] = frozenset()
) -> TypeSet | None:
    """Return the JSON type names ``node`` can produce, or ``None`` if unconstrained.

    A direct ``type`` is used verbatim (``nullable: true`` adds ``"null"``).
    Without one, ``anyOf``/``oneOf`` contribute the union of their branches
    and ``allOf`` the intersection of its branches, where ``integer`` is a
    subtype of ``number``. An intersection that empties out is reported as
    unconstrained instead of impossible.

    When ``root`` is given, disjunction branches are resolved and collapsed
    against it before extraction; a branch that refers back into a reference
    listed in ``expanding`` contributes nothing.
    """
    if not isinstance(node, Mapping):
        return None

    direct = _direct_types(node)
    if direct is not None:
        return direct

    disjunctions = [
        node[keyword] for keyword in ("anyOf", "oneOf") if _is_branch_list(node.get(keyword))
    ]
    if disjunctions:
        unions = [
            _union(_branch_types(branches, root, expanding)) for branches in disjunctions
        ]
        return _intersect_all(unions)

    if _is_branch_list(node.get("allOf")):
        return _intersect_all(types_of(branch, root, expanding) for branch in node["allOf"])
    return None


def allows(allowed: TypeSet, type_name: str) -> bool:
    """Return whether ``type_name`` is accepted by the ``allowed`` set."""
    if type_name in allowed:
        return True
    return type_name == "integer" and "number" in allowed


def is_covered(outer: TypeSet | None, inner: TypeSet | None) -> bool:
    """Return whether every type in ``inner`` is accepted by ``outer``."""
    if outer is None:
        return True
    if inner is None:
        return False
    return all(allows(outer, type_name) for type_name in inner)


def render_type_set(type_set: TypeSet | None) -> str:
    if type_set is None:
        return UNCONSTRAINED_LABEL
    if len(type_set) == 1:
        return json.dumps(type_set[0])
    return json.dumps(list(type_set))


def _direct_types(node: Mapping[str, Any]) -> TypeSet | None:
    declared = node.get("type")
    if isinstance(declared, str):
        names = [declared]
    elif isinstance(declared, Sequence) and not isinstance(declared, str):
        names = _unique(name for name in declared if isinstance(name, str))
    else:
        return None
    if not names:
        return None
    if node.get("nullable") is True and "null" not in names:
        names.append("null")
    return tuple(names)


def _branch_types(
    branches: Sequence[Any], root: Any, expanding: frozenset[str]
) -> list[TypeSet | None]:
    if root is None:
        return [types_of(branch) for branch in branches]
    type_sets: list[TypeSet | None] = []
    for branch in branches:
        followed: list[str] = []
        resolved = collapse_all_of(root, branch, followed)
        if expanding.intersection(followed):
            type_sets.append(None)
            continue
        type_sets.append(types_of(resolved, root, expanding.union(followed)))
    return type_sets


def _union(type_sets: Iterable[TypeSet | None]) -> TypeSet | None:
    names = _unique(name for type_set in type_sets if type_set for name in type_set)
    return tuple(names) if names else None


def _intersect_all(type_sets: Iterable[TypeSet | None]) -> TypeSet | None:
    result: TypeSet | None = None
    for type_set in type_sets:
        if type_set is None:
            continue
        result = type_set if result is None else _intersect(result, type_set)
        if not result:
            return None
    return result


def _intersect(left: TypeSet, right: TypeSet) -> TypeSet:
    names: list[str] = []
    for left_name in left:
        for right_name in right:
            common = _common_type(left_name, right_name)
            if common is not None and common not in names:
                names.append(common)
    return tuple(names)


def _common_type(left: str, right: str) -> str | None:
    numeric = {"integer", "number"}
    if left in numeric and right in numeric:
        return "number" if left == right == "number" else "integer"
    return left if left == right else None


def _is_branch_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str) and len(value) > 0


def _unique(names: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return seen

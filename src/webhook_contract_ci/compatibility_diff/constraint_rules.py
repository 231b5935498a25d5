"""Constraint rules flagging a candidate node that accepts more than its base.

Each rule fires only when both sides define the keyword it inspects; a
keyword that disappears entirely is not reported here.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator, Mapping, Sequence
from fractions import Fraction
from typing import Any

from webhook_contract_ci.schema_indexing import NodeInfo, canonical_json

Number = int | float
Bound = tuple[Number, bool, str]
ConstraintRule = Callable[[NodeInfo, NodeInfo], Iterator[str]]

_LOWER_COUNT_BOUNDS = (
    ("min_length", "minLength"),
    ("min_items", "minItems"),
    ("min_properties", "minProperties"),
)
_UPPER_COUNT_BOUNDS = (
    ("max_length", "maxLength"),
    ("max_items", "maxItems"),
    ("max_properties", "maxProperties"),
)
_CATEGORICAL_KEYWORDS = (
    ("pattern", "pattern"),
    ("format", "format"),
    ("content_encoding", "contentEncoding"),
    ("content_media_type", "contentMediaType"),
    ("property_names_pattern", "propertyNames pattern"),
)


def loosened_constraints(base: NodeInfo, candidate: NodeInfo) -> list[str]:
    """Return one reason per constraint the candidate loosened."""
    reasons: list[str] = []
    for rule in _RULES:
        reasons.extend(rule(base, candidate))
    return reasons


def _enum_widened(base: NodeInfo, candidate: NodeInfo) -> Iterator[str]:
    if base.enum is None:
        return
    candidate_values = _allowed_values(candidate)
    if candidate_values is not None and not _is_subset(candidate_values, base.enum):
        yield "enum widened"


def _const_changed(base: NodeInfo, candidate: NodeInfo) -> Iterator[str]:
    if not base.has_const:
        return
    if candidate.has_const:
        before, after = canonical_json(base.const), canonical_json(candidate.const)
        if before != after:
            yield f"const changed ({before} -> {after})"
    elif candidate.enum is not None and not _is_subset(candidate.enum, (base.const,)):
        yield "const widened to enum"


def _additional_properties_loosened(base: NodeInfo, candidate: NodeInfo) -> Iterator[str]:
    before = base.additional_properties
    after = candidate.additional_properties
    if before is None or after is None:
        return
    if before is False and after is not False:
        yield "additionalProperties opened"
    elif isinstance(before, Mapping) and after is True:
        yield "additionalProperties loosened to permissive"


def _numeric_bounds_loosened(base: NodeInfo, candidate: NodeInfo) -> Iterator[str]:
    before, after = _lower_bound(base), _lower_bound(candidate)
    if before is not None and after is not None:
        if after[0] < before[0] or (after[0] == before[0] and before[1] and not after[1]):
            yield _bound_reason("lower bound", before, after)

    before, after = _upper_bound(base), _upper_bound(candidate)
    if before is not None and after is not None:
        if after[0] > before[0] or (after[0] == before[0] and before[1] and not after[1]):
            yield _bound_reason("upper bound", before, after)


def _multiple_of_changed(base: NodeInfo, candidate: NodeInfo) -> Iterator[str]:
    before, after = base.multiple_of, candidate.multiple_of
    if before is None or after is None or before == after:
        return
    if not _is_exact_multiple(after, before):
        yield f"multipleOf changed ({_number_text(before)} -> {_number_text(after)})"


def _count_bounds_loosened(base: NodeInfo, candidate: NodeInfo) -> Iterator[str]:
    for attribute, keyword in _LOWER_COUNT_BOUNDS:
        before, after = getattr(base, attribute), getattr(candidate, attribute)
        if before is not None and after is not None and after < before:
            yield f"{keyword} loosened ({before} -> {after})"
    for attribute, keyword in _UPPER_COUNT_BOUNDS:
        before, after = getattr(base, attribute), getattr(candidate, attribute)
        if before is not None and after is not None and after > before:
            yield f"{keyword} loosened ({before} -> {after})"


def _categorical_changed(base: NodeInfo, candidate: NodeInfo) -> Iterator[str]:
    for attribute, label in _CATEGORICAL_KEYWORDS:
        before, after = getattr(base, attribute), getattr(candidate, attribute)
        if before is not None and after is not None and before != after:
            yield f"{label} changed ({json.dumps(before)} -> {json.dumps(after)})"


_RULES: tuple[ConstraintRule, ...] = (
    _enum_widened,
    _const_changed,
    _additional_properties_loosened,
    _numeric_bounds_loosened,
    _multiple_of_changed,
    _count_bounds_loosened,
    _categorical_changed,
)


def _lower_bound(info: NodeInfo) -> Bound | None:
    bounds: list[Bound] = []
    if info.minimum is not None:
        bounds.append((info.minimum, False, "minimum"))
    if info.exclusive_minimum is not None:
        bounds.append((info.exclusive_minimum, True, "exclusiveMinimum"))
    if not bounds:
        return None
    # higher value is tighter; on a tie the exclusive bound is tighter
    return max(bounds, key=lambda bound: (bound[0], bound[1]))


def _upper_bound(info: NodeInfo) -> Bound | None:
    bounds: list[Bound] = []
    if info.maximum is not None:
        bounds.append((info.maximum, False, "maximum"))
    if info.exclusive_maximum is not None:
        bounds.append((info.exclusive_maximum, True, "exclusiveMaximum"))
    if not bounds:
        return None
    return min(bounds, key=lambda bound: (bound[0], not bound[1]))


def _bound_reason(label: str, before: Bound, after: Bound) -> str:
    if before[2] == after[2]:
        return f"{before[2]} loosened ({_number_text(before[0])} -> {_number_text(after[0])})"
    return (
        f"{label} loosened ({before[2]} {_number_text(before[0])} -> "
        f"{after[2]} {_number_text(after[0])})"
    )


def _is_exact_multiple(value: Number, divisor: Number) -> bool:
    if divisor == 0:
        return False
    ratio = Fraction(str(value)) / Fraction(str(divisor))
    return ratio.denominator == 1


def _allowed_values(info: NodeInfo) -> Sequence[Any] | None:
    if info.enum is not None:
        return info.enum
    if info.has_const:
        return (info.const,)
    return None


def _is_subset(values: Sequence[Any], allowed: Sequence[Any]) -> bool:
    allowed_keys = {canonical_json(value) for value in allowed}
    return all(canonical_json(value) in allowed_keys for value in values)



def _number_text(value: Number) -> str:
    return json.dumps(value)

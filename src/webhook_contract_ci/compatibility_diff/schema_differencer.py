"""Compatibility diff between two schema indexes."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from webhook_contract_ci.schema_indexing import (
    NodeInfo,
    SchemaIndex,
    display_path,
    index_schema,
    is_covered,
    render_type_set,
)
from webhook_contract_ci.schema_indexing.canonical_paths import (
    ADDITIONAL_PROPERTIES_MARKER,
    ROOT_PATH,
    child_path,
    is_property_token,
    last_token,
    parent_path,
)

from .constraint_rules import loosened_constraints
from .diff_models import ChangeKind, DiffEntry, DiffResult

_LOGGER = logging.getLogger("webhook_contract_ci.compatibility_diff")
_LOGGER.addHandler(logging.NullHandler())


def diff_schemas(base_schema: Any, candidate_schema: Any) -> DiffResult:
    """Index both schema versions and compare them."""
    return diff_indexes(index_schema(base_schema), index_schema(candidate_schema))


def diff_indexes(base: SchemaIndex, candidate: SchemaIndex) -> DiffResult:
    """Classify every path-level difference between ``base`` and ``candidate``.

    Breaking changes are the ones that let the candidate produce a value a
    consumer trusting ``base`` could reject or mis-handle. Lists come back
    sorted by display path, then kind, then detail.
    """
    entries: list[DiffEntry] = []
    for path, base_info in base.items():
        candidate_info = candidate.get(path)
        if candidate_info is None:
            entries.extend(_missing_path_entries(path, base_info, candidate))
        else:
            entries.extend(_shared_path_entries(path, base_info, candidate_info))

    for path, candidate_info in candidate.items():
        if path in base or _under_unmatched_additional_properties(path, base):
            continue
        entries.append(_new_path_entry(path, candidate_info, base))

    result = _grouped(entries)
    _LOGGER.debug(
        "compared %d base paths with %d candidate paths: %d breaking",
        len(base),
        len(candidate),
        result.breaking_count,
    )
    return result


def _missing_path_entries(
    path: str, base_info: NodeInfo, candidate: SchemaIndex
) -> list[DiffEntry]:
    if _under_unmatched_additional_properties(path, candidate):
        return []
    if base_info.required:
        return [DiffEntry(ChangeKind.REMOVED_REQUIRED, display_path(path))]
    candidate_parent = candidate.get(parent_path(path))
    if candidate_parent is not None and candidate_parent.additional_properties is False:
        return [DiffEntry(ChangeKind.REMOVED_OPTIONAL, display_path(path))]
    return []


def _under_unmatched_additional_properties(path: str, other: SchemaIndex) -> bool:
    """Whether ``path`` sits at or below an additionalProperties row ``other`` lacks.

    Such rows are judged by the parent's additionalProperties rule alone.
    """
    prefix = path
    while prefix != ROOT_PATH:
        if last_token(prefix) == ADDITIONAL_PROPERTIES_MARKER and prefix not in other:
            return True
        prefix = parent_path(prefix)
    return False


def _shared_path_entries(
    path: str, base_info: NodeInfo, candidate_info: NodeInfo
) -> list[DiffEntry]:
    shown = display_path(path)
    entries: list[DiffEntry] = []
    if base_info.required and not candidate_info.required:
        entries.append(DiffEntry(ChangeKind.REQUIRED_BECAME_OPTIONAL, shown))
    if _type_widened(base_info, candidate_info):
        detail = (
            f"{render_type_set(base_info.type_set)} -> {render_type_set(candidate_info.type_set)}"
        )
        entries.append(DiffEntry(ChangeKind.TYPE_CHANGED, shown, detail))
    entries.extend(
        DiffEntry(ChangeKind.CONSTRAINT_CHANGED, shown, reason)
        for reason in loosened_constraints(base_info, candidate_info)
    )
    return entries


def _type_widened(base_info: NodeInfo, candidate_info: NodeInfo) -> bool:
    if base_info.type_set is None:
        return False
    if candidate_info.type_set is None:
        return base_info.required
    return not is_covered(base_info.type_set, candidate_info.type_set)


def _new_path_entry(path: str, candidate_info: NodeInfo, base: SchemaIndex) -> DiffEntry:
    shown = display_path(path)
    parent = parent_path(path)
    base_parent = base.get(parent)
    if base_parent is None or not is_property_token(last_token(path)):
        return DiffEntry(ChangeKind.ADDED, shown)

    if base_parent.additional_properties is False:
        return DiffEntry(
            ChangeKind.CONSTRAINT_CHANGED,
            shown,
            f"new field under closed object {display_path(parent)}",
        )
    if isinstance(base_parent.additional_properties, Mapping):
        extra = base.get(child_path(parent, ADDITIONAL_PROPERTIES_MARKER))
        allowed = extra.type_set if extra is not None else None
        if candidate_info.type_set is not None and not is_covered(
            allowed, candidate_info.type_set
        ):
            return DiffEntry(
                ChangeKind.CONSTRAINT_CHANGED,
                shown,
                f"type {render_type_set(candidate_info.type_set)} not allowed by "
                f"additionalProperties of {display_path(parent)}",
            )
    return DiffEntry(ChangeKind.ADDED, shown)


def _grouped(entries: list[DiffEntry]) -> DiffResult:
    by_kind: dict[ChangeKind, list[DiffEntry]] = {kind: [] for kind in ChangeKind}
    for entry in sorted(entries, key=DiffEntry.sort_key):
        by_kind[entry.kind].append(entry)
    return DiffResult(
        removed_required=tuple(by_kind[ChangeKind.REMOVED_REQUIRED]),
        required_became_optional=tuple(by_kind[ChangeKind.REQUIRED_BECAME_OPTIONAL]),
        type_changed=tuple(by_kind[ChangeKind.TYPE_CHANGED]),
        constraints_changed=tuple(by_kind[ChangeKind.CONSTRAINT_CHANGED]),
        added=tuple(by_kind[ChangeKind.ADDED]),
        removed_optional=tuple(by_kind[ChangeKind.REMOVED_OPTIONAL]),
    )

"""Compatibility diff entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ChangeKind(str, Enum):
    """Classification of one difference between two schema versions."""

    REMOVED_REQUIRED = "removed_required"
    REQUIRED_BECAME_OPTIONAL = "required_became_optional"
    TYPE_CHANGED = "type_changed"
    CONSTRAINT_CHANGED = "constraint_changed"
    ADDED = "added"
    REMOVED_OPTIONAL = "removed_optional"

    @property
    def is_breaking(self) -> bool:
        return self not in (ChangeKind.ADDED, ChangeKind.REMOVED_OPTIONAL)


@dataclass(frozen=True)
class DiffEntry:
    """One classified change at a display path."""

    kind: ChangeKind
    path: str
    detail: str = ""

    def sort_key(self) -> tuple[str, str, str]:
        return (self.path, self.kind.value, self.detail)

    def render(self) -> str:
        return f"{self.path} ({self.detail})" if self.detail else self.path


@dataclass(frozen=True)
class DiffResult:
    """Classified, deterministically ordered comparison of two schema indexes."""

    removed_required: tuple[DiffEntry, ...] = ()
    required_became_optional: tuple[DiffEntry, ...] = ()
    type_changed: tuple[DiffEntry, ...] = ()
    constraints_changed: tuple[DiffEntry, ...] = ()
    added: tuple[DiffEntry, ...] = ()
    removed_optional: tuple[DiffEntry, ...] = ()

    @property
    def breaking_count(self) -> int:
        return (
            len(self.removed_required)
            + len(self.required_became_optional)
            + len(self.type_changed)
            + len(self.constraints_changed)
        )

    @property
    def has_breaking_changes(self) -> bool:
        return self.breaking_count > 0

    def breaking_sections(self) -> tuple[tuple[str, tuple[DiffEntry, ...]], ...]:
        """Return breaking lists with their human-readable titles."""
        return (
            ("removed required paths", self.removed_required),
            ("required became optional", self.required_became_optional),
            ("type changed", self.type_changed),
            ("constraints changed", self.constraints_changed),
        )

    def informational_sections(self) -> tuple[tuple[str, tuple[DiffEntry, ...]], ...]:
        return (
            ("added paths", self.added),
            ("removed optional paths", self.removed_optional),
        )

    def to_dict(self) -> dict[str, Any]:
        """Render a JSON-serializable structure for machine-readable CI output."""
        return {
            "breaking": {
                "removedRequired": _rendered(self.removed_required),
                "requiredBecameOptional": _rendered(self.required_became_optional),
                "typeChanged": _rendered(self.type_changed),
                "constraintsChanged": _rendered(self.constraints_changed),
            },
            "nonBreaking": {
                "added": _rendered(self.added),
                "removedOptional": _rendered(self.removed_optional),
            },
            "breakingCount": self.breaking_count,
        }


def _rendered(entries: tuple[DiffEntry, ...]) -> list[str]:
    return [entry.render() for entry in entries]

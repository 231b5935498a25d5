"""Schema index entities."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any

from .type_sets import TypeSet

Number = int | float

_CAMEL_CASE_KEYS = {
    "type_set": "type",
    "exclusive_minimum": "exclusiveMinimum",
    "exclusive_maximum": "exclusiveMaximum",
    "multiple_of": "multipleOf",
    "min_length": "minLength",
    "max_length": "maxLength",
    "content_encoding": "contentEncoding",
    "content_media_type": "contentMediaType",
    "min_items": "minItems",
    "max_items": "maxItems",
    "min_properties": "minProperties",
    "max_properties": "maxProperties",
    "additional_properties": "additionalProperties",
    "property_names_pattern": "propertyNamesPattern",
}


@dataclass(frozen=True)
class NodeInfo:
    """Structural summary of one statically reachable schema location."""

    path: str
    type_set: TypeSet | None
    required: bool
    enum: tuple[Any, ...] | None = None
    const: Any = None
    has_const: bool = False
    additional_properties: bool | Mapping[str, Any] | None = None
    property_names_pattern: str | None = None
    minimum: Number | None = None
    exclusive_minimum: Number | None = None
    maximum: Number | None = None
    exclusive_maximum: Number | None = None
    multiple_of: Number | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    format: str | None = None
    content_encoding: str | None = None
    content_media_type: str | None = None
    min_items: int | None = None
    max_items: int | None = None
    min_properties: int | None = None
    max_properties: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render defined keywords with their JSON Schema spelling."""
        rendered: dict[str, Any] = {"path": self.path, "required": self.required}
        for item in fields(self):
            if item.name in ("path", "required", "has_const", "const"):
                continue
            value = getattr(self, item.name)
            if value is None:
                continue
            key = _CAMEL_CASE_KEYS.get(item.name, item.name)
            rendered[key] = list(value) if isinstance(value, tuple) else value
        if self.has_const:
            rendered["const"] = self.const
        return rendered


@dataclass(frozen=True)
class SchemaIndex(Mapping[str, NodeInfo]):
    """Read-only, insertion-ordered mapping of canonical path to node summary."""

    rows: Mapping[str, NodeInfo] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rows", MappingProxyType(dict(self.rows)))

    def __getitem__(self, path: str) -> NodeInfo:
        return self.rows[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {path: info.to_dict() for path, info in self.rows.items()}

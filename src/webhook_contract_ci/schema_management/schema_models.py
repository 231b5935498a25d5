"""Schema management entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class SchemaDocument:
    """Parsed JSON Schema value and where it came from."""

    root: Any
    source_path: Path | None = None

    @property
    def label(self) -> str:
        return str(self.source_path) if self.source_path else "<inline schema>"

"""Sample payload loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


class PayloadError(Exception):
    """Raised when a sample payload cannot be read or parsed."""


def load_payload(payload_path: Path | str) -> Any:
    """Read one JSON payload sample from disk."""
    path = Path(payload_path)
    if not path.exists():
        raise PayloadError(f"Payload file not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise PayloadError(f"Invalid JSON in payload {path}: {exc}") from exc
    except OSError as exc:
        raise PayloadError(f"Failed to read payload {path}: {exc}") from exc

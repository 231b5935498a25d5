"""JSON value comparison keys."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any


def canonical_json(value: Any) -> str:
    """Serialize ``value`` with sorted keys and integral floats folded to ints.

    Two values get the same key exactly when JSON Schema treats them as equal,
    so ``1`` and ``1.0`` match while ``1`` and ``true`` do not.
    """
    return json.dumps(_normalized(value), sort_keys=True, separators=(",", ":"))


def _normalized(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, Mapping):
        return {str(key): _normalized(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalized(item) for item in value]
    return value

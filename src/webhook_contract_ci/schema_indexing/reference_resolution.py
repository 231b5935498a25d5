"""Local ``$ref`` resolution with sibling-keyword merging."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import unquote

from .canonical_paths import unescape_token

_LOGGER = logging.getLogger("webhook_contract_ci.schema_indexing")
_LOGGER.addHandler(logging.NullHandler())

_MISSING = object()


def resolve_references(root: Any, node: Any, followed: list[str] | None = None) -> Any:
    """Return ``node`` with every same-document ``$ref`` substituted.

    Keywords written beside a ``$ref`` win over same-named keywords of the
    target. Resolution stops at the first reference already seen in this
    chain, at a dangling pointer, or at a cross-document reference; in each
    case the node merged so far is returned without its ``$ref``.

    Args:
      root: Document the ``#`` fragments are evaluated against.
      node: Schema node to resolve. Never mutated.
      followed: Optional collector receiving each reference that was followed.

    Returns:
      A fresh mapping, a boolean schema, or ``node`` itself when it carries no
      reference.
    """
    if not isinstance(node, Mapping) or "$ref" not in node:
        return node

    current: Mapping[str, Any] = node
    visited: set[str] = set()
    while isinstance(current, Mapping) and "$ref" in current:
        reference = current["$ref"]
        siblings = {key: value for key, value in current.items() if key != "$ref"}
        if not isinstance(reference, str) or not reference.startswith("#"):
            _LOGGER.debug("leaving non-local reference unresolved: %r", reference)
            return siblings
        if reference in visited:
            _LOGGER.debug("reference cycle detected at %s", reference)
            return siblings
        visited.add(reference)

        target = lookup_fragment(root, reference)
        if target is _MISSING:
            _LOGGER.debug("dangling reference %s", reference)
            return siblings
        if followed is not None:
            followed.append(reference)

        if isinstance(target, bool):
            return siblings if target else False
        if not isinstance(target, Mapping):
            _LOGGER.debug("reference %s does not point at a schema", reference)
            return siblings
        current = {**target, **siblings}
    return current


def lookup_fragment(root: Any, reference: str) -> Any:
    """Walk a ``#/...`` fragment over ``root``; return a sentinel when absent."""
    pointer = unquote(reference[1:])
    if pointer == "":
        return root
    if not pointer.startswith("/"):
        # plain-name fragments ($anchor) are not supported
        return _MISSING

    value = root
    for raw_token in pointer[1:].split("/"):
        token = unescape_token(raw_token)
        if isinstance(value, Mapping):
            value = value.get(token, _MISSING)
        elif isinstance(value, Sequence) and not isinstance(value, str):
            if not token.isdigit() or int(token) >= len(value):
                return _MISSING
            value = value[int(token)]
        else:
            return _MISSING
        if value is _MISSING:
            return _MISSING
    return value

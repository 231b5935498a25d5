"""Canonical schema path helpers.

Paths are JSON-Pointer style strings rooted at ``/``. Real property names are
escaped per RFC 6901, so a token never contains ``~`` followed by anything
other than ``0`` or ``1``. The synthetic markers below rely on that to stay
distinct from every property name.
"""

from __future__ import annotations

ROOT_PATH = "/"
EVERY_ELEMENT_MARKER = "~*"
TUPLE_ELEMENT_PREFIX = "~#"
ADDITIONAL_PROPERTIES_MARKER = "~+"

ADDITIONAL_PROPERTIES_DISPLAY = "[additionalProperties]"


def escape_token(name: str) -> str:
    """Escape one property name into a pointer token."""
    return name.replace("~", "~0").replace("/", "~1")


def unescape_token(token: str) -> str:
    """Reverse :func:`escape_token`."""
    return token.replace("~1", "/").replace("~0", "~")


def tuple_element_token(index: int) -> str:
    return f"{TUPLE_ELEMENT_PREFIX}{index}"


def child_path(parent: str, token: str) -> str:
    """Append an already-escaped token (or a synthetic marker) to a path."""
    if parent == ROOT_PATH:
        return f"/{token}"
    return f"{parent}/{token}"


def parent_path(path: str) -> str:
    last_slash = path.rfind("/")
    if last_slash <= 0:
        return ROOT_PATH
    return path[:last_slash]


def last_token(path: str) -> str:
    return path[path.rfind("/") + 1 :]


def is_synthetic_token(token: str) -> bool:
    return (
        token == EVERY_ELEMENT_MARKER
        or token == ADDITIONAL_PROPERTIES_MARKER
        or token.startswith(TUPLE_ELEMENT_PREFIX)
    )


def is_property_token(token: str) -> bool:
    """Return whether the token names a real property."""
    return not is_synthetic_token(token)


def display_path(path: str) -> str:
    """Render synthetic markers back into human-readable segments."""
    if path == ROOT_PATH:
        return path
    rendered = [_display_token(token) for token in path[1:].split("/")]
    return "/" + "/".join(rendered)


def _display_token(token: str) -> str:
    if token == EVERY_ELEMENT_MARKER:
        return "*"
    if token == ADDITIONAL_PROPERTIES_MARKER:
        return ADDITIONAL_PROPERTIES_DISPLAY
    if token.startswith(TUPLE_ELEMENT_PREFIX):
        return f"[{token[len(TUPLE_ELEMENT_PREFIX):]}]"
    return token

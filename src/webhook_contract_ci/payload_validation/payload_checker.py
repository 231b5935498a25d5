"""Payload validation against a recorded schema."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import jsonschema
from jsonschema import Draft202012Validator
from jsonschema.validators import validator_for
from referencing.exceptions import Unresolvable

from webhook_contract_ci.schema_indexing.canonical_paths import ROOT_PATH, escape_token

from .check_outcomes import PayloadCheckResult, PayloadViolation


class PayloadCheckError(Exception):
    """Raised when the schema itself cannot be used for validation."""


def check_payload(schema: Any, payload: Any) -> PayloadCheckResult:
    """Validate ``payload`` against ``schema`` and collect every violation.

    The validator class follows the schema's ``$schema`` declaration and
    defaults to draft 2020-12. Violations are ordered by location, then
    message.

    Raises:
      PayloadCheckError: If ``schema`` is not a valid JSON Schema or holds a
        reference that cannot be resolved.
    """
    validator_cls = validator_for(schema, default=Draft202012Validator)
    try:
        validator_cls.check_schema(schema)
    except jsonschema.exceptions.SchemaError as exc:
        raise PayloadCheckError(f"Invalid schema: {exc.message}") from exc

    validator = validator_cls(schema)
    try:
        violations = [
            PayloadViolation(
                location=_instance_pointer(error.absolute_path),
                message=error.message,
                keyword=str(error.validator) if error.validator is not None else None,
            )
            for error in validator.iter_errors(payload)
        ]
    except Unresolvable as exc:
        raise PayloadCheckError(f"Cannot resolve schema reference: {exc}") from exc
    violations.sort(key=lambda violation: (violation.location, violation.message))
    return PayloadCheckResult(violations=tuple(violations))


def _instance_pointer(path: Iterable[Any]) -> str:
    tokens = [escape_token(str(token)) for token in path]
    if not tokens:
        return ROOT_PATH
    return "/" + "/".join(tokens)

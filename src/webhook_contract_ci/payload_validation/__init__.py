"""Payload validation exports."""

from .check_outcomes import PayloadCheckResult, PayloadViolation
from .payload_checker import PayloadCheckError, check_payload

__all__ = [
    "PayloadCheckError",
    "PayloadCheckResult",
    "PayloadViolation",
    "check_payload",
]

"""Payload check entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PayloadViolation:
    """One location in the payload that the schema rejects."""

    location: str
    message: str
    keyword: str | None = None

    def render(self) -> str:
        return f"- {self.location} {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {"location": self.location, "message": self.message, "keyword": self.keyword}


@dataclass(frozen=True)
class PayloadCheckResult:
    """Pass/fail outcome of validating one payload against one schema."""

    violations: tuple[PayloadViolation, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    def formatted_errors(self) -> str:
        return "\n".join(violation.render() for violation in self.violations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "violations": [violation.to_dict() for violation in self.violations],
            "formattedErrors": self.formatted_errors(),
        }

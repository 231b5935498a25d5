"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from webhook_contract_ci.results_writing.report_models import ContractOutcome


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one run."""

    config_path: str
    output_dir: str | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    outcomes: tuple[ContractOutcome, ...]
    report_path: Path | None
    show_nonbreaking: bool = False

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.failed)

    @property
    def ok(self) -> bool:
        return self.failed_count == 0

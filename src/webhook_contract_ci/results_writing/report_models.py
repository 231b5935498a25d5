"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from webhook_contract_ci.compatibility_diff import DiffResult
from webhook_contract_ci.payload_validation import PayloadCheckResult


class ContractStatus(str, Enum):
    """Rendered status of one contract in a run report."""

    OK = "OK"
    BREAKING = "BREAKING"
    PAYLOAD_MISMATCH = "PAYLOAD_MISMATCH"


@dataclass(frozen=True)
class ContractOutcome:
    """Diff and optional payload check for one configured contract."""

    name: str
    diff_result: DiffResult
    payload_check: PayloadCheckResult | None = None

    @property
    def status(self) -> ContractStatus:
        if self.diff_result.has_breaking_changes:
            return ContractStatus.BREAKING
        if self.payload_check is not None and not self.payload_check.ok:
            return ContractStatus.PAYLOAD_MISMATCH
        return ContractStatus.OK

    @property
    def failed(self) -> bool:
        return self.status is not ContractStatus.OK


@dataclass(frozen=True)
class RunMetadata:
    """Metadata rendered into the run report header."""

    run_start: datetime
    config_path: Path
    contract_count: int

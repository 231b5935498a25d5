"""Run execution domain exports."""

from .contract_check_run_use_case import (
    RunExecutionError,
    check_contract,
    execute_contract_check_run,
)
from .run_contracts import RunOutcome, RunRequest

__all__ = [
    "RunRequest",
    "RunOutcome",
    "RunExecutionError",
    "check_contract",
    "execute_contract_check_run",
]

"""Results writing domain exports."""

from .report_models import ContractOutcome, ContractStatus, RunMetadata
from .run_report_writer import (
    BREAKING_HEADLINE,
    NO_BREAKING_HEADLINE,
    build_diff_payload,
    build_run_report,
    render_breaking_lines,
    render_informational_lines,
    write_run_report,
)

__all__ = [
    "BREAKING_HEADLINE",
    "NO_BREAKING_HEADLINE",
    "ContractOutcome",
    "ContractStatus",
    "RunMetadata",
    "build_diff_payload",
    "build_run_report",
    "render_breaking_lines",
    "render_informational_lines",
    "write_run_report",
]

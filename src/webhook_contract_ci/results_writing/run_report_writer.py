"""Diff rendering and run report writer service."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from webhook_contract_ci.compatibility_diff import DiffEntry, DiffResult

from .report_models import ContractOutcome, RunMetadata

BREAKING_HEADLINE = "breaking webhook payload changes detected:"
NO_BREAKING_HEADLINE = "no breaking changes detected"


def render_breaking_lines(result: DiffResult) -> list[str]:
    """Render breaking lists as titled bullet blocks; empty when nothing breaks."""
    if not result.has_breaking_changes:
        return []
    lines = [BREAKING_HEADLINE]
    for title, entries in result.breaking_sections():
        lines.extend(_bullet_block(title, entries))
    return lines


def render_informational_lines(result: DiffResult) -> list[str]:
    lines: list[str] = []
    for title, entries in result.informational_sections():
        lines.extend(_bullet_block(title, entries))
    return lines


def build_diff_payload(result: DiffResult, *, show_nonbreaking: bool) -> dict[str, Any]:
    """Build the machine-readable diff output for CI logs."""
    rendered = result.to_dict()
    payload: dict[str, Any] = {
        "ok": not result.has_breaking_changes,
        "breakingCount": rendered["breakingCount"],
        "breaking": rendered["breaking"],
    }
    if show_nonbreaking:
        payload["nonBreaking"] = rendered["nonBreaking"]
    return payload


def build_run_report(
    outcomes: Sequence[ContractOutcome],
    metadata: RunMetadata,
    *,
    show_nonbreaking: bool,
) -> dict[str, Any]:
    contracts = []
    for outcome in outcomes:
        entry: dict[str, Any] = {
            "name": outcome.name,
            "status": outcome.status.value,
            "diff": build_diff_payload(outcome.diff_result, show_nonbreaking=show_nonbreaking),
        }
        if outcome.payload_check is not None:
            entry["payloadCheck"] = outcome.payload_check.to_dict()
        contracts.append(entry)
    return {
        "runStart": metadata.run_start.isoformat(),
        "configPath": str(metadata.config_path),
        "contractCount": metadata.contract_count,
        "failedCount": sum(1 for outcome in outcomes if outcome.failed),
        "contracts": contracts,
    }


def write_run_report(
    output_path: Path | str,
    outcomes: Sequence[ContractOutcome],
    metadata: RunMetadata,
    *,
    show_nonbreaking: bool,
) -> Path:
    """Write the JSON run report, creating parent directories as needed."""
    destination = Path(output_path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    report = build_run_report(outcomes, metadata, show_nonbreaking=show_nonbreaking)
    destination.write_text(json.dumps(report, indent=2) + "\n", encoding="utf-8")
    return destination.resolve()


def _bullet_block(title: str, entries: Sequence[DiffEntry]) -> list[str]:
    if not entries:
        return []
    return [f"{title}:", *(f"- {entry.render()}" for entry in entries)]

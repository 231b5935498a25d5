"""Contract check run use-case service."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from webhook_contract_ci.compatibility_diff import diff_schemas
from webhook_contract_ci.configuration import (
    ConfigurationError,
    ContractConfig,
    load_configuration,
)
from webhook_contract_ci.payload_inference import (
    PayloadError,
    infer_schema_from_payload,
    load_payload,
)
from webhook_contract_ci.payload_validation import PayloadCheckError, check_payload
from webhook_contract_ci.results_writing import ContractOutcome, RunMetadata, write_run_report
from webhook_contract_ci.schema_management import SchemaError, load_schema_document

from .run_contracts import RunOutcome, RunRequest

_LOGGER = logging.getLogger("webhook_contract_ci.run_execution")
_LOGGER.addHandler(logging.NullHandler())


class RunExecutionError(Exception):
    """Raised when a run use case cannot be completed."""


def execute_contract_check_run(request: RunRequest) -> RunOutcome:
    """Check every configured contract and optionally write a JSON run report."""
    try:
        configuration = load_configuration(request.config_path)
    except ConfigurationError as exc:
        raise RunExecutionError(str(exc)) from exc

    run_start = datetime.now(UTC)
    outcomes = tuple(check_contract(contract) for contract in configuration.contracts)
    show_nonbreaking = configuration.report.show_nonbreaking

    report_path = None
    if request.output_dir:
        metadata = RunMetadata(
            run_start=run_start,
            config_path=configuration.path.resolve(),
            contract_count=len(outcomes),
        )
        try:
            report_path = write_run_report(
                _resolve_report_path(request.output_dir, run_start),
                outcomes,
                metadata,
                show_nonbreaking=show_nonbreaking,
            )
        except OSError as exc:
            raise RunExecutionError(f"Failed to write run report: {exc}") from exc
        _LOGGER.info("wrote run report to %s", report_path)

    return RunOutcome(
        outcomes=outcomes,
        report_path=report_path,
        show_nonbreaking=show_nonbreaking,
    )


def check_contract(contract: ContractConfig) -> ContractOutcome:
    """Compare one recorded schema with its configured observation."""
    payload_check = None
    try:
        base_schema = load_schema_document(contract.schema_path).root
        if contract.payload_path is not None:
            payload = load_payload(contract.payload_path)
            candidate_schema = infer_schema_from_payload(payload)
            if contract.check_payload:
                payload_check = check_payload(base_schema, payload)
        elif contract.next_schema_path is not None:
            candidate_schema = load_schema_document(contract.next_schema_path).root
        else:
            raise RunExecutionError(f"Contract '{contract.name}' has no observation configured.")
    except (SchemaError, PayloadError, PayloadCheckError) as exc:
        raise RunExecutionError(f"Contract '{contract.name}': {exc}") from exc

    outcome = ContractOutcome(
        name=contract.name,
        diff_result=diff_schemas(base_schema, candidate_schema),
        payload_check=payload_check,
    )
    _LOGGER.info(
        "contract %s: %s (%d breaking)",
        contract.name,
        outcome.status.value,
        outcome.diff_result.breaking_count,
    )
    return outcome


def _resolve_report_path(output_dir: str, run_start: datetime) -> Path:
    timestamp = run_start.strftime("%Y%m%d-%H%M%S")
    return Path(output_dir) / f"contract-report-{timestamp}.json"

"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from webhook_contract_ci.compatibility_diff import DiffResult, diff_schemas
from webhook_contract_ci.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from webhook_contract_ci.payload_inference import (
    PayloadError,
    infer_schema_from_payload,
    load_payload,
)
from webhook_contract_ci.payload_validation import PayloadCheckError, check_payload
from webhook_contract_ci.results_writing import (
    NO_BREAKING_HEADLINE,
    build_diff_payload,
    render_breaking_lines,
    render_informational_lines,
)
from webhook_contract_ci.run_execution import (
    RunExecutionError,
    RunRequest,
    execute_contract_check_run,
)
from webhook_contract_ci.schema_indexing import index_schema
from webhook_contract_ci.schema_management import SchemaError, load_schema_document

_PACKAGE_LOGGER_NAME = "webhook_contract_ci"


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="webhook-contract-ci")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Log schema resolution and run details to stderr.",
)
def cli(verbose: bool) -> None:
    """Webhook payload contract checks for CI."""
    if verbose:
        _enable_debug_logging()


@cli.command(name="infer")
@click.option(
    "--in",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to a sample JSON payload",
)
@click.option(
    "--out",
    "output_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path of the schema file to write",
)
def infer(input_path: str, output_path: str) -> None:
    """Infer a JSON Schema from a sample payload."""
    try:
        schema = infer_schema_from_payload(load_payload(input_path))
        destination = _write_json(output_path, schema)
    except (PayloadError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"wrote schema -> {destination}")


@cli.command(name="check")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the recorded JSON Schema",
)
@click.option(
    "--in",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the JSON payload to validate",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit JSON output.")
@click.pass_context
def check(ctx: click.Context, schema_path: str, input_path: str, as_json: bool) -> None:
    """Validate a payload against a recorded schema."""
    try:
        schema = load_schema_document(schema_path).root
        result = check_payload(schema, load_payload(input_path))
    except (SchemaError, PayloadError, PayloadCheckError) as exc:
        raise CliError(str(exc)) from exc

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.ok:
        click.echo("ok")
    else:
        click.echo("payload does not match schema:\n" + result.formatted_errors(), err=True)
    if not result.ok:
        ctx.exit(1)


@cli.command(name="diff")
@click.option(
    "--base",
    "base_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the recorded JSON Schema",
)
@click.option(
    "--next",
    "next_payload_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to an observed payload; its schema is inferred before comparing",
)
@click.option(
    "--next-schema",
    "next_schema_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to a candidate JSON Schema to compare directly",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit JSON output.")
@click.option(
    "--show-nonbreaking",
    is_flag=True,
    default=False,
    help="Also list added and removed-optional paths.",
)
@click.pass_context
def diff(
    ctx: click.Context,
    base_path: str,
    next_payload_path: str | None,
    next_schema_path: str | None,
    as_json: bool,
    show_nonbreaking: bool,
) -> None:
    """Report breaking changes between a recorded schema and a new observation."""
    if bool(next_payload_path) == bool(next_schema_path):
        raise click.UsageError("Provide exactly one of --next or --next-schema.")
    try:
        base_schema = load_schema_document(base_path).root
        if next_payload_path:
            candidate_schema = infer_schema_from_payload(load_payload(next_payload_path))
        else:
            candidate_schema = load_schema_document(str(next_schema_path)).root
    except (SchemaError, PayloadError) as exc:
        raise CliError(str(exc)) from exc

    result = diff_schemas(base_schema, candidate_schema)
    if as_json:
        payload = build_diff_payload(result, show_nonbreaking=show_nonbreaking)
        click.echo(json.dumps(payload, indent=2))
    else:
        _echo_diff_text(result, show_nonbreaking=show_nonbreaking)
    if result.has_breaking_changes:
        ctx.exit(1)


@cli.command(name="index")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the JSON Schema to index",
)
def index(schema_path: str) -> None:
    """Print the flattened structural index of a schema as JSON."""
    try:
        schema = load_schema_document(schema_path).root
    except SchemaError as exc:
        raise CliError(str(exc)) from exc
    click.echo(json.dumps(index_schema(schema).to_dict(), indent=2))


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML contract configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML contract configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML/JSON contract configuration file",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Optional directory for storing the JSON run report",
)
@click.pass_context
def run_contracts(ctx: click.Context, config_path: str, output_dir: str | None) -> None:
    """Check every contract listed in the configuration file."""
    try:
        outcome = execute_contract_check_run(
            RunRequest(config_path=config_path, output_dir=output_dir)
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc

    for contract in outcome.outcomes:
        click.echo(f"{contract.name}: {contract.status.value}")
        for line in render_breaking_lines(contract.diff_result)[1:]:
            click.echo(f"  {line}")
        if contract.payload_check is not None and not contract.payload_check.ok:
            click.echo("  payload does not match schema:")
            for violation in contract.payload_check.violations:
                click.echo(f"  {violation.render()}")
        if outcome.show_nonbreaking:
            for line in render_informational_lines(contract.diff_result):
                click.echo(f"  {line}")
    if outcome.report_path is not None:
        click.echo(f"report: {outcome.report_path}")
    if not outcome.ok:
        ctx.exit(1)


def _echo_diff_text(result: DiffResult, *, show_nonbreaking: bool) -> None:
    breaking_lines = render_breaking_lines(result)
    for line in breaking_lines:
        click.echo(line, err=True)
    if not breaking_lines:
        click.echo(NO_BREAKING_HEADLINE)
    if show_nonbreaking:
        for line in render_informational_lines(result):
            click.echo(line)


def _write_json(output_path: str, value: Any) -> Path:
    destination = Path(output_path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(value, indent=2) + "\n", encoding="utf-8")
    return destination


def _enable_debug_logging() -> None:
    package_logger = logging.getLogger(_PACKAGE_LOGGER_NAME)
    if not any(isinstance(handler, logging.StreamHandler) for handler in package_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        exit_code = cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return exit_code if isinstance(exit_code, int) else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

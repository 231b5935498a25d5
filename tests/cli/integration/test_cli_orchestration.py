"""CLI orchestration integration tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from click.testing import CliRunner
from webhook_contract_ci.cli import cli

_BASE_SCHEMA = {
    "type": "object",
    "required": ["id"],
    "properties": {"id": {"type": "string"}, "amount": {"type": "number", "minimum": 0}},
}


def _write_json(path: Path, value: object) -> Path:
    path.write_text(json.dumps(value), encoding="utf-8")
    return path


def test_infer_command_writes_schema(tmp_path: Path) -> None:
    payload_path = _write_json(tmp_path / "sample.json", {"id": "evt_1", "tags": ["a"]})
    output_path = tmp_path / "schemas" / "event.json"

    result = CliRunner().invoke(
        cli, ["infer", "--in", str(payload_path), "--out", str(output_path)]
    )

    assert result.exit_code == 0, result.output
    assert f"wrote schema -> {output_path}" in result.output
    assert json.loads(output_path.read_text(encoding="utf-8")) == {
        "type": "object",
        "properties": {
            "id": {"type": "string"},
            "tags": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["id", "tags"],
    }


def test_check_command_reports_ok_and_violations(tmp_path: Path) -> None:
    schema_path = _write_json(tmp_path / "schema.json", _BASE_SCHEMA)
    good_path = _write_json(tmp_path / "good.json", {"id": "evt_1", "amount": 1})
    bad_path = _write_json(tmp_path / "bad.json", {"amount": -1})
    runner = CliRunner()

    ok_result = runner.invoke(cli, ["check", "--schema", str(schema_path), "--in", str(good_path)])
    bad_result = runner.invoke(cli, ["check", "--schema", str(schema_path), "--in", str(bad_path)])

    assert ok_result.exit_code == 0
    assert ok_result.output.strip() == "ok"
    assert bad_result.exit_code == 1
    assert "payload does not match schema:" in bad_result.output
    assert "- / 'id' is a required property" in bad_result.output
    assert "- /amount" in bad_result.output


def test_check_command_emits_json(tmp_path: Path) -> None:
    schema_path = _write_json(tmp_path / "schema.json", _BASE_SCHEMA)
    payload_path = _write_json(tmp_path / "good.json", {"id": "evt_1"})

    result = CliRunner().invoke(
        cli, ["check", "--schema", str(schema_path), "--in", str(payload_path), "--json"]
    )

    assert result.exit_code == 0
    assert json.loads(result.output) == {"ok": True, "violations": [], "formattedErrors": ""}


def test_diff_command_passes_additive_payload(tmp_path: Path) -> None:
    schema_path = _write_json(tmp_path / "schema.json", _BASE_SCHEMA)
    payload_path = _write_json(
        tmp_path / "next.json", {"id": "evt_1", "amount": 2.5, "name": "Ada"}
    )

    result = CliRunner().invoke(
        cli,
        [
            "diff",
            "--base",
            str(schema_path),
            "--next",
            str(payload_path),
            "--show-nonbreaking",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "no breaking changes detected" in result.output
    assert "added paths:" in result.output
    assert "- /name" in result.output


def test_diff_command_fails_on_breaking_schema(tmp_path: Path) -> None:
    schema_path = _write_json(tmp_path / "v1.json", _BASE_SCHEMA)
    next_path = _write_json(
        tmp_path / "v2.json",
        {"type": "object", "properties": {"amount": {"type": "number", "minimum": -5}}},
    )

    result = CliRunner().invoke(
        cli, ["diff", "--base", str(schema_path), "--next-schema", str(next_path)]
    )

    assert result.exit_code == 1
    assert "breaking webhook payload changes detected:" in result.output
    assert "removed required paths:\n- /id" in result.output
    assert "- /amount (minimum loosened (0 -> -5))" in result.output


def test_diff_command_emits_json(tmp_path: Path) -> None:
    schema_path = _write_json(tmp_path / "v1.json", _BASE_SCHEMA)
    next_path = _write_json(
        tmp_path / "v2.json",
        {"type": "object", "required": ["id"], "properties": {"id": {"type": "integer"}}},
    )

    result = CliRunner().invoke(
        cli, ["diff", "--base", str(schema_path), "--next-schema", str(next_path), "--json"]
    )

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["ok"] is False
    assert payload["breakingCount"] == 1
    assert payload["breaking"]["typeChanged"] == ['/id ("string" -> "integer")']
    assert "nonBreaking" not in payload


def test_index_command_prints_rows(tmp_path: Path) -> None:
    schema_path = _write_json(tmp_path / "schema.json", _BASE_SCHEMA)

    result = CliRunner().invoke(cli, ["index", "--schema", str(schema_path)])

    assert result.exit_code == 0
    rows = json.loads(result.output)
    assert list(rows) == ["/", "/amount", "/id"]
    assert rows["/amount"] == {
        "path": "/amount",
        "required": False,
        "type": ["number"],
        "minimum": 0,
    }


def test_generate_config_command_writes_scaffold(tmp_path: Path) -> None:
    output_path = tmp_path / "contracts.yaml"
    runner = CliRunner()

    first = runner.invoke(cli, ["generate-config", "--output", str(output_path)])
    second = runner.invoke(cli, ["generate-config", "--output", str(output_path)])

    assert first.exit_code == 0
    assert str(output_path.resolve()) in first.output
    assert "<REQUIRED>" in output_path.read_text(encoding="utf-8")
    assert second.exit_code != 0


def test_run_command_checks_every_contract(tmp_path: Path) -> None:
    _write_json(tmp_path / "schema.json", _BASE_SCHEMA)
    _write_json(tmp_path / "good.json", {"id": "evt_1", "amount": 4})
    _write_json(tmp_path / "bad.json", {"amount": "4"})
    config_path = tmp_path / "contracts.yaml"
    config_path.write_text(
        """
report:
  show_nonbreaking: true
contracts:
  - name: good
    schema: schema.json
    payload: good.json
  - name: bad
    schema: schema.json
    payload: bad.json
""",
        encoding="utf-8",
    )

    result = CliRunner().invoke(
        cli,
        ["run", "--config", str(config_path), "--output-dir", str(tmp_path / "reports")],
    )

    assert result.exit_code == 1
    assert "good: OK" in result.output
    assert "bad: BREAKING" in result.output
    assert "  - /id" in result.output
    assert "  payload does not match schema:" in result.output
    assert "report: " in result.output
    assert len(list((tmp_path / "reports").glob("contract-report-*.json"))) == 1


def test_verbose_flag_logs_resolution_details(tmp_path: Path) -> None:
    schema_path = _write_json(tmp_path / "schema.json", {"$ref": "#/$defs/missing"})
    package_logger = logging.getLogger("webhook_contract_ci")

    try:
        result = CliRunner().invoke(cli, ["-v", "index", "--schema", str(schema_path)])
    finally:
        for handler in list(package_logger.handlers):
            if isinstance(handler, logging.StreamHandler):
                package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)

    assert result.exit_code == 0
    assert "dangling reference #/$defs/missing" in result.output

"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import Configuration, ContractConfig, ReportSettings


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    contracts = _parse_contracts_section(parsed.get("contracts"), path.parent)
    report = _parse_report_section(parsed.get("report"))
    return Configuration(path=path, contracts=contracts, report=report)


def _parse_contracts_section(value: Any, base_path: Path) -> tuple[ContractConfig, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise ConfigurationError("Configuration section 'contracts' must be a list.")
    if not value:
        raise ConfigurationError("Configuration section 'contracts' must not be empty.")

    contracts: list[ContractConfig] = []
    seen_names: set[str] = set()
    for position, entry in enumerate(value):
        contract = _parse_contract(entry, base_path, label=f"contracts[{position}]")
        if contract.name in seen_names:
            raise ConfigurationError(f"Duplicate contract name: {contract.name}")
        seen_names.add(contract.name)
        contracts.append(contract)
    return tuple(contracts)


def _parse_contract(value: Any, base_path: Path, *, label: str) -> ContractConfig:
    section = _require_mapping(value, label)
    name = _require_non_empty_string(section.get("name"), f"{label}.name")
    schema_path = _resolve_path(
        base_path, _require_non_empty_string(section.get("schema"), f"{label}.schema")
    )
    payload = _optional_string(section.get("payload"), f"{label}.payload")
    next_schema = _optional_string(section.get("next_schema"), f"{label}.next_schema")
    if bool(payload) == bool(next_schema):
        raise ConfigurationError(f"{label} must set exactly one of payload or next_schema.")
    check_payload = section.get("check_payload", True)
    if not isinstance(check_payload, bool):
        raise ConfigurationError(f"{label}.check_payload must be a boolean.")

    return ContractConfig(
        name=name,
        schema_path=schema_path,
        payload_path=_resolve_path(base_path, payload) if payload else None,
        next_schema_path=_resolve_path(base_path, next_schema) if next_schema else None,
        check_payload=check_payload,
    )


def _parse_report_section(value: Any) -> ReportSettings:
    if value is None:
        return ReportSettings()
    section = _require_mapping(value, "report")
    show_nonbreaking = section.get("show_nonbreaking", False)
    if not isinstance(show_nonbreaking, bool):
        raise ConfigurationError("report.show_nonbreaking must be a boolean.")
    return ReportSettings(show_nonbreaking=show_nonbreaking)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None

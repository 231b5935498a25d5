"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ContractConfig:
    """One recorded schema and the observation it is compared with."""

    name: str
    schema_path: Path
    payload_path: Path | None
    next_schema_path: Path | None
    check_payload: bool = True


@dataclass(frozen=True)
class ReportSettings:
    """Report rendering preferences."""

    show_nonbreaking: bool = False


@dataclass(frozen=True)
class Configuration:
    """Complete runtime configuration."""

    path: Path
    contracts: tuple[ContractConfig, ...]
    report: ReportSettings

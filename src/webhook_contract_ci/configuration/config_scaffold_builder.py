"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "contracts.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Contract configuration template for webhook-contract-ci.
# Replace every <REQUIRED> placeholder before running `run`.
# Paths are resolved relative to this file.

report:
  # List added and removed-optional paths next to breaking changes.
  show_nonbreaking: false

contracts:
  - name: "<REQUIRED>"
    # Recorded schema the consumers trust.
    schema: "<REQUIRED>"
    # Provide exactly one observation: a sample payload or a candidate schema.
    payload: "<REQUIRED>"
    # next_schema: "<OPTIONAL>"
    # Validate the sample payload against the recorded schema as well.
    check_payload: true
"""


def build_placeholder_configuration() -> str:
    """Build a YAML contract configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder contract configuration to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(
            f"Contract configuration file already exists: {destination.resolve()}"
        )
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()

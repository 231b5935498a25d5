"""Module entry point for `python -m webhook_contract_ci`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

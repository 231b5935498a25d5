"""Tests for ubiquitous language documentation."""

from __future__ import annotations

from pathlib import Path


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def test_ubiquitous_language_doc_exists_with_core_terms() -> None:
    glossary_path = _project_root() / "docs" / "ubiquitous-language.md"
    assert glossary_path.exists(), "Expected docs/ubiquitous-language.md to exist."

    text = glossary_path.read_text(encoding="utf-8")
    required_terms = (
        "recorded schema",
        "candidate schema",
        "sample payload",
        "schema index",
        "canonical path",
        "type set",
        "reference resolution",
        "allof collapsing",
        "breaking change",
        "removed required path",
        "required became optional",
        "type changed",
        "constraint changed",
        "added path",
        "removed optional path",
        "closed object",
        "payload check",
        "contract",
        "run report",
    )
    for term in required_terms:
        assert term in text.lower(), f"Expected glossary to include term: {term}"

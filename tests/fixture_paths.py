"""Shared fixture helpers for tests."""

from __future__ import annotations

from pathlib import Path

FIXTURES_ROOT = Path(__file__).resolve().parent / "fixtures"


def fixture_path(relative_path: str) -> Path:
    """Resolve a path under tests/fixtures."""
    return FIXTURES_ROOT / relative_path


def fixture_bytes(relative_path: str) -> bytes:
    """Read raw fixture bytes, e.g. to seed fake S3 objects or temp folders."""
    return fixture_path(relative_path).read_bytes()

"""Shared fixture path helpers for tests."""

from __future__ import annotations

from pathlib import Path

_FIXTURES_ROOT = Path(__file__).resolve().parent / "fixtures"


def fixture_path(relative_path: str) -> Path:
    """Resolve a path under tests/fixtures.

    Args:
        relative_path: Path relative to the fixtures root.

    Returns:
        Absolute fixture path.
    """
    return _FIXTURES_ROOT / relative_path

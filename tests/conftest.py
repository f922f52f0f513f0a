"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_PLAYSTORE_ENV_VARS = (
    "PLAYSTORE_DATA_ROOT",
    "PLAYSTORE_SOURCE_URI",
    "PLAYSTORE_HTTP_TIMEOUT",
    "PLAYSTORE_S3_REGION",
    "PLAYSTORE_S3_PROFILE",
)


def pytest_sessionstart() -> None:
    """Add src and project root to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture(autouse=True)
def _isolate_playstore_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host PLAYSTORE_* settings out of test runs."""
    for name in _PLAYSTORE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

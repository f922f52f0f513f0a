"""Runtime configuration model for Playstore.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import os
from pathlib import Path

from core.constants import (
    BINARY_FILE_NAME,
    DATABASE_FILE_NAME,
    DEFAULT_DATA_ROOT,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_SOURCE_URI,
    INDEX_FILE_NAME,
    JSON_FILE_NAME,
    TEXT_FILE_NAME,
    XML_FILE_NAME,
)
from core.errors import PlaystoreConfigError


@dataclass(frozen=True)
class PlaystoreConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local directory receiving every output file.
        source_uri: Default source for load cycles (path, URL, or S3 URI).
        http_timeout_seconds: Timeout applied to HTTP source downloads.
        s3_region: Optional default AWS region for S3 sources.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    data_root: Path
    source_uri: str
    http_timeout_seconds: float
    s3_region: str | None
    s3_profile: str | None

    @classmethod
    def from_env(cls) -> "PlaystoreConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            PlaystoreConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("PLAYSTORE_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        source_uri = os.getenv("PLAYSTORE_SOURCE_URI", DEFAULT_SOURCE_URI)
        timeout_value = os.getenv("PLAYSTORE_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT_SECONDS))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            source_uri=source_uri,
            http_timeout_seconds=_parse_http_timeout(timeout_value),
            s3_region=os.getenv("PLAYSTORE_S3_REGION"),
            s3_profile=os.getenv("PLAYSTORE_S3_PROFILE"),
        )

    @property
    def text_path(self) -> Path:
        """Return the canonical delimited-text output path."""
        return self.data_root / TEXT_FILE_NAME

    @property
    def binary_path(self) -> Path:
        """Return the binary record stream path."""
        return self.data_root / BINARY_FILE_NAME

    @property
    def index_path(self) -> Path:
        """Return the sparse index path."""
        return self.data_root / INDEX_FILE_NAME

    @property
    def json_path(self) -> Path:
        return self.data_root / JSON_FILE_NAME

    @property
    def xml_path(self) -> Path:
        return self.data_root / XML_FILE_NAME

    @property
    def database_path(self) -> Path:
        """Return the DuckDB database file path."""
        return self.data_root / DATABASE_FILE_NAME


def _parse_http_timeout(raw_value: str) -> float:
    """Parse the HTTP timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive timeout in seconds.

    Raises:
        PlaystoreConfigError: If value is not a positive number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise PlaystoreConfigError(
            "Invalid PLAYSTORE_HTTP_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'. "
            "Set PLAYSTORE_HTTP_TIMEOUT to a positive numeric value."
        ) from error
    if not math.isfinite(timeout) or timeout <= 0:
        raise PlaystoreConfigError(
            "Invalid PLAYSTORE_HTTP_TIMEOUT value: "
            f"expected a positive number, got '{raw_value}'."
        )
    return timeout

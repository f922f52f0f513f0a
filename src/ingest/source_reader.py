"""Source stream readers for load cycles.

This module opens the delimited source document from a local path,
an HTTP(S) URL, or an S3 object. Every source is exposed as a UTF-8
character stream with newline translation disabled.
"""

from __future__ import annotations

from contextlib import contextmanager
import io
from pathlib import Path
from typing import Any, BinaryIO, Iterator, TextIO

import requests

from core.config import PlaystoreConfig
from core.constants import SOURCE_DECODE_ERRORS, SOURCE_TEXT_ENCODING
from core.errors import PlaystoreDependencyError, PlaystoreIngestError
from core.logging_config import get_logger
from core.s3_uri import parse_s3_uri

_LOGGER = get_logger(__name__)


@contextmanager
def open_source_text(source_uri: str, config: PlaystoreConfig) -> Iterator[TextIO]:
    """Open a source document as a character stream.

    A leading byte-order mark is dropped and invalid UTF-8 bytes decode
    to U+FFFD. CR and LF are passed through unchanged so the text decoder
    can recognize every terminator.

    Args:
        source_uri: Local path, ``http(s)://`` URL, or ``s3://bucket/key``.
        config: Runtime configuration for HTTP and S3 defaults.

    Yields:
        Readable text stream; closed when the context exits.

    Raises:
        PlaystoreIngestError: If the source cannot be opened.
    """
    with _open_source_bytes(source_uri, config) as byte_stream:
        text_stream = io.TextIOWrapper(
            byte_stream,
            encoding=SOURCE_TEXT_ENCODING,
            errors=SOURCE_DECODE_ERRORS,
            newline="",
        )
        try:
            yield text_stream
        finally:
            text_stream.detach()


@contextmanager
def _open_source_bytes(source_uri: str, config: PlaystoreConfig) -> Iterator[BinaryIO]:
    if source_uri.startswith(("http://", "https://")):
        with _open_http_source(source_uri, config.http_timeout_seconds) as stream:
            yield stream
        return
    if source_uri.startswith("s3://"):
        yield _read_s3_source(source_uri, config)
        return
    with _open_local_source(Path(source_uri).expanduser()) as stream:
        yield stream


@contextmanager
def _open_local_source(source_path: Path) -> Iterator[BinaryIO]:
    """Open a local source file.

    Raises:
        PlaystoreIngestError: If the path is missing or not a file.
    """
    if not source_path.is_file():
        raise PlaystoreIngestError(
            f"Failed to read source at {source_path}: file does not exist. "
            "Provide an existing delimited-text file."
        )
    _LOGGER.info("source_opened", source_uri=str(source_path), kind="local")
    with source_path.open("rb") as stream:
        yield stream


@contextmanager
def _open_http_source(url: str, timeout_seconds: float) -> Iterator[BinaryIO]:
    """Stream an HTTP(S) source document.

    Args:
        url: Source URL.
        timeout_seconds: Connect and read timeout.

    Raises:
        PlaystoreIngestError: If the request fails or returns non-2xx.
    """
    try:
        response = requests.get(url, stream=True, timeout=timeout_seconds)
    except requests.RequestException as error:
        raise PlaystoreIngestError(
            f"Failed to download source from {url}: {error}. "
            "Check network access or load from a local copy."
        ) from error
    with response:
        if response.status_code // 100 != 2:
            raise PlaystoreIngestError(
                f"Failed to download source from {url}: HTTP {response.status_code}. "
                "Check the URL or load from a local copy."
            )
        _LOGGER.info("source_opened", source_uri=url, kind="http")
        response.raw.decode_content = True
        yield response.raw


def _read_s3_source(source_uri: str, config: PlaystoreConfig) -> BinaryIO:
    """Download one S3 object into memory.

    Args:
        source_uri: ``s3://bucket/key`` URI.
        config: Runtime config for region/profile.

    Returns:
        In-memory byte stream of the object body.

    Raises:
        PlaystoreIngestError: If the object cannot be read.
    """
    location = parse_s3_uri(source_uri)
    s3_client = _create_s3_client(config)
    from botocore.exceptions import BotoCoreError, ClientError

    try:
        body = s3_client.get_object(Bucket=location.bucket, Key=location.key)["Body"].read()
    except (BotoCoreError, ClientError) as error:
        raise PlaystoreIngestError(
            f"Failed to read source object {source_uri}: {error}. "
            "Check the bucket, key, and AWS credentials."
        ) from error
    _LOGGER.info("source_opened", source_uri=source_uri, kind="s3", byte_count=len(body))
    return io.BytesIO(body)


def _create_s3_client(config: PlaystoreConfig) -> Any:
    """Create a boto3 S3 client.

    Args:
        config: Runtime config containing optional profile/region.

    Returns:
        Boto3 S3 client.

    Raises:
        PlaystoreDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise PlaystoreDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to load from s3:// sources."
        ) from error
    session = boto3.session.Session(**_build_boto3_session_kwargs(config))
    return session.client("s3")


def _build_boto3_session_kwargs(config: PlaystoreConfig) -> dict[str, str]:
    """Build boto3 Session kwargs from config."""
    kwargs: dict[str, str] = {}
    if config.s3_profile:
        kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        kwargs["region_name"] = config.s3_region
    return kwargs

"""Unit tests for source stream readers."""

from __future__ import annotations

import io
from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest

from core.config import PlaystoreConfig
from core.errors import PlaystoreIngestError
from core.s3_uri import parse_s3_uri
from ingest import source_reader
from ingest.source_reader import open_source_text
from tests.fixture_paths import fixture_path


class _FakeRaw(io.BytesIO):
    decode_content = False


class _FakeResponse:
    def __init__(self, status_code: int, body: bytes) -> None:
        self.status_code = status_code
        self.raw = _FakeRaw(body)

    def __enter__(self) -> "_FakeResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.raw.close()


class _FakeS3Client:
    def __init__(self, body: bytes) -> None:
        self._body = body
        self.requests: list[dict[str, str]] = []

    def get_object(self, **kwargs: str) -> dict[str, Any]:
        self.requests.append(kwargs)
        return {"Body": io.BytesIO(self._body)}


def _config(tmp_path: Path) -> PlaystoreConfig:
    return replace(PlaystoreConfig.from_env(), data_root=tmp_path)


def test_open_source_text_preserves_crlf(tmp_path: Path) -> None:
    """Local sources should keep raw CR/LF for the decoder."""
    with open_source_text(str(fixture_path("raw/playgrounds.csv")), _config(tmp_path)) as stream:
        text = stream.read()

    assert "\r\n" in text and text.startswith("FID,")


def test_open_source_text_drops_byte_order_mark(tmp_path: Path) -> None:
    """A UTF-8 BOM should not become part of the header."""
    source_path = tmp_path / "bom.csv"
    source_path.write_bytes(b"\xef\xbb\xbfFID,OBJECTID\n")

    with open_source_text(str(source_path), _config(tmp_path)) as stream:
        text = stream.read()

    assert text == "FID,OBJECTID\n"


def test_open_source_text_replaces_invalid_utf8(tmp_path: Path) -> None:
    """Bytes that are not valid UTF-8 should decode to U+FFFD."""
    source_path = tmp_path / "latin1.csv"
    source_path.write_bytes(b"H\nA,1,pt,Park\xff,3,x,y,z\n")

    with open_source_text(str(source_path), _config(tmp_path)) as stream:
        text = stream.read()

    assert text == "H\nA,1,pt,Park�,3,x,y,z\n"


def test_open_source_text_raises_for_missing_path(tmp_path: Path) -> None:
    """Missing local files should fail with an ingest error."""
    missing_path = tmp_path / "does-not-exist.csv"

    with pytest.raises(PlaystoreIngestError):
        with open_source_text(str(missing_path), _config(tmp_path)):
            pass

    assert missing_path.exists() is False


def test_open_source_text_streams_http_body(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """HTTP sources should be fetched with the configured timeout."""
    calls: list[dict[str, object]] = []

    def fake_get(url: str, **kwargs: object) -> _FakeResponse:
        calls.append({"url": url, **kwargs})
        return _FakeResponse(200, b"FID\r\nA\r\n")

    monkeypatch.setattr(source_reader.requests, "get", fake_get)
    config = replace(_config(tmp_path), http_timeout_seconds=5.0)

    with open_source_text("https://example.test/points.csv", config) as stream:
        text = stream.read()

    assert text == "FID\r\nA\r\n"
    assert calls == [{"url": "https://example.test/points.csv", "stream": True, "timeout": 5.0}]


def test_open_source_text_raises_for_http_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Non-2xx responses should fail with an ingest error."""
    monkeypatch.setattr(
        source_reader.requests, "get", lambda url, **kwargs: _FakeResponse(503, b"")
    )

    with pytest.raises(PlaystoreIngestError, match="HTTP 503"):
        with open_source_text("https://example.test/points.csv", _config(tmp_path)):
            pass


def test_open_source_text_reads_s3_object(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """S3 sources should read the object body named by the URI."""
    fake_client = _FakeS3Client(b"FID\nA\n")
    monkeypatch.setattr(source_reader, "_create_s3_client", lambda config: fake_client)

    with open_source_text("s3://bucket/exports/points.csv", _config(tmp_path)) as stream:
        text = stream.read()

    assert text == "FID\nA\n"
    assert fake_client.requests == [{"Bucket": "bucket", "Key": "exports/points.csv"}]


def test_parse_s3_uri_requires_key() -> None:
    """S3 URIs without an object key should be rejected."""
    with pytest.raises(PlaystoreIngestError):
        parse_s3_uri("s3://bucket")

"""Unit tests for JSON and XML mirrors."""

from __future__ import annotations

import io
import json
import xml.etree.ElementTree as ET

import pytest

from core.errors import PlaystoreStoreError
from core.types import PlaygroundRecord
from store.mirror_export import record_to_payload, write_json_records, write_xml_records

_XSI_NIL = "{http://www.w3.org/2001/XMLSchema-instance}nil"


def _records() -> list[PlaygroundRecord]:
    return [
        PlaygroundRecord("A", 1, "POINT (1 2)", "Park", 3, "x, y", "y", ""),
        PlaygroundRecord("B", None, "pt", "Lake", None, "x", "y", "z"),
    ]


def test_record_to_payload_uses_canonical_names() -> None:
    """Payload keys should follow the canonical header order."""
    payload = record_to_payload(_records()[0])

    assert list(payload) == [
        "FID",
        "OBJECTID",
        "SHAPE",
        "ANL_NAME",
        "BEZIRK",
        "SPIELPLATZ_DETAIL",
        "TYP_DETAIL",
        "SE_ANNO_CAD_DATA",
    ]


def test_write_json_records_renders_absent_as_null() -> None:
    """Absent integers should be JSON null."""
    stream = io.StringIO()

    write_json_records(_records(), stream)

    payload = json.loads(stream.getvalue())
    assert payload[0]["OBJECTID"] == 1
    assert payload[1]["OBJECTID"] is None and payload[1]["BEZIRK"] is None


def test_write_xml_records_marks_absent_as_nil() -> None:
    """Absent integers should be empty elements flagged xsi:nil."""
    stream = io.BytesIO()

    write_xml_records(_records(), stream)

    root = ET.fromstring(stream.getvalue())
    points = root.findall("PlaygroundPoint")
    assert root.tag == "ArrayOfPlaygroundPoint" and len(points) == 2
    assert points[0].findtext("SPIELPLATZ_DETAIL") == "x, y"
    assert points[1].find("OBJECTID").get(_XSI_NIL) == "true"  # type: ignore[union-attr]


def test_write_xml_records_starts_with_declaration() -> None:
    """XML output should be a UTF-8 document with a declaration."""
    stream = io.BytesIO()

    write_xml_records([], stream)

    assert stream.getvalue().startswith(b"<?xml version='1.0' encoding='utf-8'?>")


def test_write_xml_records_rejects_control_characters() -> None:
    """Characters XML 1.0 cannot carry should fail instead of corrupting output."""
    stream = io.BytesIO()
    record = PlaygroundRecord("A\x01", 1, "pt", "Park", 3, "x", "y", "z")

    with pytest.raises(PlaystoreStoreError, match="FID"):
        write_xml_records([record], stream)

    assert stream.getvalue() == b""


def test_write_xml_records_keeps_tab_and_newline() -> None:
    """Whitespace control characters are legal XML text."""
    stream = io.BytesIO()
    record = PlaygroundRecord("A", 1, "pt", "Park", 3, "a\tb", "c\nd", "z")

    write_xml_records([record], stream)

    point = ET.fromstring(stream.getvalue()).find("PlaygroundPoint")
    assert point.findtext("SPIELPLATZ_DETAIL") == "a\tb"  # type: ignore[union-attr]

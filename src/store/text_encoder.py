"""Canonical delimited-text writer.

This module renders playground records as the delimited document the
decoder reads. Only fields containing a comma are quoted; embedded quotes
and line terminators are written as-is, so such values do not round-trip.
"""

from __future__ import annotations

from typing import Iterable, TextIO

from core.constants import RECORD_FIELD_NAMES
from core.types import PlaygroundRecord

_LINE_TERMINATOR = "\n"


def write_text_records(records: Iterable[PlaygroundRecord], stream: TextIO) -> int:
    """Write a header line and one line per record.

    Args:
        records: Records to encode, in output order.
        stream: Writable character stream.

    Returns:
        Number of record lines written.
    """
    stream.write(",".join(RECORD_FIELD_NAMES) + _LINE_TERMINATOR)
    line_count = 0
    for record in records:
        stream.write(format_text_record(record) + _LINE_TERMINATOR)
        line_count += 1
    return line_count


def format_text_record(record: PlaygroundRecord) -> str:
    """Render one record as a delimited line without terminator.

    Args:
        record: Record to render.

    Returns:
        Encoded line text.
    """
    return ",".join(
        (
            escape_text_field(record.fid),
            format_optional_integer(record.object_id),
            escape_text_field(record.shape),
            escape_text_field(record.site_name),
            format_optional_integer(record.district),
            escape_text_field(record.detail_a),
            escape_text_field(record.detail_b),
            escape_text_field(record.annotation),
        )
    )


def escape_text_field(value: str) -> str:
    """Quote a string field if and only if it contains a comma."""
    if "," in value:
        return f'"{value}"'
    return value


def format_optional_integer(value: int | None) -> str:
    """Render an optional integer, empty when absent."""
    if value is None:
        return ""
    return str(value)

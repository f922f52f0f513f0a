"""Streaming decoder for the delimited playground text format.

This module turns a character stream into playground records. Fields are
scanned one character at a time by a two-state automaton so quoted fields
may carry commas and line terminators.
"""

from __future__ import annotations

from enum import Enum
import re
from typing import Iterator, TextIO

from core.constants import INT32_MAX, INT32_MIN, RECORD_FIELD_COUNT, RECORD_FIELD_NAMES
from core.errors import MalformedIntegerFieldError
from core.logging_config import get_logger
from core.types import PlaygroundRecord

_LOGGER = get_logger(__name__)

_READ_CHUNK_SIZE = 8192
_END_OF_STREAM = ""
_OPTIONAL_INTEGER_FIELDS = frozenset({1, 4})
_INTEGER_PATTERN = re.compile(r"\s*[+-]?[0-9]+\s*")


class ScanState(Enum):
    """Field scanner states."""

    IN_FIELD = "in_field"
    IN_QUOTED_FIELD = "in_quoted_field"


class ScanAction(Enum):
    """Effect of one character on the field being scanned."""

    APPEND = "append"
    SKIP = "skip"
    END_FIELD = "end_field"
    END_LINE = "end_line"
    ABORT = "abort"


def transition(state: ScanState, char: str) -> tuple[ScanState, ScanAction]:
    """Return the next scanner state and action for one input character.

    Args:
        state: Current scanner state.
        char: One character, or ``""`` at end of stream.

    Returns:
        Pair of next state and action to apply.
    """
    if char == _END_OF_STREAM:
        return state, ScanAction.ABORT
    if state is ScanState.IN_QUOTED_FIELD:
        if char == '"':
            return ScanState.IN_FIELD, ScanAction.SKIP
        return state, ScanAction.APPEND
    if char == ",":
        return state, ScanAction.END_FIELD
    if char in ("\r", "\n"):
        return state, ScanAction.END_LINE
    if char == '"':
        return ScanState.IN_QUOTED_FIELD, ScanAction.SKIP
    return state, ScanAction.APPEND


class _FieldScanner:
    """Pull fields from a character stream.

    A CR that ends a line arms ``_skip_line_feed`` so that an immediately
    following LF is consumed as part of the same terminator.
    """

    def __init__(self, stream: TextIO) -> None:
        self._chars = _iter_chars(stream)
        self._skip_line_feed = False

    def skip_line(self) -> None:
        """Consume characters up to and including the next line terminator."""
        while True:
            char = self._read_char()
            if char == _END_OF_STREAM:
                return
            if char in ("\r", "\n"):
                self._skip_line_feed = char == "\r"
                return

    def next_field(self) -> str | None:
        """Scan one field.

        Returns:
            Field text, or ``None`` when the stream ended before the field
            was terminated.
        """
        state = ScanState.IN_FIELD
        parts: list[str] = []
        while True:
            char = self._read_char()
            state, action = transition(state, char)
            if action is ScanAction.APPEND:
                parts.append(char)
            elif action is ScanAction.END_FIELD:
                return "".join(parts)
            elif action is ScanAction.END_LINE:
                self._skip_line_feed = char == "\r"
                return "".join(parts)
            elif action is ScanAction.ABORT:
                return None

    def _read_char(self) -> str:
        char = next(self._chars, _END_OF_STREAM)
        if self._skip_line_feed:
            self._skip_line_feed = False
            if char == "\n":
                char = next(self._chars, _END_OF_STREAM)
        return char


def iter_text_records(stream: TextIO) -> Iterator[PlaygroundRecord]:
    """Lazily decode playground records from delimited text.

    The first line is a header and is discarded without validation. A
    record cut short by the end of the stream is dropped silently.

    Args:
        stream: Character stream positioned at the start of the document.
            Open it with ``newline=""`` so CR and LF reach the scanner.

    Yields:
        Records in document order.

    Raises:
        MalformedIntegerFieldError: If an integer column holds invalid text.
    """
    scanner = _FieldScanner(stream)
    scanner.skip_line()
    record_number = 0
    while True:
        record_number += 1
        values: list[str | int | None] = []
        for field_index in range(RECORD_FIELD_COUNT):
            field_text = scanner.next_field()
            if field_text is None:
                return
            values.append(_convert_field(field_index, field_text, record_number))
        yield _build_record(values)


def read_text_records(stream: TextIO) -> list[PlaygroundRecord]:
    """Decode every record from a delimited text stream.

    Args:
        stream: Character stream positioned at the start of the document.

    Returns:
        Ordered list of decoded records.

    Raises:
        MalformedIntegerFieldError: If an integer column holds invalid text.
    """
    records = list(iter_text_records(stream))
    _LOGGER.debug("text_records_decoded", record_count=len(records))
    return records


def parse_optional_integer(text: str) -> int | None:
    """Parse optional signed 32-bit integer text.

    Args:
        text: Raw field text.

    Returns:
        ``None`` for empty text, else the parsed integer.

    Raises:
        ValueError: If text is not a base-10 integer within 32-bit range.
    """
    if not text:
        return None
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ValueError(f"'{text}' is not a base-10 integer")
    value = int(text)
    if value < INT32_MIN or value > INT32_MAX:
        raise ValueError(f"'{text}' is outside the signed 32-bit range")
    return value


def _convert_field(field_index: int, field_text: str, record_number: int) -> str | int | None:
    if field_index not in _OPTIONAL_INTEGER_FIELDS:
        return field_text
    try:
        return parse_optional_integer(field_text)
    except ValueError as error:
        raise MalformedIntegerFieldError(
            f"Failed to decode record {record_number}: field "
            f"{RECORD_FIELD_NAMES[field_index]} {error}. "
            "Fix the source value or leave the column empty."
        ) from error


def _build_record(values: list[str | int | None]) -> PlaygroundRecord:
    fid, object_id, shape, site_name, district, detail_a, detail_b, annotation = values
    return PlaygroundRecord(
        fid=str(fid),
        object_id=object_id if isinstance(object_id, int) else None,
        shape=str(shape),
        site_name=str(site_name),
        district=district if isinstance(district, int) else None,
        detail_a=str(detail_a),
        detail_b=str(detail_b),
        annotation=str(annotation),
    )


def _iter_chars(stream: TextIO) -> Iterator[str]:
    """Yield single characters from a text stream read in chunks."""
    while True:
        chunk = stream.read(_READ_CHUNK_SIZE)
        if not chunk:
            return
        yield from chunk

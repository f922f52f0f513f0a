"""Binary record codec.

This module encodes playground records into self-delimiting byte runs and
decodes them back from a given stream offset. Layout per record, in field
order: strings as ``<u32 length><utf-8 bytes>``, optional integers as
``<u8 presence><i32 value>``. All integers are little-endian. There is no
file header, magic number, or version tag.
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO, Iterator

from core.constants import INT32_MAX, INT32_MIN, TEXT_ENCODING
from core.errors import OffsetOutOfRangeError, PlaystoreStoreError
from core.types import PlaygroundRecord

_LENGTH = struct.Struct("<I")
_OPTIONAL_INTEGER = struct.Struct("<?i")


def encode_record(record: PlaygroundRecord) -> bytes:
    """Encode one record into its binary form.

    Args:
        record: Record to encode.

    Returns:
        Encoded bytes.

    Raises:
        PlaystoreStoreError: If an integer field is outside 32-bit range.
    """
    buffer = io.BytesIO()
    _write_string(buffer, record.fid)
    _write_optional_integer(buffer, record.object_id, "object_id")
    _write_string(buffer, record.shape)
    _write_string(buffer, record.site_name)
    _write_optional_integer(buffer, record.district, "district")
    _write_string(buffer, record.detail_a)
    _write_string(buffer, record.detail_b)
    _write_string(buffer, record.annotation)
    return buffer.getvalue()


def write_record(record: PlaygroundRecord, stream: BinaryIO) -> int:
    """Append one encoded record at the current stream position.

    Args:
        record: Record to encode.
        stream: Writable binary stream.

    Returns:
        Byte offset at which the record starts.
    """
    offset = stream.tell()
    stream.write(encode_record(record))
    return offset


def decode_record_at(stream: BinaryIO, offset: int) -> tuple[PlaygroundRecord, int]:
    """Decode the record starting at ``offset``.

    Args:
        stream: Seekable binary stream holding encoded records.
        offset: Byte offset of the record start.

    Returns:
        Pair of decoded record and the offset just past it.

    Raises:
        OffsetOutOfRangeError: If the offset or the record extends past the
            end of the stream.
        PlaystoreStoreError: If string bytes are not valid UTF-8.
    """
    stream_length = stream.seek(0, io.SEEK_END)
    if offset < 0 or offset >= stream_length:
        raise OffsetOutOfRangeError(
            f"Record offset {offset} is outside the binary stream of {stream_length} bytes. "
            "The index and data files do not belong together or are corrupted."
        )
    stream.seek(offset)
    record = PlaygroundRecord(
        fid=_read_string(stream),
        object_id=_read_optional_integer(stream),
        shape=_read_string(stream),
        site_name=_read_string(stream),
        district=_read_optional_integer(stream),
        detail_a=_read_string(stream),
        detail_b=_read_string(stream),
        annotation=_read_string(stream),
    )
    return record, stream.tell()


def iter_binary_records(stream: BinaryIO) -> Iterator[tuple[int, PlaygroundRecord]]:
    """Yield ``(offset, record)`` pairs sequentially from the stream start."""
    stream_length = stream.seek(0, io.SEEK_END)
    offset = 0
    while offset < stream_length:
        record, next_offset = decode_record_at(stream, offset)
        yield offset, record
        offset = next_offset


def _write_string(buffer: BinaryIO, value: str) -> None:
    encoded = value.encode(TEXT_ENCODING)
    buffer.write(_LENGTH.pack(len(encoded)))
    buffer.write(encoded)


def _write_optional_integer(buffer: BinaryIO, value: int | None, field_name: str) -> None:
    if value is None:
        buffer.write(_OPTIONAL_INTEGER.pack(False, 0))
        return
    if value < INT32_MIN or value > INT32_MAX:
        raise PlaystoreStoreError(
            f"Failed to encode {field_name}={value}: value does not fit a signed 32-bit integer."
        )
    buffer.write(_OPTIONAL_INTEGER.pack(True, value))


def _read_string(stream: BinaryIO) -> str:
    (length,) = _LENGTH.unpack(_read_exact(stream, _LENGTH.size))
    raw_value = _read_exact(stream, length)
    try:
        return raw_value.decode(TEXT_ENCODING)
    except UnicodeDecodeError as error:
        raise PlaystoreStoreError(
            f"Failed to decode string field ending at byte {stream.tell()}: {error.reason}. "
            "The binary file is corrupted."
        ) from error


def _read_optional_integer(stream: BinaryIO) -> int | None:
    present, value = _OPTIONAL_INTEGER.unpack(_read_exact(stream, _OPTIONAL_INTEGER.size))
    # Any nonzero presence byte unpacks as True.
    if not present:
        return None
    return int(value)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    position = stream.tell()
    data = stream.read(size)
    if len(data) != size:
        raise OffsetOutOfRangeError(
            f"Record truncated at byte {position}: expected {size} bytes, got {len(data)}. "
            "The binary file is incomplete or corrupted."
        )
    return data

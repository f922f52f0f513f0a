"""Sparse object-id index over the binary record stream.

This module writes the binary stream and its index in one pass and
resolves object ids back to records. Each entry is a little-endian
``<u64 offset><i32 key>`` pair; records without an object id are stored
in the data stream but have no entry.
"""

from __future__ import annotations

import struct
from typing import BinaryIO, Iterable, Iterator

from core.constants import INT32_MAX, INT32_MIN, UINT64_MAX
from core.errors import IndexCorruptError, PlaystoreStoreError
from core.logging_config import get_logger
from core.types import IndexEntry, PlaygroundRecord
from store.binary_codec import decode_record_at, write_record

_LOGGER = get_logger(__name__)

_ENTRY = struct.Struct("<Qi")
INDEX_ENTRY_SIZE = _ENTRY.size


def write_records_with_index(
    records: Iterable[PlaygroundRecord],
    data_stream: BinaryIO,
    index_stream: BinaryIO,
) -> list[IndexEntry]:
    """Encode records and build their sparse index in lockstep.

    Args:
        records: Records to persist, in order.
        data_stream: Writable binary stream for encoded records.
        index_stream: Writable binary stream for index entries.

    Returns:
        Index entries in write order.
    """
    entries: list[IndexEntry] = []
    for record in records:
        offset = write_record(record, data_stream)
        if record.object_id is None:
            continue
        entry = IndexEntry(offset=offset, key=record.object_id)
        index_stream.write(encode_index_entry(entry))
        entries.append(entry)
    return entries


def encode_index_entry(entry: IndexEntry) -> bytes:
    """Encode one index entry into its fixed-width form.

    Raises:
        PlaystoreStoreError: If the offset or key does not fit its field.
    """
    if entry.offset < 0 or entry.offset > UINT64_MAX:
        raise PlaystoreStoreError(
            f"Failed to encode index entry: offset {entry.offset} does not fit an unsigned "
            "64-bit field."
        )
    if entry.key < INT32_MIN or entry.key > INT32_MAX:
        raise PlaystoreStoreError(
            f"Failed to encode index entry: key {entry.key} does not fit a signed 32-bit field."
        )
    return _ENTRY.pack(entry.offset, entry.key)


def iter_index_entries(index_stream: BinaryIO) -> Iterator[IndexEntry]:
    """Scan index entries from the start of the stream.

    Args:
        index_stream: Readable binary index stream.

    Yields:
        Entries in stored order.

    Raises:
        IndexCorruptError: If the stream ends inside an entry.
    """
    index_stream.seek(0)
    entry_number = 0
    while True:
        raw_entry = index_stream.read(INDEX_ENTRY_SIZE)
        if not raw_entry:
            return
        if len(raw_entry) != INDEX_ENTRY_SIZE:
            raise IndexCorruptError(
                f"Index entry {entry_number} is truncated: got {len(raw_entry)} of "
                f"{INDEX_ENTRY_SIZE} bytes. Rebuild the index with a new load cycle."
            )
        offset, key = _ENTRY.unpack(raw_entry)
        yield IndexEntry(offset=offset, key=key)
        entry_number += 1


def lookup_records(
    key: int,
    data_stream: BinaryIO,
    index_stream: BinaryIO,
) -> list[PlaygroundRecord]:
    """Return every record whose index key equals ``key``.

    The whole index is scanned; each match costs one direct seek into the
    data stream. An unknown key yields an empty list.

    Args:
        key: Object id to look up.
        data_stream: Readable, seekable binary record stream.
        index_stream: Readable index stream.

    Returns:
        Matching records in index order.

    Raises:
        IndexCorruptError: If the index is truncated.
        OffsetOutOfRangeError: If an entry points past the data stream.
    """
    matches: list[PlaygroundRecord] = []
    for entry in iter_index_entries(index_stream):
        if entry.key != key:
            continue
        record, _ = decode_record_at(data_stream, entry.offset)
        _LOGGER.debug("index_match", key=key, offset=entry.offset)
        matches.append(record)
    return matches

"""Unit tests for the sparse object-id index."""

from __future__ import annotations

import io
import struct

import pytest

from core.errors import IndexCorruptError, OffsetOutOfRangeError, PlaystoreStoreError
from core.types import IndexEntry, PlaygroundRecord
from ingest.text_decoder import read_text_records
from store.sparse_index import (
    INDEX_ENTRY_SIZE,
    encode_index_entry,
    iter_index_entries,
    lookup_records,
    write_records_with_index,
)

_HEADER = "FID,OBJECTID,SHAPE,ANL_NAME,BEZIRK,SPIELPLATZ_DETAIL,TYP_DETAIL,SE_ANNO_CAD_DATA\n"


def _record(fid: str, object_id: int | None) -> PlaygroundRecord:
    return PlaygroundRecord(fid, object_id, "pt", "Park", 3, "x", "y", "z")


def _build(records: list[PlaygroundRecord]) -> tuple[io.BytesIO, io.BytesIO, list[IndexEntry]]:
    data_stream = io.BytesIO()
    index_stream = io.BytesIO()
    entries = write_records_with_index(records, data_stream, index_stream)
    return data_stream, index_stream, entries


def test_index_has_one_entry_per_present_key_in_order() -> None:
    """Only records with an object id should be indexed, in source order."""
    records = [_record("a", 5), _record("b", None), _record("c", 2), _record("d", None)]

    _, index_stream, entries = _build(records)

    assert [entry.key for entry in iter_index_entries(index_stream)] == [5, 2]
    assert len(index_stream.getvalue()) == 2 * INDEX_ENTRY_SIZE
    assert list(iter_index_entries(index_stream)) == entries


def test_index_built_from_decoded_scenario_points_at_first_record() -> None:
    """The two-row scenario should yield one entry at offset zero."""
    source = _HEADER + "A,1,pt,Park,3,x,y,z\nB,,pt,Lake,,x,y,z\n"
    records = read_text_records(io.StringIO(source, newline=""))

    _, _, entries = _build(records)

    assert entries == [IndexEntry(offset=0, key=1)]


def test_encode_index_entry_layout() -> None:
    """Entries should be a u64 offset followed by an i32 key."""
    assert encode_index_entry(IndexEntry(offset=7, key=-1)) == struct.pack("<Qi", 7, -1)


def test_lookup_returns_single_matching_record() -> None:
    """A unique key should resolve to exactly its record."""
    records = [_record("a", 5), _record("b", None), _record("c", 2)]
    data_stream, index_stream, _ = _build(records)

    matches = lookup_records(2, data_stream, index_stream)

    assert matches == [records[2]]


def test_lookup_returns_every_record_sharing_a_key() -> None:
    """Duplicate keys should all be returned in index order."""
    records = [_record("a", 5), _record("b", 9), _record("c", 5)]
    data_stream, index_stream, _ = _build(records)

    matches = lookup_records(5, data_stream, index_stream)

    assert [record.fid for record in matches] == ["a", "c"]


def test_lookup_unknown_key_returns_empty_list() -> None:
    """A missing key is an empty result, not an error."""
    data_stream, index_stream, _ = _build([_record("a", 5)])

    assert lookup_records(404, data_stream, index_stream) == []


def test_iter_index_entries_raises_for_partial_entry() -> None:
    """A trailing partial entry should be reported as corruption."""
    _, index_stream, _ = _build([_record("a", 5)])
    truncated = io.BytesIO(index_stream.getvalue()[:-1])

    with pytest.raises(IndexCorruptError):
        list(iter_index_entries(truncated))


def test_lookup_raises_when_entry_points_past_data() -> None:
    """An index paired with the wrong data file should fail loudly."""
    index_stream = io.BytesIO(encode_index_entry(IndexEntry(offset=10_000, key=1)))

    with pytest.raises(OffsetOutOfRangeError):
        lookup_records(1, io.BytesIO(b"\x00" * 16), index_stream)


@pytest.mark.parametrize(
    "entry",
    [
        IndexEntry(offset=-1, key=1),
        IndexEntry(offset=2**64, key=1),
        IndexEntry(offset=0, key=2**31),
    ],
)
def test_encode_index_entry_rejects_values_outside_field_width(entry: IndexEntry) -> None:
    """Offsets and keys that overflow their fixed-width fields should fail."""
    with pytest.raises(PlaystoreStoreError):
        encode_index_entry(entry)

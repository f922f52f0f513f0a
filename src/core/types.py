"""Shared typed models.

This module defines immutable data models used by the ingest, store,
SDK, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class PlaygroundRecord:
    """One decoded playground row with eight fixed fields.

    Attributes:
        fid: Feature identifier, may be empty or contain commas.
        object_id: Optional sparse primary key, ``None`` when absent.
        shape: Well-known-text geometry description.
        site_name: Name of the playground site.
        district: Optional district number, ``None`` when absent.
        detail_a: Playground detail description.
        detail_b: Playground type description.
        annotation: Free-form CAD annotation text.
    """

    fid: str
    object_id: int | None
    shape: str
    site_name: str
    district: int | None
    detail_a: str
    detail_b: str
    annotation: str


@dataclass(frozen=True)
class IndexEntry:
    """Sparse index entry pointing at a binary-encoded record.

    Attributes:
        offset: Byte position of the record in the binary stream.
        key: The record's ``object_id`` value.
    """

    offset: int
    key: int


@dataclass(frozen=True)
class ObjectIdRange:
    """Minimum and maximum over present object ids."""

    minimum: int
    maximum: int


@dataclass(frozen=True)
class LoadOptions:
    """Load cycle options.

    Attributes:
        source_uri: Local path, ``http(s)://`` URL, or ``s3://`` URI.
        write_database: Whether to mirror records into the relational store.
    """

    source_uri: str
    write_database: bool = True


@dataclass(frozen=True)
class LoadSummary:
    """Outcome of one load cycle.

    Attributes:
        record_count: Number of decoded records.
        indexed_count: Number of records reachable through the sparse index.
        object_id_range: Range of present object ids, ``None`` when none exist.
        output_paths: Files written during the cycle, in stage order.
    """

    record_count: int
    indexed_count: int
    object_id_range: ObjectIdRange | None
    output_paths: tuple[Path, ...]

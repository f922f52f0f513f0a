"""Public SDK surface for Playstore.

This module provides a stable import path for library users.
It re-exports the client, typed models, and stream codecs.
"""

from __future__ import annotations

from core.config import PlaystoreConfig
from core.types import IndexEntry, LoadOptions, LoadSummary, ObjectIdRange, PlaygroundRecord
from ingest.text_decoder import iter_text_records, read_text_records
from store.binary_codec import decode_record_at, encode_record, write_record
from store.dataset_sdk import PlaystoreClient
from store.sparse_index import lookup_records, write_records_with_index
from store.text_encoder import write_text_records
from transforms.object_id_range import has_object_ids, object_id_range

__all__ = [
    "IndexEntry",
    "LoadOptions",
    "LoadSummary",
    "ObjectIdRange",
    "PlaygroundRecord",
    "PlaystoreClient",
    "PlaystoreConfig",
    "decode_record_at",
    "encode_record",
    "has_object_ids",
    "iter_text_records",
    "lookup_records",
    "object_id_range",
    "read_text_records",
    "write_record",
    "write_records_with_index",
    "write_text_records",
]

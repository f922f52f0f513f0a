"""Load cycle orchestration.

This module decodes one source document into an immutable record
sequence and hands it to each persistence stage in turn: canonical
text, binary records with sparse index, JSON and XML mirrors, and the
relational store. Stages are independent best-effort mirrors.
"""

from __future__ import annotations

from pathlib import Path

from core.config import PlaystoreConfig
from core.constants import TEXT_ENCODING
from core.logging_config import get_logger
from core.types import LoadOptions, LoadSummary, ObjectIdRange, PlaygroundRecord
from ingest.source_reader import open_source_text
from ingest.text_decoder import read_text_records
from store.mirror_export import write_json_records, write_xml_records
from store.relational_store import RelationalStore
from store.sparse_index import write_records_with_index
from store.text_encoder import write_text_records
from transforms.object_id_range import has_object_ids, object_id_range

_LOGGER = get_logger(__name__)


class LoadPipelineRunner:
    """Runner for one load cycle.

    Every stage opens its own streams and closes them before the next
    stage starts.
    """

    def __init__(self, options: LoadOptions, config: PlaystoreConfig) -> None:
        self._options = options
        self._config = config
        self._output_paths: list[Path] = []

    def run(self) -> LoadSummary:
        """Execute the load cycle and return its summary."""
        records = tuple(self._decode_source())
        key_range = _log_object_id_range(records)
        self._config.data_root.mkdir(parents=True, exist_ok=True)
        self._write_text(records)
        indexed_count = self._write_binary(records)
        self._write_json(records)
        self._write_xml(records)
        if self._options.write_database:
            self._write_database(records)
        summary = LoadSummary(
            record_count=len(records),
            indexed_count=indexed_count,
            object_id_range=key_range,
            output_paths=tuple(self._output_paths),
        )
        _LOGGER.info(
            "load_completed",
            source_uri=self._options.source_uri,
            record_count=summary.record_count,
            indexed_count=summary.indexed_count,
            data_root=str(self._config.data_root),
            write_database=self._options.write_database,
        )
        return summary

    def _decode_source(self) -> list[PlaygroundRecord]:
        with open_source_text(self._options.source_uri, self._config) as stream:
            return read_text_records(stream)

    def _write_text(self, records: tuple[PlaygroundRecord, ...]) -> None:
        text_path = self._config.text_path
        with text_path.open("w", encoding=TEXT_ENCODING, newline="") as stream:
            write_text_records(records, stream)
        self._output_paths.append(text_path)

    def _write_binary(self, records: tuple[PlaygroundRecord, ...]) -> int:
        binary_path = self._config.binary_path
        index_path = self._config.index_path
        with binary_path.open("wb") as data_stream, index_path.open("wb") as index_stream:
            entries = write_records_with_index(records, data_stream, index_stream)
        self._output_paths.extend((binary_path, index_path))
        _LOGGER.info(
            "binary_written",
            binary_path=str(binary_path),
            index_path=str(index_path),
            record_count=len(records),
            index_entry_count=len(entries),
        )
        return len(entries)

    def _write_json(self, records: tuple[PlaygroundRecord, ...]) -> None:
        json_path = self._config.json_path
        with json_path.open("w", encoding=TEXT_ENCODING) as stream:
            write_json_records(records, stream)
        self._output_paths.append(json_path)

    def _write_xml(self, records: tuple[PlaygroundRecord, ...]) -> None:
        xml_path = self._config.xml_path
        with xml_path.open("wb") as stream:
            write_xml_records(records, stream)
        self._output_paths.append(xml_path)

    def _write_database(self, records: tuple[PlaygroundRecord, ...]) -> None:
        store = RelationalStore(self._config.database_path)
        store.replace_records(records)
        self._output_paths.append(store.database_path)


def run_load_cycle(options: LoadOptions, config: PlaystoreConfig) -> LoadSummary:
    """Decode a source document and persist it in every output format.

    Args:
        options: Load options.
        config: Runtime configuration.

    Returns:
        Summary of the completed cycle.

    Raises:
        PlaystoreIngestError: If the source cannot be read or decoded.
        PlaystoreStoreError: If an output cannot be written.
    """
    return LoadPipelineRunner(options, config).run()


def _log_object_id_range(records: tuple[PlaygroundRecord, ...]) -> ObjectIdRange | None:
    """Log the object id range when any record carries an object id."""
    if not has_object_ids(records):
        _LOGGER.warning("object_id_range_empty", record_count=len(records))
        return None
    key_range = object_id_range(records)
    _LOGGER.info("object_id_range", minimum=key_range.minimum, maximum=key_range.maximum)
    return key_range

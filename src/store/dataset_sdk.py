"""Python SDK for playground data operations.

This module exposes high-level APIs for load cycles, index lookups,
database lookups, and object id aggregates over persisted outputs.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import PlaystoreConfig
from core.constants import TEXT_ENCODING
from core.errors import PlaystoreStoreError
from core.logging_config import get_logger
from core.types import LoadOptions, LoadSummary, ObjectIdRange, PlaygroundRecord
from ingest.pipeline import run_load_cycle
from ingest.text_decoder import read_text_records
from store.relational_store import RelationalStore
from store.sparse_index import lookup_records
from transforms.object_id_range import object_id_range

_LOGGER = get_logger(__name__)


class PlaystoreClient:
    """Primary SDK entry point."""

    def __init__(self, config: PlaystoreConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or PlaystoreConfig.from_env()

    @property
    def config(self) -> PlaystoreConfig:
        """Return the runtime configuration."""
        return self._config

    def load(self, options: LoadOptions | None = None) -> LoadSummary:
        """Run a load cycle.

        Args:
            options: Load options; the configured source when omitted.

        Returns:
            Load cycle summary.
        """
        load_options = options or LoadOptions(source_uri=self._config.source_uri)
        return run_load_cycle(load_options, self._config)

    def lookup(self, object_id: int) -> list[PlaygroundRecord]:
        """Find records by object id through the binary sparse index.

        Args:
            object_id: Object id to look up.

        Returns:
            Every matching record; empty when the key is unknown.

        Raises:
            PlaystoreStoreError: If the binary or index file is missing.
            OffsetOutOfRangeError: If the index points past the data file.
        """
        binary_path = _require_file(self._config.binary_path)
        index_path = _require_file(self._config.index_path)
        with binary_path.open("rb") as data_stream, index_path.open("rb") as index_stream:
            matches = lookup_records(object_id, data_stream, index_stream)
        _LOGGER.info(
            "lookup_completed",
            backend="binary",
            object_id=object_id,
            match_count=len(matches),
        )
        return matches

    def lookup_database(self, object_id: int) -> list[PlaygroundRecord]:
        """Find records by object id in the relational store.

        Args:
            object_id: Object id to look up.

        Returns:
            Every matching record; empty when none match.
        """
        matches = RelationalStore(self._config.database_path).find_by_object_id(object_id)
        _LOGGER.info(
            "lookup_completed",
            backend="database",
            object_id=object_id,
            match_count=len(matches),
        )
        return matches

    def read_canonical_records(self) -> list[PlaygroundRecord]:
        """Decode the canonical delimited-text output."""
        text_path = _require_file(self._config.text_path)
        with text_path.open("r", encoding=TEXT_ENCODING, newline="") as stream:
            return read_text_records(stream)

    def object_id_range(self) -> ObjectIdRange:
        """Compute the object id range of the canonical output.

        Raises:
            EmptyKeySetError: If no persisted record has an object id.
        """
        return object_id_range(self.read_canonical_records())

    def with_data_root(self, data_root: str) -> "PlaystoreClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        return PlaystoreClient(replace(self._config, data_root=resolved_root))


def _require_file(path: Path) -> Path:
    if not path.is_file():
        raise PlaystoreStoreError(
            f"Output file not found at {path}. Run a load cycle before querying."
        )
    return path

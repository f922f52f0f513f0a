"""DuckDB mirror of decoded records.

This module owns the ``playgroundpoints`` table. Each load cycle
replaces the table contents; lookups select rows by object id.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

from core.constants import DATABASE_TABLE_NAME
from core.errors import PlaystoreDependencyError, PlaystoreStoreError
from core.logging_config import get_logger
from core.types import PlaygroundRecord

_LOGGER = get_logger(__name__)

_CREATE_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {DATABASE_TABLE_NAME} (
    fid VARCHAR NOT NULL,
    objectid INTEGER,
    shape VARCHAR NOT NULL,
    anlname VARCHAR NOT NULL,
    bezirk INTEGER,
    spielplatzdetail VARCHAR NOT NULL,
    typdetail VARCHAR NOT NULL,
    seannocaddata VARCHAR NOT NULL
)
"""
_DELETE_SQL = f"DELETE FROM {DATABASE_TABLE_NAME}"
_INSERT_SQL = f"""
INSERT INTO {DATABASE_TABLE_NAME}
    (fid, objectid, shape, anlname,
     bezirk, spielplatzdetail, typdetail, seannocaddata)
VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""
_SELECT_BY_OBJECT_ID_SQL = f"""
SELECT fid, objectid, shape, anlname,
       bezirk, spielplatzdetail, typdetail, seannocaddata
FROM {DATABASE_TABLE_NAME}
WHERE objectid = ?
"""


class RelationalStore:
    """DuckDB-backed record table.

    Connections are opened per operation and closed before returning,
    so no database handle outlives a pipeline stage.
    """

    def __init__(self, database_path: Path) -> None:
        """Create store handle.

        Args:
            database_path: DuckDB database file path.
        """
        self._database_path = database_path

    @property
    def database_path(self) -> Path:
        """Return the database file path."""
        return self._database_path

    def replace_records(self, records: Iterable[PlaygroundRecord]) -> int:
        """Replace all table rows with ``records`` in one transaction.

        A failed insert rolls back, leaving the previous rows in place.

        Args:
            records: Records to insert, in order.

        Returns:
            Number of inserted rows.

        Raises:
            PlaystoreStoreError: If the database write fails.
        """
        rows = [_row_from_record(record) for record in records]
        duckdb = _load_duckdb()
        connection = self._connect(duckdb)
        try:
            connection.execute(_CREATE_TABLE_SQL)
            connection.begin()
            try:
                connection.execute(_DELETE_SQL)
                if rows:
                    connection.executemany(_INSERT_SQL, rows)
            except duckdb.Error:
                connection.rollback()
                raise
            connection.commit()
        except duckdb.Error as error:
            raise PlaystoreStoreError(
                f"Failed to write records to {self._database_path}: {error}. "
                "Check that no other process holds the database open."
            ) from error
        finally:
            connection.close()
        _LOGGER.info(
            "database_written",
            database_path=str(self._database_path),
            row_count=len(rows),
        )
        return len(rows)

    def find_by_object_id(self, object_id: int) -> list[PlaygroundRecord]:
        """Select every row with the given object id.

        Args:
            object_id: Object id to match.

        Returns:
            Matching records; empty when none match.

        Raises:
            PlaystoreStoreError: If the database is missing or unreadable.
        """
        if not self._database_path.exists():
            raise PlaystoreStoreError(
                f"Database not found at {self._database_path}. "
                "Run a load cycle before querying the database."
            )
        duckdb = _load_duckdb()
        connection = self._connect(duckdb)
        try:
            connection.execute(_CREATE_TABLE_SQL)
            rows = connection.execute(_SELECT_BY_OBJECT_ID_SQL, [object_id]).fetchall()
        except duckdb.Error as error:
            raise PlaystoreStoreError(
                f"Failed to query {self._database_path}: {error}."
            ) from error
        finally:
            connection.close()
        return [_record_from_row(row) for row in rows]

    def _connect(self, duckdb: Any) -> Any:
        self._database_path.parent.mkdir(parents=True, exist_ok=True)
        return duckdb.connect(str(self._database_path))


def _load_duckdb() -> Any:
    """Import duckdb or fail with an actionable dependency error."""
    try:
        import duckdb
    except ImportError as error:
        raise PlaystoreDependencyError(
            "The relational store requires duckdb, but it is not installed. "
            "Install duckdb or run the load with --skip-database."
        ) from error
    return duckdb


def _row_from_record(record: PlaygroundRecord) -> tuple[object, ...]:
    return (
        record.fid,
        record.object_id,
        record.shape,
        record.site_name,
        record.district,
        record.detail_a,
        record.detail_b,
        record.annotation,
    )


def _record_from_row(row: tuple[Any, ...]) -> PlaygroundRecord:
    fid, object_id, shape, site_name, district, detail_a, detail_b, annotation = row
    return PlaygroundRecord(
        fid=str(fid),
        object_id=None if object_id is None else int(object_id),
        shape=str(shape),
        site_name=str(site_name),
        district=None if district is None else int(district),
        detail_a=str(detail_a),
        detail_b=str(detail_b),
        annotation=str(annotation),
    )

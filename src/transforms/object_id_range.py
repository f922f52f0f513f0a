"""Object id aggregates over decoded records.

This module computes the range of present object ids. Callers guard
with ``has_object_ids`` because an empty key set has no range.
"""

from __future__ import annotations

from typing import Iterable

from core.errors import EmptyKeySetError
from core.types import ObjectIdRange, PlaygroundRecord


def present_object_ids(records: Iterable[PlaygroundRecord]) -> list[int]:
    """Return present object ids in record order, skipping absent ones."""
    return [record.object_id for record in records if record.object_id is not None]


def has_object_ids(records: Iterable[PlaygroundRecord]) -> bool:
    """Return whether any record carries an object id."""
    return any(record.object_id is not None for record in records)


def object_id_range(records: Iterable[PlaygroundRecord]) -> ObjectIdRange:
    """Compute minimum and maximum over present object ids.

    Args:
        records: Records to aggregate.

    Returns:
        Range of present object ids.

    Raises:
        EmptyKeySetError: If no record has an object id.
    """
    object_ids = present_object_ids(records)
    if not object_ids:
        raise EmptyKeySetError(
            "Cannot compute object id range: no record has an object id. "
            "Check has_object_ids before aggregating."
        )
    return ObjectIdRange(minimum=min(object_ids), maximum=max(object_ids))

"""Playstore exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class PlaystoreError(Exception):
    """Base exception for all Playstore failures."""


class PlaystoreConfigError(PlaystoreError):
    """Raised for invalid runtime configuration."""


class PlaystoreIngestError(PlaystoreError):
    """Raised for source reading and text decoding failures."""


class MalformedIntegerFieldError(PlaystoreIngestError):
    """Raised when an optional-integer column holds non-numeric text."""


class PlaystoreStoreError(PlaystoreError):
    """Raised for binary, index, mirror, and database persistence failures."""


class OffsetOutOfRangeError(PlaystoreStoreError):
    """Raised when a binary record offset points past the data stream."""


class IndexCorruptError(PlaystoreStoreError):
    """Raised when an index stream does not hold whole entries."""


class PlaystoreDependencyError(PlaystoreError):
    """Raised when an optional runtime dependency is missing."""


class EmptyKeySetError(PlaystoreError):
    """Raised when an aggregate needs at least one present object id."""

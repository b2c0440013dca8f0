"""
Error taxonomy for the usage engine.

- ``ValidationError``: caller input violates a precondition. Raised before
  any store access, so no partial state change can occur.
- ``StorageError``: the backing document store failed a read or write.

``ValidationError`` subclasses ``ValueError`` so callers that only know the
standard library contract still catch it.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-002)

TODO:
- None
"""


class UsageError(Exception):
    """Base class for all usage engine errors."""


class ValidationError(UsageError, ValueError):
    """Caller-supplied input is invalid (wattage, clock times, dates, ids)."""


class StorageError(UsageError):
    """The daily summary store could not complete a read, write or delete."""

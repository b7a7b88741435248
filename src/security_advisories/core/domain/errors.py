from __future__ import annotations


class AdvisoryError(Exception):
    """Base class for errors raised while processing the advisory database."""


class AdvisoryParseError(AdvisoryError):
    """The advisory document could not be parsed into a mapping."""


class ConstraintError(AdvisoryError, ValueError):
    """A version constraint could not be interpreted."""


class TimestampUnavailableError(AdvisoryError):
    """Version-control history could not provide a timestamp for a file."""


class FatalError(AdvisoryError):
    """Aborts the whole run (unreadable root, unwritable output directory)."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class CommitTimestampPort(Protocol):
    def first_commit_time(self, path: Path) -> int:
        """Unix timestamp of the commit that introduced the file.

        Raises TimestampUnavailableError when history is not available.
        """
        ...

    def last_commit_time(self, path: Path) -> int:
        """Unix timestamp of the most recent commit touching the file."""
        ...

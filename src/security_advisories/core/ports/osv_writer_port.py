from __future__ import annotations

from pathlib import Path
from typing import Protocol

from ..domain.osv import OsvRecord


class OsvWriterPort(Protocol):
    def prepare(self) -> None:
        """Make sure the destination exists. Raises FatalError when it cannot be created."""
        ...

    def write(self, record: OsvRecord) -> Path:
        """Persist one record as ``<id>.json`` and return its path. Raises FatalError on write failure."""
        ...

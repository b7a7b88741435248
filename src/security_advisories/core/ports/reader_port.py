from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Protocol

from ..domain.models import Advisory


class AdvisorySourcePort(Protocol):
    def list_files(self) -> Iterator[Path]:
        """Yield candidate advisory files under the database root."""
        ...

    def relative_path(self, path: Path) -> str:
        """Return the POSIX path of ``path`` relative to the database root."""
        ...

    def read(self, path: Path) -> dict[str, Any]:
        """Parse the document at ``path`` into a mapping.

        Raises AdvisoryParseError on malformed input.
        """
        ...

    def load(self, path: Path) -> Advisory:
        """Parse and convert the document into an Advisory.

        Raises AdvisoryParseError when required fields are missing or mistyped.
        """
        ...

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..core.domain.errors import FatalError
from ..core.domain.osv import OsvRecord
from ..core.ports.osv_writer_port import OsvWriterPort

logger = logging.getLogger(__name__)


def render_osv_json(record: OsvRecord) -> str:
    return json.dumps(record.model_dump(mode="json"), ensure_ascii=False, indent=2)


class JsonDirectoryWriter(OsvWriterPort):
    """Writes ``<target>/<id>.json`` files. Existing files with the same id are overwritten."""

    def __init__(self, target: Path) -> None:
        self._target = Path(target)

    def prepare(self) -> None:
        try:
            self._target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FatalError(f"Cannot create output directory {self._target}: {e}") from e
        if not self._target.is_dir():
            raise FatalError(f"Output path {self._target} is not a directory")

    def write(self, record: OsvRecord) -> Path:
        path = self._target / f"{record.id}.json"
        try:
            path.write_text(render_osv_json(record), encoding="utf-8")
        except OSError as e:
            raise FatalError(f"Cannot write {path}: {e}") from e
        return path

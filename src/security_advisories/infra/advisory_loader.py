from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterator

import yaml
from pydantic import ValidationError

from ..core.domain.errors import AdvisoryParseError, FatalError
from ..core.domain.models import Advisory, Branch
from ..core.ports.reader_port import AdvisorySourcePort
from .schemas import AdvisoryDocument

logger = logging.getLogger(__name__)


class AdvisoryYamlLoader(yaml.SafeLoader):
    """SafeLoader that keeps scalar mapping keys as their source text.

    Unquoted branch keys such as ``1.10`` stay ``"1.10"`` instead of becoming
    the float ``1.1``. Duplicate keys are rejected.
    """


def _construct_text_keyed_mapping(loader: AdvisoryYamlLoader, node: yaml.MappingNode) -> dict[Any, Any]:
    loader.flatten_mapping(node)
    mapping: dict[Any, Any] = {}
    for key_node, value_node in node.value:
        if isinstance(key_node, yaml.ScalarNode):
            key = key_node.value
        else:
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping", node.start_mark,
                "found a non-scalar key", key_node.start_mark,
            )
        if key in mapping:
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping", node.start_mark,
                f"found duplicate key \"{key}\"", key_node.start_mark,
            )
        mapping[key] = loader.construct_object(value_node, deep=True)
    return mapping


AdvisoryYamlLoader.add_constructor(yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_text_keyed_mapping)


def list_advisory_files(root: Path, *, vendor_dir: str = "vendor") -> Iterator[Path]:
    """Lazily yield advisory candidates below ``root``.

    Files directly inside ``root`` are skipped, as are hidden directories
    (``.git``, IDE folders) and ``root/<vendor_dir>``. Entries are visited in
    sorted order so that runs are reproducible.
    """
    root = Path(root)
    try:
        entries = sorted(os.scandir(root), key=lambda e: e.name)
    except OSError as e:
        raise FatalError(f"Cannot read advisory root {root}: {e}") from e

    vendor_path = root / vendor_dir
    for entry in entries:
        if not entry.is_dir():
            continue
        if entry.name.startswith(".") or Path(entry.path) == vendor_path:
            logger.debug(f"Skipping directory {entry.path}")
            continue
        yield from _walk(Path(entry.path))


def _walk(directory: Path) -> Iterator[Path]:
    try:
        entries = sorted(os.scandir(directory), key=lambda e: e.name)
    except OSError as e:
        logger.warning(f"Cannot read directory {directory}: {e}")
        return
    for entry in entries:
        if entry.is_dir():
            if entry.name.startswith("."):
                continue
            yield from _walk(Path(entry.path))
        elif entry.is_file():
            yield Path(entry.path)


def to_advisory(path: Path, document: AdvisoryDocument) -> Advisory:
    branches = tuple(
        Branch(name=str(name), versions=tuple(branch.versions), time=branch.time)
        for name, branch in document.branches.items()
    )
    return Advisory(
        path=path,
        reference=document.reference,
        title=document.title,
        link=document.link,
        cve=document.cve,
        branches=branches,
        composer_repository=document.composer_repository,
    )


class YamlAdvisorySource(AdvisorySourcePort):
    def __init__(self, root: Path, vendor_dir: str = "vendor") -> None:
        self._root = Path(root)
        self._vendor_dir = vendor_dir

    def list_files(self) -> Iterator[Path]:
        return list_advisory_files(self._root, vendor_dir=self._vendor_dir)

    def relative_path(self, path: Path) -> str:
        return Path(path).relative_to(self._root).as_posix()

    def read(self, path: Path) -> dict[str, Any]:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise AdvisoryParseError(f"file is not valid UTF-8: {e}") from e
        except OSError as e:
            raise AdvisoryParseError(f"cannot read file: {e}") from e

        try:
            data = yaml.load(content, Loader=AdvisoryYamlLoader)
        except yaml.YAMLError as e:
            raise AdvisoryParseError(str(e).replace("\n", " ")) from e

        if not isinstance(data, dict):
            raise AdvisoryParseError(f"expected a mapping at the top level, got {type(data).__name__}")
        return data

    def load(self, path: Path) -> Advisory:
        data = self.read(path)
        try:
            document = AdvisoryDocument.model_validate(data)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise AdvisoryParseError(f"invalid fields: {fields}") from e
        return to_advisory(Path(path), document)

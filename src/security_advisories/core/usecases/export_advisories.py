from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

from ..domain.enums import LookupStatus, OutcomeKind, SkipReason
from ..domain.errors import AdvisoryParseError, ConstraintError, TimestampUnavailableError
from ..domain.models import CommitTimestamps, ExportOutcome
from ..domain.osv import OsvRecord
from ..ports.osv_writer_port import OsvWriterPort
from ..ports.reader_port import AdvisorySourcePort
from ..ports.registry_port import RegistryPort
from ..ports.timestamp_port import CommitTimestampPort
from ..services.osv_exporter import OsvExporter
from ..services.version_resolver import affected_versions
from .validate_advisories import ADVISORY_EXTENSION

logger = logging.getLogger(__name__)


class ExportAdvisoriesUseCase:
    """Convert every advisory to OSV and write one JSON file per record.

    Records that cannot be exported are skipped with an :class:`ExportOutcome`
    describing why; only a :class:`FatalError` from the source or the writer
    stops the run.
    """

    def __init__(
        self,
        source: AdvisorySourcePort,
        registry: RegistryPort,
        exporter: OsvExporter,
        timestamps: CommitTimestampPort,
        writer: OsvWriterPort,
        workers: int = 1,
    ) -> None:
        self._source = source
        self._registry = registry
        self._exporter = exporter
        self._timestamps = timestamps
        self._writer = writer
        self._workers = max(1, workers)

    def execute(self) -> list[ExportOutcome]:
        self._writer.prepare()
        files = list(self._source.list_files())
        logger.info(f"Exporting {len(files)} advisory files with {self._workers} worker(s)")

        if self._workers == 1:
            built = [self.build_record(path) for path in files]
        else:
            with ThreadPoolExecutor(max_workers=self._workers) as pool:
                built = list(pool.map(self.build_record, files))

        # writes happen here, in file order, so records sharing an id never race
        outcomes: list[ExportOutcome] = []
        written_by: dict[str, str] = {}
        for path, result in zip(files, built):
            if isinstance(result, ExportOutcome):
                outcomes.append(result)
                continue
            rel = self._source.relative_path(path)
            if result.id in written_by:
                logger.warning(f"{rel} overwrites {result.id}.json already written from {written_by[result.id]}")
            written_by[result.id] = rel
            output_path = self._writer.write(result)
            logger.debug(f"Wrote {output_path} ({len(result.affected[0].versions)} affected versions)")
            outcomes.append(ExportOutcome(path=rel, kind=OutcomeKind.EXPORTED, osv_id=result.id, output_path=output_path))

        exported = sum(1 for o in outcomes if o.kind is OutcomeKind.EXPORTED)
        logger.info(f"Exported {exported} records, skipped {len(outcomes) - exported}")
        return outcomes

    def build_record(self, path: Path) -> OsvRecord | ExportOutcome:
        """Convert one file to an OSV record, or return the SKIPPED outcome explaining why not."""
        rel = self._source.relative_path(path)

        if path.suffix != ADVISORY_EXTENSION:
            return self._skip(rel, SkipReason.NOT_YAML, f'Skipped "{rel}" because it is not a YAML file')

        try:
            advisory = self._source.load(path)
        except AdvisoryParseError as e:
            return self._skip(rel, SkipReason.INVALID_ADVISORY, f'Skipped "{rel}" because it is not a valid advisory ({e})')

        if advisory.uses_custom_repository:
            return self._skip(rel, SkipReason.CUSTOM_REPOSITORY, f'Skipped "{rel}" because package is not on Packagist')

        package = advisory.package
        if package is None:
            return self._skip(rel, SkipReason.INVALID_ADVISORY, f'Skipped "{rel}" because its reference is not a composer package')

        lookup = self._registry.lookup(package)
        if lookup.status is LookupStatus.NOT_FOUND:
            return self._skip(rel, SkipReason.PACKAGE_NOT_FOUND, f'Skipped "{rel}" because "{package}" was not found on Packagist')
        if lookup.status is LookupStatus.UNAVAILABLE or lookup.package is None:
            return self._skip(
                rel,
                SkipReason.REGISTRY_UNAVAILABLE,
                f'Skipped "{rel}" because Packagist could not be reached for "{package}" ({lookup.detail})',
            )

        try:
            versions = affected_versions(advisory.branches, lookup.package.versions)
        except ConstraintError as e:
            return self._skip(rel, SkipReason.INVALID_ADVISORY, f'Skipped "{rel}" because of an invalid constraint ({e})')

        if not versions:
            return self._skip(
                rel,
                SkipReason.NO_AFFECTED_VERSIONS,
                f'Skipped "{rel}" because no affected versions are available on Packagist',
            )

        try:
            stamps = CommitTimestamps(
                published=_utc(self._timestamps.first_commit_time(path)),
                modified=_utc(self._timestamps.last_commit_time(path)),
            )
        except TimestampUnavailableError as e:
            return self._skip(rel, SkipReason.TIMESTAMPS_UNAVAILABLE, f'Skipped "{rel}" because its git history is unavailable ({e})')

        return self._exporter.export(advisory, versions, stamps)

    @staticmethod
    def _skip(rel: str, reason: SkipReason, message: str) -> ExportOutcome:
        logger.info(message)
        return ExportOutcome(path=rel, kind=OutcomeKind.SKIPPED, reason=reason, message=message)


def _utc(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)

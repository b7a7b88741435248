from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from ..domain.enums import IssueKind
from ..domain.errors import AdvisoryParseError
from ..domain.models import Issue, ValidationReport
from ..ports.reader_port import AdvisorySourcePort
from ..services.validator import AdvisoryValidator

logger = logging.getLogger(__name__)


ADVISORY_EXTENSION = ".yaml"


class ValidateAdvisoriesUseCase:
    def __init__(self, source: AdvisorySourcePort, validator: AdvisoryValidator, workers: int = 1) -> None:
        self._source = source
        self._validator = validator
        self._workers = max(1, workers)

    def execute(self) -> ValidationReport:
        files = list(self._source.list_files())
        logger.info(f"Validating {len(files)} advisory files with {self._workers} worker(s)")

        if self._workers == 1:
            per_file = [self.validate_file(path) for path in files]
        else:
            with ThreadPoolExecutor(max_workers=self._workers) as pool:
                per_file = list(pool.map(self.validate_file, files))

        issues = tuple(issue for file_issues in per_file for issue in file_issues)
        report = ValidationReport(files_checked=len(files), issues=issues)
        logger.info(f"Found {len(issues)} issues in {report.files_with_issues} files")
        return report

    def validate_file(self, path: Path) -> list[Issue]:
        rel = self._source.relative_path(path)
        if path.suffix != ADVISORY_EXTENSION:
            return [Issue(rel, IssueKind.INVALID_EXTENSION, f'The file extension should be "{ADVISORY_EXTENSION}".')]

        try:
            data = self._source.read(path)
        except AdvisoryParseError as e:
            logger.debug(f"Parse error in {rel}: {e}")
            return [Issue(rel, IssueKind.INVALID_YAML, f"YAML is not valid ({e}).")]

        issues = self._validator.validate(rel, data)
        if issues:
            logger.debug(f"{rel}: {len(issues)} issue(s)")
        return issues

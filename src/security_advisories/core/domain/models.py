from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from .enums import IssueKind, LookupStatus, OutcomeKind, SkipReason


COMPOSER_REFERENCE_PREFIX = "composer://"


@dataclass(frozen=True)
class Issue:
    path: str
    kind: IssueKind
    message: str


@dataclass(frozen=True)
class Branch:
    name: str
    versions: tuple[str, ...] = field(default_factory=tuple)
    time: object = None


@dataclass(frozen=True)
class Advisory:
    path: Path
    reference: str
    title: str
    link: str
    cve: Optional[str] = None
    branches: tuple[Branch, ...] = field(default_factory=tuple)
    composer_repository: Optional[object] = None

    @property
    def package(self) -> Optional[str]:
        if self.reference.startswith(COMPOSER_REFERENCE_PREFIX):
            return self.reference[len(COMPOSER_REFERENCE_PREFIX):]
        return None

    @property
    def basename(self) -> str:
        return self.path.stem

    @property
    def uses_custom_repository(self) -> bool:
        return self.composer_repository is not None


@dataclass(frozen=True)
class PackageVersions:
    name: str
    versions: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RegistryLookup:
    name: str
    status: LookupStatus
    package: Optional[PackageVersions] = None
    detail: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


@dataclass(frozen=True)
class CommitTimestamps:
    published: datetime
    modified: datetime


@dataclass(frozen=True)
class ExportOutcome:
    path: str
    kind: OutcomeKind
    osv_id: Optional[str] = None
    output_path: Optional[Path] = None
    reason: Optional[SkipReason] = None
    message: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.kind is OutcomeKind.SKIPPED


@dataclass(frozen=True)
class ValidationReport:
    files_checked: int
    issues: tuple[Issue, ...] = field(default_factory=tuple)

    def by_file(self) -> dict[str, list[Issue]]:
        grouped: dict[str, list[Issue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.path, []).append(issue)
        return grouped

    @property
    def files_with_issues(self) -> int:
        return len(self.by_file())

    @property
    def ok(self) -> bool:
        return not self.issues

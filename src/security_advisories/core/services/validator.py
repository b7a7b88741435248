from __future__ import annotations

import logging
import posixpath
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from ..constraints import is_valid_branch_name
from ..domain.enums import IssueKind, LookupStatus
from ..domain.models import COMPOSER_REFERENCE_PREFIX, Issue
from ..ports.registry_port import RegistryPort
from .branch_checker import BranchConsistencyChecker

logger = logging.getLogger(__name__)


SUPPORTED_KEYS = ("reference", "branches", "title", "link", "cve")
REQUIRED_KEYS = ("reference", "title", "link", "branches")
SUPPORTED_BRANCH_KEYS = ("time", "versions")


class AdvisoryValidator:
    """Schema and consistency rules for a single parsed advisory document.

    ``validate`` never raises for bad input data: every problem becomes an
    :class:`Issue`. Registry lookups go through ``registry``; pass ``None`` to
    skip the existence check entirely (offline mode).
    """

    def __init__(
        self,
        registry: Optional[RegistryPort] = None,
        exempt_packages: Iterable[str] = (),
    ) -> None:
        self._registry = registry
        self._exempt_packages = frozenset(exempt_packages)

    def validate(self, path: str, data: Mapping[str, Any]) -> list[Issue]:
        issues: list[Issue] = []

        def add(kind: IssueKind, message: str) -> None:
            issues.append(Issue(path=path, kind=kind, message=message))

        for key in data:
            if key not in SUPPORTED_KEYS:
                add(IssueKind.UNSUPPORTED_KEY, f'Key "{key}" is not supported.')

        for key in REQUIRED_KEYS:
            if data.get(key) is None:
                add(IssueKind.MISSING_KEY, f'Key "{key}" is required.')

        reference = data.get("reference")
        if reference is not None:
            self._check_reference(path, reference, add)

        branches = data.get("branches")
        if branches is None:
            return issues
        if not isinstance(branches, Mapping):
            add(IssueKind.BRANCHES_NOT_MAPPING, '"branches" must be an array.')
            return issues

        checker = BranchConsistencyChecker(path)
        for raw_name, branch in branches.items():
            name = str(raw_name)
            if not is_valid_branch_name(name):
                add(IssueKind.INVALID_BRANCH_NAME, f'Invalid branch name "{name}".')

            if not isinstance(branch, Mapping):
                add(IssueKind.BRANCH_NOT_MAPPING, f'Branch "{name}" must be a mapping.')
                continue

            for key in branch:
                if key not in SUPPORTED_BRANCH_KEYS:
                    add(IssueKind.UNSUPPORTED_BRANCH_KEY, f'Key "{key}" is not supported for branch "{name}".')

            if branch.get("time") is None:
                add(IssueKind.MISSING_BRANCH_KEY, f'Key "time" is required for branch "{name}".')

            versions = branch.get("versions")
            if versions is None:
                add(IssueKind.MISSING_BRANCH_KEY, f'Key "versions" is required for branch "{name}".')
            elif not isinstance(versions, (list, tuple)):
                add(IssueKind.VERSIONS_NOT_SEQUENCE, f'"versions" must be an array for branch "{name}".')
            else:
                issues.extend(checker.check(name, versions))

        return issues

    def _check_reference(self, path: str, reference: object, add) -> None:
        if not isinstance(reference, str) or not reference.startswith(COMPOSER_REFERENCE_PREFIX):
            add(IssueKind.INVALID_REFERENCE, f'Reference must start with "{COMPOSER_REFERENCE_PREFIX}"')
            return

        package = reference[len(COMPOSER_REFERENCE_PREFIX):]
        if posixpath.dirname(path) != package:
            add(IssueKind.REFERENCE_MISMATCH, "Reference composer package must match the folder name")

        if self._registry is None:
            return
        if package in self._exempt_packages:
            logger.debug(f"Skipping registry check for exempt package {package}")
            return

        lookup = self._registry.lookup(package)
        if lookup.status is LookupStatus.NOT_FOUND:
            add(IssueKind.INVALID_PACKAGE, "Invalid composer package")
        elif lookup.status is LookupStatus.UNAVAILABLE:
            logger.warning(f"Registry unavailable while checking {package}: {lookup.detail}")
            add(
                IssueKind.REGISTRY_UNAVAILABLE,
                f'Could not verify composer package "{package}" (registry unavailable)',
            )

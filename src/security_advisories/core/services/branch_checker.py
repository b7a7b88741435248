from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..constraints import is_acceptable_version_constraint, is_lower_bound, is_upper_bound
from ..domain.enums import IssueKind
from ..domain.models import Issue

logger = logging.getLogger(__name__)


class BranchConsistencyChecker:
    """Checks the constraint list of each branch of one advisory.

    Branches without a lower bound must all share the upper bound of the first
    such branch, so the checker carries state across ``check`` calls and must be
    fed branches in declaration order. Create one instance per advisory file.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._upper_bound_without_lower_bound: Optional[str] = None

    def check(self, branch_name: str, versions: Sequence[object]) -> list[Issue]:
        issues: list[Issue] = []
        upper_bound: Optional[str] = None
        has_lower_bound = False

        for constraint in versions:
            if not is_acceptable_version_constraint(constraint):
                issues.append(self._issue(
                    IssueKind.INVALID_CONSTRAINT,
                    f'Version constraint "{constraint}" is not in an acceptable format.',
                ))
            if is_upper_bound(constraint):
                upper_bound = str(constraint)
                continue
            if is_lower_bound(constraint):
                has_lower_bound = True

        if upper_bound is None:
            issues.append(self._issue(
                IssueKind.MISSING_UPPER_BOUND,
                f'"versions" must have an upper bound for branch "{branch_name}".',
            ))

        if not has_lower_bound:
            if self._upper_bound_without_lower_bound is None:
                self._upper_bound_without_lower_bound = upper_bound
            if self._upper_bound_without_lower_bound != upper_bound:
                logger.debug(f"Branch {branch_name} upper bound {upper_bound} differs from {self._upper_bound_without_lower_bound}")
                issues.append(self._issue(
                    IssueKind.MISSING_LOWER_BOUND,
                    f'"versions" must have a lower bound for branch "{branch_name}" to avoid overlapping lower branches.',
                ))

        return issues

    def _issue(self, kind: IssueKind, message: str) -> Issue:
        return Issue(path=self._path, kind=kind, message=message)

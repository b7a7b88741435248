from __future__ import annotations

import logging
from typing import Sequence

from ..constraints import Constraint, parse_constraints, parse_version, satisfies_all
from ..domain.models import Branch

logger = logging.getLogger(__name__)


def affected_versions(branches: Sequence[Branch], published: Sequence[str]) -> list[str]:
    """Return the published versions matched by at least one branch.

    Constraints inside a branch are AND-ed, branches are OR-ed. The published
    list is walked in reverse publication order and every version appears at
    most once. Published strings that are not release versions (``dev-master``)
    never match.

    Raises ConstraintError when a branch constraint cannot be parsed.
    """
    branch_constraints: list[list[Constraint]] = [
        parse_constraints(branch.versions) for branch in branches if branch.versions
    ]
    if not branch_constraints:
        return []

    result: list[str] = []
    seen: set[str] = set()
    for raw in reversed(published):
        if raw in seen:
            continue
        candidate = parse_version(raw)
        if candidate is None:
            logger.debug(f"Ignoring unparseable published version {raw!r}")
            continue
        if any(satisfies_all(candidate, constraints) for constraints in branch_constraints):
            seen.add(raw)
            result.append(raw)
    return result

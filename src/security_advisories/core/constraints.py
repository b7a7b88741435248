from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from packaging.version import InvalidVersion, Version

from .domain.errors import ConstraintError


BRANCH_NAME_RE = re.compile(r"^([\d.\-]+(\.x)?(-dev)?|master)$")
VERSION_CONSTRAINT_RE = re.compile(r"^(<|>)(=)?((0|[1-9]\d*)(\.(0|[1-9]\d*))*)(-(alpha|beta|rc)[1-9]\d*)?$")

_ATOM_RE = re.compile(r"^(<=|>=|==|!=|<|>|=)?\s*v?(\S+)$")
_ATOM_SPLIT_RE = re.compile(r"(?:\s*,\s*|\s+)(?=[<>=!])")
# Composer patch releases: 2.4.3-p1, 1.0.0-patch1, 1.0.0-pl1
_PATCH_SUFFIX_RE = re.compile(r"[._-]?(?:patch|pl|p)[.-]?(\d*)$", re.IGNORECASE)


def is_valid_branch_name(name: object) -> bool:
    return isinstance(name, str) and BRANCH_NAME_RE.match(name) is not None


def is_acceptable_version_constraint(value: object) -> bool:
    """Format-only check for ``<1.2``, ``>=2.0.0-beta1`` and friends.

    Says nothing about ordering; ``>=3.0`` next to ``<2.0`` is acceptable.
    """
    return isinstance(value, str) and VERSION_CONSTRAINT_RE.match(value) is not None


def is_upper_bound(value: object) -> bool:
    return isinstance(value, str) and value.startswith("<")


def is_lower_bound(value: object) -> bool:
    return isinstance(value, str) and value.startswith(">")


def _to_version(text: str) -> Version:
    text = text.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    m = _PATCH_SUFFIX_RE.search(text)
    if m and m.start() > 0:
        text = f"{text[:m.start()]}.post{m.group(1) or 0}"
    return Version(text)


def parse_version(value: str) -> Optional[Version]:
    """Parse a published version string, or None when it is not a release version (``dev-master``).

    Patch releases (``-p1``, ``-patch1``, ``-pl1``) sort after their base release.
    """
    try:
        return _to_version(value)
    except InvalidVersion:
        return None


def _is_stable(version: Version) -> bool:
    return not (version.is_prerelease or version.is_postrelease or version.is_devrelease)


def _dev_floor(version: Version) -> Version:
    # earliest possible pre-release of the same release
    return Version(".".join(str(p) for p in version.release) + ".dev0")


@dataclass(frozen=True)
class Constraint:
    operator: str
    version: Version
    raw: str

    def matches(self, candidate: Version) -> bool:
        op = self.operator
        bound = self.version
        # `<2.0` excludes 2.0 pre-releases and `>=2.0` includes them
        if op in ("<", ">=") and _is_stable(bound):
            bound = _dev_floor(bound)
        if op == "<":
            return candidate < bound
        if op == "<=":
            return candidate <= bound
        if op == ">":
            return candidate > bound
        if op == ">=":
            return candidate >= bound
        if op == "!=":
            return candidate != bound
        return candidate == bound


def parse_constraint(raw: str) -> list[Constraint]:
    """Parse one constraint string into its AND-ed atoms."""
    if not isinstance(raw, str) or not raw.strip():
        raise ConstraintError(f"Empty version constraint: {raw!r}")
    result: list[Constraint] = []
    for atom in _ATOM_SPLIT_RE.split(raw.strip()):
        m = _ATOM_RE.match(atom.strip())
        if not m:
            raise ConstraintError(f"Invalid version constraint: {raw!r}")
        try:
            version = _to_version(m.group(2))
        except InvalidVersion as exc:
            raise ConstraintError(f"Invalid version in constraint {raw!r}: {m.group(2)!r}") from exc
        op = m.group(1) or "=="
        result.append(Constraint(operator="==" if op == "=" else op, version=version, raw=atom))
    return result


def parse_constraints(raw: Iterable[str]) -> list[Constraint]:
    parsed: list[Constraint] = []
    for item in raw:
        parsed.extend(parse_constraint(item))
    return parsed


def satisfies_all(candidate: Version, constraints: Sequence[Constraint]) -> bool:
    return all(c.matches(candidate) for c in constraints)

from __future__ import annotations

from typing import Protocol

from ..domain.models import PackageVersions, RegistryLookup


class RegistryPort(Protocol):
    def lookup(self, name: str) -> RegistryLookup:
        """Return the lookup outcome for a package, distinguishing not-found from unavailable."""
        ...

    def resolve(self, name: str) -> PackageVersions | None:
        """Return the published versions of a package, or None when it cannot be resolved.

        A missing package and an unreachable registry both return None.
        """
        lookup = self.lookup(name)
        return lookup.package if lookup.found else None

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from ..config.urls import PACKAGIST_REPO_BASE, get_packagist_metadata_url
from ..core.domain.enums import LookupStatus
from ..core.domain.models import PackageVersions, RegistryLookup
from ..core.ports.cache_port import CachePort
from ..core.ports.registry_port import RegistryPort
from .http_client import HttpClient
from .schemas import CachedPackage, PackagistMetadata

logger = logging.getLogger(__name__)


_CACHE_PREFIX = "packagist:"
_HOUR = 3600


class PackagistRegistry(RegistryPort):
    """Resolves Composer package names to their published versions.

    Found packages are cached for ``ttl_hours``; "not found" answers are cached
    as negative entries for the shorter ``not_found_ttl_hours``. Transport
    errors, timeouts, unexpected status codes and undecodable payloads are
    reported as UNAVAILABLE and never cached.
    """

    def __init__(
        self,
        cache: CachePort,
        http_client: HttpClient,
        *,
        base_url: str = PACKAGIST_REPO_BASE,
        ttl_hours: int = 24,
        not_found_ttl_hours: int = 6,
    ) -> None:
        self._cache = cache
        self._http = http_client
        self._base_url = base_url
        self._ttl_seconds = int(ttl_hours) * _HOUR
        self._not_found_ttl_seconds = max(1, int(not_found_ttl_hours)) * _HOUR

    @staticmethod
    def cache_key(name: str) -> str:
        return f"{_CACHE_PREFIX}{name}"

    def lookup(self, name: str) -> RegistryLookup:
        if not _is_package_name(name):
            return RegistryLookup(name=name, status=LookupStatus.NOT_FOUND, detail="not a vendor/package name")

        cached = self._from_cache(name)
        if cached is not None:
            return cached

        url = get_packagist_metadata_url(name, self._base_url)
        logger.debug(f"Fetching {url}")
        try:
            resp = self._http.get(url)
        except httpx.HTTPError as e:
            logger.warning(f"Registry request for {name} failed: {type(e).__name__}")
            return self._unavailable(name, f"{type(e).__name__}: {e}")

        if resp.status_code == 404:
            logger.info(f"Package {name} not found on Packagist")
            self._store(name, found=False, versions=[])
            return RegistryLookup(name=name, status=LookupStatus.NOT_FOUND)
        if resp.is_error:
            logger.warning(f"Registry returned HTTP {resp.status_code} for {name}")
            return self._unavailable(name, f"HTTP {resp.status_code}")

        try:
            metadata = PackagistMetadata.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"Undecodable registry payload for {name}: {e}")
            return self._unavailable(name, "invalid registry payload")

        releases = metadata.packages.get(name)
        if releases is None:
            releases = metadata.packages.get(name.lower())
        if releases is None:
            logger.info(f"Registry payload for {name} does not list the package")
            self._store(name, found=False, versions=[])
            return RegistryLookup(name=name, status=LookupStatus.NOT_FOUND)

        versions = [r.version for r in releases if r.version]
        self._store(name, found=True, versions=versions)
        logger.debug(f"Resolved {name}: {len(versions)} versions")
        return RegistryLookup(
            name=name,
            status=LookupStatus.FOUND,
            package=PackageVersions(name=name, versions=tuple(versions)),
        )

    def _from_cache(self, name: str) -> RegistryLookup | None:
        key = self.cache_key(name)
        try:
            entry = self._cache.get_model(key, CachedPackage)
        except (ValueError, TypeError) as e:
            logger.warning(f"Dropping corrupt cache entry {key}: {e}")
            self._cache.delete(key)
            return None
        if entry is None:
            return None
        logger.debug(f"Cache hit for {name} (found={entry.found})")
        if not entry.found:
            return RegistryLookup(name=name, status=LookupStatus.NOT_FOUND, detail="cached")
        return RegistryLookup(
            name=name,
            status=LookupStatus.FOUND,
            package=PackageVersions(name=name, versions=tuple(entry.versions)),
        )

    def _store(self, name: str, *, found: bool, versions: list[str]) -> None:
        ttl = self._ttl_seconds if found else self._not_found_ttl_seconds
        self._cache.set_model(self.cache_key(name), CachedPackage(name=name, found=found, versions=versions), ttl_seconds=ttl)

    @staticmethod
    def _unavailable(name: str, detail: str) -> RegistryLookup:
        return RegistryLookup(name=name, status=LookupStatus.UNAVAILABLE, detail=detail)


def _is_package_name(name: str) -> bool:
    if not isinstance(name, str):
        return False
    vendor, sep, package = name.partition("/")
    return bool(sep and vendor and package) and not any(c.isspace() for c in name)

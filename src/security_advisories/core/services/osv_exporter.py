from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from ..domain.enums import ReferenceType
from ..domain.models import Advisory, CommitTimestamps
from ..domain.osv import OsvAffected, OsvPackage, OsvRecord, OsvReference


OSV_ECOSYSTEM = "Packagist"
OSV_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_osv_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(OSV_TIMESTAMP_FORMAT)


class OsvExporter:
    """Builds OSV records from advisories; performs no I/O."""

    def __init__(self, *, id_prefix: str = "PHPSEC", package_url_base: str = "https://packagist.org/packages/") -> None:
        self._id_prefix = id_prefix
        self._package_url_base = package_url_base

    def osv_id(self, advisory: Advisory) -> str:
        if advisory.cve:
            return advisory.cve
        return f"{self._id_prefix}-{advisory.basename}"

    def export(self, advisory: Advisory, versions: Sequence[str], timestamps: CommitTimestamps) -> OsvRecord:
        package = advisory.package
        if package is None:
            raise ValueError(f"Advisory {advisory.path} has no composer package reference")
        return OsvRecord(
            id=self.osv_id(advisory),
            modified=format_osv_timestamp(timestamps.modified),
            published=format_osv_timestamp(timestamps.published),
            summary=advisory.title or "",
            affected=[
                OsvAffected(
                    package=OsvPackage(
                        ecosystem=OSV_ECOSYSTEM,
                        name=package,
                        purl=f"pkg:packagist/{package}",
                    ),
                    versions=list(versions),
                )
            ],
            references=[
                OsvReference(type=ReferenceType.ADVISORY.value, url=advisory.link),
                OsvReference(type=ReferenceType.PACKAGE.value, url=f"{self._package_url_base}{package}"),
            ],
        )

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .urls import PACKAGIST_REPO_BASE


class AppConfig(BaseSettings):
    """Application configuration with automatic environment variable loading.

    All settings can be overridden via environment variables with the
    SECURITY_ADVISORIES_ prefix.
    For example:
        - SECURITY_ADVISORIES_ROOT_DIR=/path/to/security-advisories
        - SECURITY_ADVISORIES_CACHE_BACKEND=memory
        - SECURITY_ADVISORIES_WORKERS=8
        - SECURITY_ADVISORIES_REGISTRY_EXEMPT_PACKAGES='["magento/magento2ce"]'

    Alternatively, settings can be provided programmatically:
        container = Container()
        container.config.from_pydantic(AppConfig(workers=4))
    """

    model_config = SettingsConfigDict(
        env_prefix="SECURITY_ADVISORIES_",
        case_sensitive=False,
        extra="forbid",
    )

    root_dir: Path = Field(
        default=Path("."),
        description="Root of the advisory database (<namespace>/<package>/<advisory>.yaml)",
    )

    vendor_dir: str = Field(
        default="vendor",
        description="Directory under root_dir holding tooling dependencies; never scanned",
    )

    output_dir: Path = Field(
        default=Path("packagist"),
        description="Default export target folder",
    )

    cache_backend: Literal["disk", "memory"] = Field(
        default="disk",
        description="'disk' persists registry lookups across runs (diskcache), 'memory' keeps them for one run",
    )

    cache_dir: Optional[Path] = Field(
        default=None,
        description="Custom cache directory path. If None, uses platformdirs.user_cache_dir('security_advisories')",
    )

    registry_url: str = Field(
        default=PACKAGIST_REPO_BASE,
        description="Base URL of the Composer metadata repository",
    )

    registry_cache_ttl_hours: int = Field(
        default=24,
        ge=0,
        description="TTL for cached package version lists in hours (0 = never expire)",
    )

    registry_not_found_ttl_hours: int = Field(
        default=6,
        ge=1,
        description="TTL for cached 'package not found' answers; kept short so newly published packages show up",
    )

    registry_exempt_packages: list[str] = Field(
        default_factory=lambda: ["magento/magento2ce"],
        description="Packages that skip the registry existence check during validation (not provided by Packagist)",
    )

    registry_requests_per_second: float = Field(
        default=0.0,
        ge=0.0,
        description="Throttle for registry requests; 0 disables throttling",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0.0,
        description="Timeout for registry HTTP calls; a timed-out lookup is reported as unavailable",
    )

    workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Number of advisory files processed concurrently",
    )

    osv_id_prefix: str = Field(
        default="PHPSEC",
        description="Prefix for OSV ids of advisories without a CVE",
    )

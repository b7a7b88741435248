from __future__ import annotations

from pathlib import Path
from typing import Any

from .container import Container
from ..config.settings import AppConfig
from ..core.domain.models import ExportOutcome, ValidationReport


class AdvisoriesClient:
    """Library entry point for validating and exporting an advisory database.

    The container and its resources (registry cache, HTTP client) are created
    once and shared by every call until :meth:`close`.

    Example:
        # Using configuration from SECURITY_ADVISORIES_* environment variables
        with AdvisoriesClient() as client:
            report = client.validate()
            if not report.ok:
                ...

        # Explicit settings
        with AdvisoriesClient(root_dir="/src/security-advisories", cache_backend="memory") as client:
            outcomes = client.export("build/osv")
    """

    def __init__(self, config: AppConfig | None = None, **overrides: Any) -> None:
        """Initialize the client.

        Args:
            config: Complete configuration. When None, settings come from the
                    environment (SECURITY_ADVISORIES_*).
            **overrides: Individual AppConfig fields to override, e.g.
                    ``root_dir="..."``, ``workers=4``, ``cache_backend="memory"``.
        """
        self._container = Container()

        if config is not None or overrides:
            base = config.model_dump() if config is not None else {}
            base.update({k: v for k, v in overrides.items() if v is not None})
            self._container.config.from_pydantic(AppConfig(**base))

        self._container.init_resources()

    @property
    def container(self) -> Container:
        return self._container

    def validate(self, *, offline: bool = False) -> ValidationReport:
        """Validate every advisory under the configured root.

        Args:
            offline: Skip the registry existence check.

        Raises:
            FatalError: The root directory cannot be read.
        """
        if offline:
            uc = self._container.validate_uc(validator=self._container.offline_validator())
        else:
            uc = self._container.validate_uc()
        return uc.execute()

    def export(self, target: str | Path | None = None) -> list[ExportOutcome]:
        """Export every advisory as OSV JSON into ``target`` (default: configured output_dir).

        Raises:
            FatalError: The root cannot be read or the target cannot be written.
        """
        if target is not None:
            uc = self._container.export_uc(writer=self._container.writer(target=Path(target)))
        else:
            uc = self._container.export_uc()
        return uc.execute()

    def clear_cache(self, prefix: str | None = None) -> None:
        """Clear cached registry lookups (all, or keys starting with ``prefix``)."""
        uc = self._container.clear_cache_uc()
        uc.execute(prefix=prefix)

    def close(self) -> None:
        self._container.shutdown_resources()

    def __enter__(self) -> AdvisoriesClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = [
    "AdvisoriesClient",
    "AppConfig",
]

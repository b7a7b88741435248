from __future__ import annotations

import logging

from ..ports.cache_port import CachePort

logger = logging.getLogger(__name__)


class ClearCacheUseCase:
    def __init__(self, cache: CachePort) -> None:
        self._cache = cache

    def execute(self, prefix: str | None = None) -> None:
        suffix = f" (prefix={prefix})" if prefix else ""
        logger.info(f"Clearing registry cache{suffix}")
        self._cache.clear(prefix=prefix)

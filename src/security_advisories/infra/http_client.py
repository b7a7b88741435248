from __future__ import annotations

from typing import Mapping, Optional, TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from ..core.ports.rate_limiter_port import RateLimiterPort


DEFAULT_USER_AGENT = "security-advisories/0.1 (advisory database tooling)"


class HttpClient:
    def __init__(
        self,
        base_headers: Optional[Mapping[str, str]] = None,
        timeout_seconds: float = 20.0,
        rate_limiter: Optional["RateLimiterPort"] = None
    ) -> None:
        headers = {"User-Agent": DEFAULT_USER_AGENT}
        headers.update(base_headers or {})
        self._client = httpx.Client(
            timeout=timeout_seconds,
            headers=headers,
            follow_redirects=True,
            max_redirects=10
        )
        self._rate_limiter = rate_limiter

    def get(self, url: str) -> httpx.Response:
        """Perform a GET and return the response whatever its status code."""
        if self._rate_limiter:
            self._rate_limiter.acquire()
        return self._client.get(url)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

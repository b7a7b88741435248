from __future__ import annotations

import json
from typing import Iterable, Protocol, Type, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


class CachePort(Protocol):
    """Byte-oriented key/value store used for registry metadata.

    Adapters implement ``get``/``set``/``delete``/``clear``/``iter_keys``; the
    JSON and pydantic helpers below are shared by every adapter.
    """

    def get(self, key: str) -> bytes | None:
        """Return the stored bytes, or None when the key is absent or expired."""

    def set(self, key: str, value: bytes, ttl_seconds: int | None = None) -> None:
        """Store bytes; ``ttl_seconds`` of None uses the adapter default, 0 never expires."""

    def delete(self, key: str) -> None:
        """Remove a single key if present."""

    def clear(self, prefix: str | None = None) -> None:
        """Remove every key, or only keys starting with ``prefix``."""

    def iter_keys(self, prefix: str) -> Iterable[str]:
        """Yield stored keys starting with ``prefix``."""
        ...

    def get_json(self, key: str) -> dict | list | None:
        raw = self.get(key)
        if raw is None:
            return None
        data = json.loads(raw.decode("utf-8"))
        if not isinstance(data, (dict, list)):
            raise TypeError(f"Cached value for {key!r} is not a JSON object or array")
        return data

    def set_json(self, key: str, value: dict | list, ttl_seconds: int | None = None) -> None:
        self.set(key, json.dumps(value).encode("utf-8"), ttl_seconds)

    def get_model(self, key: str, model_cls: Type[ModelT]) -> ModelT | None:
        """Load a cached entry into ``model_cls``; None when missing."""
        data = self.get_json(key)
        if data is None:
            return None
        return model_cls.model_validate(data)

    def set_model(self, key: str, model: BaseModel, ttl_seconds: int | None = None) -> None:
        self.set_json(key, model.model_dump(mode="json"), ttl_seconds)

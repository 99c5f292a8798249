from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Generic, Iterable, Iterator, Optional, TypeVar


T = TypeVar("T")


class ContextKey(Generic[T]):
    """Typed key handle for values stored in the runtime context."""

    __slots__ = ("name", "default")

    def __init__(self, name: str, default: Optional[T] = None) -> None:
        self.name = name
        self.default = default

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"ContextKey(name={self.name!r}, default={self.default!r})"


class _ContextStore:
    """Runtime values scoped per task or thread, backed by `ContextVar`s.

    Each asyncio task sees the values of the context it was created in, so
    setting a value inside one request does not leak into another.
    """

    def __init__(self) -> None:
        self._vars: Dict[str, ContextVar[Any]] = {}
        self._defaults: Dict[str, Any] = {}

    def define(self, key: ContextKey[T]) -> ContextKey[T]:
        """Register a key. If already present, keeps the existing backing var."""
        if key.name not in self._vars:
            self._vars[key.name] = ContextVar(key.name, default=key.default)
            self._defaults[key.name] = key.default
        return key

    def _get_var(self, name: str) -> ContextVar[Any]:
        if name not in self._vars:
            self._vars[name] = ContextVar(name, default=None)
            self._defaults[name] = None
        return self._vars[name]

    def get(self, key: ContextKey[Any] | str, default: Any = None) -> Any:
        name = key.name if isinstance(key, ContextKey) else key
        value = self._get_var(name).get()
        return default if value is None else value

    def set(self, key: ContextKey[Any] | str, value: Any) -> None:
        name = key.name if isinstance(key, ContextKey) else key
        self._get_var(name).set(value)

    @contextmanager
    def using(self, key: ContextKey[Any] | str, value: Any) -> Iterator[None]:
        """Temporarily set a value, restoring the previous one on exit."""
        name = key.name if isinstance(key, ContextKey) else key
        token = self._get_var(name).set(value)
        try:
            yield
        finally:
            self._get_var(name).reset(token)

    def clear(self, *names: str) -> None:
        """Reset selected keys (or all if none provided) back to defaults for this context."""
        to_clear: Iterable[str] = names or tuple(self._vars.keys())
        for name in to_clear:
            self._get_var(name).set(self._defaults.get(name))


# Public singleton store
context = _ContextStore()


def define_key(name: str, default: Optional[T] = None) -> ContextKey[T]:
    return context.define(ContextKey(name, default))


__all__ = [
    "ContextKey",
    "context",
    "define_key",
]

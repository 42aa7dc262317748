"""Branchable key/value state threaded through a test run."""

from __future__ import annotations

from typing import Any, Callable

_MISSING = object()


class Context:
    """Mutable key/value store handed to every step.

    ``copy()`` forks the store: the fork sees every value present at fork
    time, but keys set on either side afterwards stay private to that side.
    Values themselves are shared, not duplicated.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data if data is not None else {}

    def get(self, key: str, default: Callable[[], Any] | object = _MISSING) -> Any:
        """Look up ``key``.

        Args:
            key: Key to look up.
            default: Zero-argument callable producing a value when ``key``
                is absent. The produced value is not stored.

        Raises:
            KeyError: If ``key`` is absent and no default was supplied.
        """
        if key in self._data:
            return self._data[key]
        if default is _MISSING:
            raise KeyError(key)
        if not callable(default):
            raise TypeError("default must be a zero-argument callable")
        return default()

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def copy(self) -> Context:
        return type(self)(dict(self._data))

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"Context({self._data!r})"

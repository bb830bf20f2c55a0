"""Accumulation of accepted and rejected field values."""

from __future__ import annotations

from typing import Any


class ResultStore:
    """Two partitions of field values keyed by caller-chosen field names.

    A key lives in at most one partition: recording it in one removes it
    from the other.
    """

    def __init__(self) -> None:
        self._accepted: dict[str, Any] = {}
        self._rejected: dict[str, Any] = {}

    @property
    def accepted(self) -> dict[str, Any]:
        """Live mapping of accepted values."""
        return self._accepted

    @property
    def rejected(self) -> dict[str, Any]:
        """Live mapping of rejected (original) values."""
        return self._rejected

    @property
    def has_errors(self) -> bool:
        return bool(self._rejected)

    def accept(self, key: str, value: Any) -> None:
        self._rejected.pop(key, None)
        self._accepted[key] = value

    def reject(self, key: str, value: Any) -> None:
        self._accepted.pop(key, None)
        self._rejected[key] = value

    def record(self, key: str, original: Any, canonized: Any, ok: bool) -> None:
        """Store the outcome of one validation call.

        Args:
            key: Field name
            original: Raw input of the call, stored when ``ok`` is false
            canonized: Value stored when ``ok`` is true
            ok: Whether the field validated
        """
        if ok:
            self.accept(key, canonized)
        else:
            self.reject(key, original)

    def reset(self) -> None:
        self._accepted = {}
        self._rejected = {}

    def reset_accepted(self) -> None:
        self._accepted = {}

    def reset_rejected(self) -> None:
        self._rejected = {}

    def __repr__(self) -> str:
        return f"ResultStore(accepted={self._accepted!r}, rejected={self._rejected!r})"

"""
Result Cache
------------
Most recent step result per exact result type.
"""

from __future__ import annotations

from typing import Any


class ResultCache:
    """Maps a result type to the latest value of exactly that type."""

    def __init__(self) -> None:
        self._values: dict[type, Any] = {}

    def put(self, result_type: type, value: Any) -> None:
        """Store value under result_type, replacing any earlier value."""
        self._values[result_type] = value

    def get(self, result_type: type) -> tuple[Any, bool]:
        """
        Look up the value stored for result_type.

        Subclasses and base classes never match; only the exact type does.

        Returns:
            (value, found) where value is None when found is False
        """
        if result_type in self._values:
            return self._values[result_type], True
        return None, False

    def types(self) -> list[type]:
        return list(self._values.keys())

    def snapshot(self) -> dict[type, Any]:
        """Shallow copy of the current entries."""
        return dict(self._values)

    def clear(self) -> None:
        self._values.clear()

    def __contains__(self, result_type: object) -> bool:
        return result_type in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self._values)
        return f"<ResultCache([{names}])>"

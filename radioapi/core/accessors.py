"""Typed, tolerant reads over JSON-like mappings.

Response bodies come from a remote service we do not control, so every field
may be missing, null, or of an unexpected type. `JsonView` makes the fallback
for each of those cases explicit: a wrong-typed value is treated exactly like
a missing one and the documented default is returned.
"""

from __future__ import annotations

import copy
import math
from typing import Any, Mapping, Sequence

__all__ = ["JsonView"]

_MISSING = object()


class JsonView:
    """Read-only accessor helper over a captured JSON object."""

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data)) if isinstance(data, Mapping) else {}

    @property
    def data(self) -> dict[str, Any]:
        """Return a deep copy of the captured mapping."""
        return copy.deepcopy(self._data)

    def __contains__(self, key: object) -> bool:
        return self.has(str(key))

    def __bool__(self) -> bool:
        return bool(self._data)

    def has(self, key: str) -> bool:
        """True when `key` is present with a non-null value."""
        return self._data.get(key) is not None

    def raw(self, *keys: str, default: Any = None) -> Any:
        """Return a deep copy of the first non-null value among `keys`."""
        for key in keys:
            value = self._data.get(key, _MISSING)
            if value is not _MISSING and value is not None:
                return copy.deepcopy(value)
        return default

    def get_str(self, *keys: str, default: str | None = None) -> str | None:
        """First non-empty string among `keys`; numbers are stringified."""
        for key in keys:
            value = self._data.get(key)
            if isinstance(value, bool):
                continue
            if isinstance(value, (int, float)):
                return f"{value}"
            if isinstance(value, str) and value.strip():
                return value
        return default

    def get_int(self, *keys: str, default: int | None = None) -> int | None:
        """First value among `keys` coercible to an int (numeric strings included)."""
        for key in keys:
            value = self._data.get(key)
            if isinstance(value, bool):
                continue
            if isinstance(value, int):
                return value
            if isinstance(value, float) and value.is_integer():
                return int(value)
            if isinstance(value, str):
                text = value.strip()
                if not text:
                    return default
                try:
                    number = float(text)
                except ValueError:
                    continue
                # "inf" and "nan" parse as floats but have no int value.
                if math.isfinite(number):
                    return int(number)
        return default

    def get_float(self, *keys: str, default: float | None = None) -> float | None:
        for key in keys:
            value = self._data.get(key)
            if isinstance(value, bool):
                continue
            if isinstance(value, int):
                return float(value)
            if isinstance(value, float) and math.isfinite(value):
                return value
            if isinstance(value, str):
                try:
                    number = float(value.strip())
                except ValueError:
                    continue
                if math.isfinite(number):
                    return number
        return default

    def get_bool(self, *keys: str, default: bool | None = None) -> bool | None:
        """First boolean among `keys`; "true"/"false" strings and 0/1 are accepted."""
        for key in keys:
            value = self._data.get(key)
            if isinstance(value, bool):
                return value
            if isinstance(value, int) and value in (0, 1):
                return bool(value)
            if isinstance(value, str) and value.strip().lower() in ("true", "false"):
                return value.strip().lower() == "true"
        return default

    def is_true(self, key: str) -> bool:
        """Strict gate: only a JSON `true` counts."""
        return self._data.get(key) is True

    def get_list(self, *keys: str) -> list[Any]:
        """First list among `keys` (deep-copied); empty list when absent."""
        for key in keys:
            value = self._data.get(key)
            if isinstance(value, list):
                return copy.deepcopy(value)
        return []

    def get_mapping(self, *keys: str) -> dict[str, Any] | None:
        for key in keys:
            value = self._data.get(key)
            if isinstance(value, Mapping):
                return copy.deepcopy(dict(value))
        return None

    def view(self, *keys: str) -> "JsonView":
        """Nested view over the first mapping among `keys` (empty when absent)."""
        return JsonView(self.get_mapping(*keys))

    def subset(self, keys: Sequence[str]) -> dict[str, Any]:
        """Return the non-null entries of `keys`, in the order given."""
        return {key: copy.deepcopy(self._data[key]) for key in keys if self._data.get(key) is not None}

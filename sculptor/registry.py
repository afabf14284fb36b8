"""Reference map and state table shipped to the client runtime."""

from __future__ import annotations

import json
from typing import Any, Dict

from .errors import InvalidStateError

_MISSING = object()


class RefMap:
    """Logical name -> element id; the last registration for a name wins."""

    def __init__(self) -> None:
        self._refs: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._refs)

    def __contains__(self, name: object) -> bool:
        return name in self._refs

    def register(self, name: str, element_id: str) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError(f"reference name must be a non-empty string, got {name!r}")
        self._refs[name] = element_id

    def get(self, name: str) -> str | None:
        return self._refs.get(name)

    def serialize(self) -> Dict[str, str]:
        return dict(self._refs)

    def clear(self) -> None:
        self._refs.clear()


class StateTable:
    """Initial values for the client-side reactive store."""

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def set(self, key: str, value: Any) -> bool:
        """Seed ``key``; returns ``False`` when the stored value is already equal."""
        if not isinstance(key, str) or not key:
            raise InvalidStateError(f"state key must be a non-empty string, got {key!r}")
        try:
            json.dumps(value, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise InvalidStateError(f"state {key!r} is not JSON-serializable: {exc}") from exc
        current = self._values.get(key, _MISSING)
        if type(current) is type(value) and current == value:
            return False
        self._values[key] = value
        return True

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def snapshot(self) -> Dict[str, Any]:
        return json.loads(json.dumps(self._values))

    def clear(self) -> None:
        self._values.clear()


__all__ = ["RefMap", "StateTable"]

"""Collision-free identifiers for elements and generated classes."""

from __future__ import annotations

import hashlib
import random
import string
from typing import Set

_ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 3


def _base36(value: int) -> str:
    digits = []
    while True:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
        if not value:
            break
    return "".join(reversed(digits))


def stable_suffix(prefix: str, counter: int) -> str:
    digest = hashlib.sha1(f"{prefix}-{counter}".encode("utf-8")).hexdigest()
    return _base36(int(digest[:8], 16)).rjust(SUFFIX_LENGTH, "0")[-SUFFIX_LENGTH:]


class IdAllocator:
    """Hands out element ids and class names from separate counters.

    Element ids look like ``sc-id-3-k2f``: the counter alone guarantees
    uniqueness, the suffix is cosmetic. With ``deterministic=True`` the suffix
    is derived from the counter so repeated builds produce identical output.
    Class names are plain ``sc-cls-<counter>``.
    """

    def __init__(
        self,
        *,
        id_prefix: str = "sc-id",
        class_prefix: str = "sc-cls",
        deterministic: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self.id_prefix = id_prefix
        self.class_prefix = class_prefix
        self.deterministic = deterministic
        self._rng = rng or random.Random()
        self._id_counter = 0
        self._class_counter = 0
        self._reserved_ids: Set[str] = set()
        self._reserved_classes: Set[str] = set()

    def _suffix(self) -> str:
        if self.deterministic:
            return stable_suffix(self.id_prefix, self._id_counter)
        return "".join(self._rng.choice(_ALPHABET) for _ in range(SUFFIX_LENGTH))

    def reserve_id(self, value: str) -> None:
        """Mark an explicitly assigned id so generated ids never reuse it."""
        self._reserved_ids.add(value)

    def reserve_class(self, value: str) -> None:
        self._reserved_classes.add(value)

    def element_id(self) -> str:
        while True:
            self._id_counter += 1
            candidate = f"{self.id_prefix}-{self._id_counter}-{self._suffix()}"
            if candidate not in self._reserved_ids:
                self._reserved_ids.add(candidate)
                return candidate

    def class_name(self) -> str:
        while True:
            self._class_counter += 1
            candidate = f"{self.class_prefix}-{self._class_counter}"
            if candidate not in self._reserved_classes:
                self._reserved_classes.add(candidate)
                return candidate


__all__ = ["IdAllocator", "stable_suffix"]

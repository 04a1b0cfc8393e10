"""Identifier generators injected into builder graph sessions."""
from __future__ import annotations

import uuid
from typing import Protocol


class IdGenerator(Protocol):
    """Anything that can mint a fresh identifier for a given prefix."""

    def next_id(self, prefix: str) -> str:
        ...


class CounterIdGenerator:
    """Monotonic counter owned by a single editing session.

    Deterministic, so tests can predict the identifiers it produces.
    """

    def __init__(self, start: int = 1) -> None:
        self._next = start

    def next_id(self, prefix: str) -> str:
        """Return ``<prefix>-<n>`` and advance the counter."""
        value = self._next
        self._next += 1
        return f"{prefix}-{value}"

    def skip_past(self, value: int) -> None:
        """Ensure future identifiers use numbers greater than ``value``."""
        if value >= self._next:
            self._next = value + 1


class UuidIdGenerator:
    """Random identifiers; safe when several sessions share a process."""

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex[:12]}"

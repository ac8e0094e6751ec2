"""
accessctl Permissions - Override Store
======================================
Per-user explicit allow/deny exceptions.

Store invariant: at most one override per (user, permission_id).
Stores reject duplicates on write; resolution tolerates them
(last write wins) so a corrupted store never blocks evaluation.
"""

from __future__ import annotations

import threading
from typing import Iterable, Protocol

from accessctl.exceptions import DuplicateOverride
from accessctl.permissions.models import Override


def ensure_unique(overrides: Iterable[Override]) -> tuple[Override, ...]:
    """Return overrides as a tuple, raising on a repeated permission id."""
    seen: set[str] = set()
    result = []
    for override in overrides:
        if override.permission_id in seen:
            raise DuplicateOverride(override.permission_id)
        seen.add(override.permission_id)
        result.append(override)
    return tuple(result)


def find_override(
    overrides: Iterable[Override],
    permission_id: str,
) -> Override | None:
    """Last override for permission_id, or None."""
    found = None
    for override in overrides:
        if override.permission_id == permission_id:
            found = override
    return found


class OverrideStore(Protocol):
    """
    Persistence collaborator for per-user overrides.

    load/save bracket a single mutation.
    """

    def load(self, user_id: str) -> tuple[Override, ...]:
        ...  # pragma: no cover

    def save(self, user_id: str, overrides: Iterable[Override]) -> None:
        ...  # pragma: no cover


class InMemoryOverrideStore:
    """Simple in-memory override store for testing and bootstrap."""

    def __init__(
        self,
        initial: dict[str, Iterable[Override]] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._overrides: dict[str, tuple[Override, ...]] = {}
        for user_id, overrides in (initial or {}).items():
            self._overrides[user_id] = ensure_unique(overrides)

    def load(self, user_id: str) -> tuple[Override, ...]:
        with self._lock:
            return self._overrides.get(user_id, ())

    def save(self, user_id: str, overrides: Iterable[Override]) -> None:
        checked = ensure_unique(overrides)
        with self._lock:
            if checked:
                self._overrides[user_id] = checked
            else:
                self._overrides.pop(user_id, None)

    def users_with_overrides(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(self._overrides))

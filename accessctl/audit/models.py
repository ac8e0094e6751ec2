"""
accessctl Audit — Immutable Audit Models
========================================
Append-only audit ledger entries.

Entries are frozen dataclasses; their snapshots are deep-copied at
record time and frozen into read-only structures (mappings become
read-only proxies, lists become tuples). Deletion is not supported.
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Optional

from accessctl.permissions.constants import AUDIT_MODULES


# ══════════════════════════════════════════════════════════════
# SNAPSHOT HELPERS
# ══════════════════════════════════════════════════════════════

def _freeze(value: Any) -> Any:
    """Copy into read-only containers; leaves are deep-copied."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(v) for v in value)
    return copy.deepcopy(value)


def thaw(value: Any) -> Any:
    """Convert a frozen snapshot back into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(v) for v in value]
    if isinstance(value, frozenset):
        return sorted((thaw(v) for v in value), key=repr)
    return value


def capture_snapshot(data: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    """
    Deep-copy and freeze a snapshot.

    Later mutation of the caller's live object cannot reach the copy.
    """
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise TypeError(
            f"Audit snapshot must be a mapping, got {type(data).__name__}."
        )
    return _freeze(data)


# ══════════════════════════════════════════════════════════════
# AUDIT ENTRY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AuditEntry:
    """
    Immutable record of one mutation to security-relevant state.

    old_data / new_data may each be None:
        old_data None → pure creation
        new_data None → pure destruction
    """

    entry_id: uuid.UUID
    sequence: int
    actor_id: str
    actor_name: str
    role_at_time: str
    module: str
    action: str
    old_data: Optional[Mapping[str, Any]]
    new_data: Optional[Mapping[str, Any]]
    occurred_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    def __post_init__(self) -> None:
        if self.module not in AUDIT_MODULES:
            raise ValueError(
                f"module '{self.module}' not valid. "
                f"Must be one of: {sorted(AUDIT_MODULES)}"
            )

        if not self.action or not isinstance(self.action, str):
            raise ValueError("action must be a non-empty string.")

        if not isinstance(self.sequence, int) or self.sequence < 1:
            raise ValueError("sequence must be a positive integer.")

        if self.occurred_at.tzinfo is None:
            raise ValueError("occurred_at must be timezone-aware.")

    @property
    def has_state_delta(self) -> bool:
        return self.old_data is not None or self.new_data is not None

    def to_dict(self) -> dict:
        """At-rest shape used by export and compliance tooling."""
        return {
            "id": str(self.entry_id),
            "actor_id": self.actor_id,
            "actor_name": self.actor_name,
            "role_at_time": self.role_at_time,
            "module": self.module,
            "action": self.action,
            "old_data": thaw(self.old_data),
            "new_data": thaw(self.new_data),
            "occurred_at": self.occurred_at.isoformat(),
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
        }

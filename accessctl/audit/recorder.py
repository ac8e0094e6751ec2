"""
accessctl Audit — Audit Recorder
================================
Append-only ledger of security-relevant mutations.

Responsibilities:
- Capture deep-copied before/after snapshots at call time
- Assign unique id, monotonic sequence and clock timestamp
- Persist through an AuditSink BEFORE the entry becomes visible
- Newest-first reads with optional filtering
- Lazy diff of a single entry on inspection

Appends are serialized by a single ledger lock. Reads are safe for
concurrent callers. There is no update or delete operation.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Protocol

from accessctl.audit.diff import DiffEntry, diff_entry
from accessctl.audit.models import AuditEntry, capture_snapshot
from accessctl.context.actor_context import ActorContext
from accessctl.exceptions import AuditEntryNotFound, AuditWriteError
from accessctl.time.clock import Clock, SystemClock

logger = logging.getLogger("accessctl.audit")


# ══════════════════════════════════════════════════════════════
# SINK PROTOCOL (persistence collaborator)
# ══════════════════════════════════════════════════════════════

class AuditSink(Protocol):
    """Durable destination for audit entries. Must raise on failure."""

    def append(self, entry: AuditEntry) -> None:
        ...  # pragma: no cover


class InMemoryAuditSink:
    """Simple in-memory sink for testing and bootstrap."""

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    def append(self, entry: AuditEntry) -> None:
        self._entries.append(entry)

    @property
    def entries(self) -> tuple[AuditEntry, ...]:
        return tuple(self._entries)


# ══════════════════════════════════════════════════════════════
# FILTER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AuditFilter:
    """All set criteria must match (AND). Time bounds are inclusive."""

    actor_id: Optional[str] = None
    module: Optional[str] = None
    action: Optional[str] = None
    since: Optional[datetime] = None
    until: Optional[datetime] = None

    def matches(self, entry: AuditEntry) -> bool:
        if self.actor_id is not None and entry.actor_id != self.actor_id:
            return False
        if self.module is not None and entry.module != self.module:
            return False
        if self.action is not None and entry.action != self.action:
            return False
        if self.since is not None and entry.occurred_at < self.since:
            return False
        if self.until is not None and entry.occurred_at > self.until:
            return False
        return True


# ══════════════════════════════════════════════════════════════
# RECORDER
# ══════════════════════════════════════════════════════════════

class AuditRecorder:
    """
    Append-only audit ledger.

    Usage:
        recorder = AuditRecorder(clock=FixedClock(...))
        entry = recorder.record(actor, "settings", "update_global_config",
                                old_data={"store_name": "A"},
                                new_data={"store_name": "B"})
        recorder.diff(entry.entry_id)
    """

    def __init__(
        self,
        sink: Optional[AuditSink] = None,
        clock: Optional[Clock] = None,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    ):
        self._sink = sink if sink is not None else InMemoryAuditSink()
        self._clock = clock if clock is not None else SystemClock()
        self._id_factory = id_factory
        self._entries: list[AuditEntry] = []
        self._by_id: dict[uuid.UUID, AuditEntry] = {}
        self._lock = threading.Lock()

    # ══════════════════════════════════════════════════════════
    # WRITE
    # ══════════════════════════════════════════════════════════

    def record(
        self,
        actor: ActorContext,
        module: str,
        action: str,
        old_data: Optional[Mapping[str, Any]] = None,
        new_data: Optional[Mapping[str, Any]] = None,
    ) -> AuditEntry:
        """
        Append one entry and return it.

        Raises AuditWriteError if the sink fails; the ledger is then
        left unchanged and the caller must treat its mutation as failed.
        """
        old_snapshot = capture_snapshot(old_data)
        new_snapshot = capture_snapshot(new_data)

        with self._lock:
            entry_id = self._id_factory()
            if entry_id in self._by_id:
                raise ValueError(f"Audit entry id '{entry_id}' already used.")

            entry = AuditEntry(
                entry_id=entry_id,
                sequence=len(self._entries) + 1,
                actor_id=actor.actor_id,
                actor_name=actor.actor_name,
                role_at_time=actor.role_at_time,
                module=module,
                action=action,
                old_data=old_snapshot,
                new_data=new_snapshot,
                occurred_at=self._clock.now_utc(),
                ip_address=actor.ip_address,
                user_agent=actor.user_agent,
            )

            try:
                self._sink.append(entry)
            except Exception as exc:
                logger.error(
                    f"Audit write failed: {module}.{action} by "
                    f"{actor.actor_id}: {type(exc).__name__}: {exc}"
                )
                raise AuditWriteError(exc) from exc

            self._entries.append(entry)
            self._by_id[entry_id] = entry

        logger.info(
            f"Audit recorded: #{entry.sequence} {module}.{action} "
            f"by {actor.actor_id} [{actor.role_at_time}]"
        )
        return entry

    # ══════════════════════════════════════════════════════════
    # READ
    # ══════════════════════════════════════════════════════════

    def list(self, filter: Optional[AuditFilter] = None) -> tuple[AuditEntry, ...]:
        """Entries newest first, optionally filtered."""
        with self._lock:
            entries = tuple(reversed(self._entries))
        if filter is None:
            return entries
        return tuple(e for e in entries if filter.matches(e))

    def get(self, entry_id: uuid.UUID) -> AuditEntry:
        with self._lock:
            entry = self._by_id.get(entry_id)
        if entry is None:
            raise AuditEntryNotFound(entry_id)
        return entry

    def diff(self, entry_id: uuid.UUID) -> list[DiffEntry]:
        """Compute the diff of one entry on demand."""
        return diff_entry(self.get(entry_id))

    def export(self, filter: Optional[AuditFilter] = None) -> list[dict]:
        """At-rest shapes, newest first."""
        return [entry.to_dict() for entry in self.list(filter)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

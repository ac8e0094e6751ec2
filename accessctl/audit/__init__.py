"""
accessctl Audit — Public API
============================
Append-only audit ledger and on-demand structural diff.
"""

from accessctl.audit.diff import (
    DiffEntry,
    DiffStatus,
    diff,
    diff_entry,
    structurally_equal,
)
from accessctl.audit.models import AuditEntry, capture_snapshot, thaw
from accessctl.audit.recorder import (
    AuditFilter,
    AuditRecorder,
    AuditSink,
    InMemoryAuditSink,
)

__all__ = [
    "AuditEntry",
    "AuditFilter",
    "AuditRecorder",
    "AuditSink",
    "InMemoryAuditSink",
    "DiffEntry",
    "DiffStatus",
    "capture_snapshot",
    "diff",
    "diff_entry",
    "structurally_equal",
    "thaw",
]

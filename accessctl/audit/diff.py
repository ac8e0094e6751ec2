"""
accessctl Audit — Structural Diff Engine
========================================
Field-level, classified difference between two flat-ish snapshots.

Output order:
    keys of old (in order), then keys present only in new (in order).

Classification:
    changed  — both define the key, values not structurally equal
    added    — only new defines the key (old_value None)
    removed  — only old defines the key (new_value None)
    equal values are omitted.

Equality is structural over JSON-like values: nested mapping key order
is irrelevant, list order is significant, bool is never equal to int.

Pure. Computed lazily when an entry is inspected, never stored.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional


# ══════════════════════════════════════════════════════════════
# DIFF STATUS
# ══════════════════════════════════════════════════════════════

class DiffStatus:
    CHANGED = "changed"
    ADDED = "added"
    REMOVED = "removed"

    ALL = frozenset({"changed", "added", "removed"})


# ══════════════════════════════════════════════════════════════
# DIFF ENTRY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DiffEntry:
    field: str
    old_value: Any
    new_value: Any
    status: str

    def __post_init__(self):
        if self.status not in DiffStatus.ALL:
            raise ValueError(
                f"status '{self.status}' not valid. "
                f"Must be one of: {sorted(DiffStatus.ALL)}"
            )

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "status": self.status,
        }


# ══════════════════════════════════════════════════════════════
# STRUCTURAL EQUALITY
# ══════════════════════════════════════════════════════════════

def structurally_equal(left: Any, right: Any) -> bool:
    """Deep equality over scalars, sequences and mappings."""
    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        if set(left.keys()) != set(right.keys()):
            return False
        return all(structurally_equal(left[k], right[k]) for k in left)

    if isinstance(left, (list, tuple)) or isinstance(right, (list, tuple)):
        if not (
            isinstance(left, (list, tuple)) and isinstance(right, (list, tuple))
        ):
            return False
        if len(left) != len(right):
            return False
        return all(structurally_equal(a, b) for a, b in zip(left, right))

    if isinstance(left, bool) or isinstance(right, bool):
        return (
            isinstance(left, bool)
            and isinstance(right, bool)
            and left is right
        )

    if isinstance(left, float) and isinstance(right, float):
        if math.isnan(left) and math.isnan(right):
            return True

    return left == right


# ══════════════════════════════════════════════════════════════
# DIFF
# ══════════════════════════════════════════════════════════════

def diff(
    old: Optional[Mapping[str, Any]],
    new: Optional[Mapping[str, Any]],
) -> list[DiffEntry]:
    """Classified field-level difference between two snapshots."""
    old = {} if old is None else old
    new = {} if new is None else new

    entries: list[DiffEntry] = []

    for key in old:
        if key in new:
            if not structurally_equal(old[key], new[key]):
                entries.append(
                    DiffEntry(
                        field=key,
                        old_value=old[key],
                        new_value=new[key],
                        status=DiffStatus.CHANGED,
                    )
                )
        else:
            entries.append(
                DiffEntry(
                    field=key,
                    old_value=old[key],
                    new_value=None,
                    status=DiffStatus.REMOVED,
                )
            )

    for key in new:
        if key not in old:
            entries.append(
                DiffEntry(
                    field=key,
                    old_value=None,
                    new_value=new[key],
                    status=DiffStatus.ADDED,
                )
            )

    return entries


def diff_entry(entry) -> list[DiffEntry]:
    """Diff the before/after snapshots of an AuditEntry."""
    return diff(entry.old_data, entry.new_data)

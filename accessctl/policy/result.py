"""
accessctl Policy — Result Models
================================
PermissionState: one resolved (permission id, value, source) triple.
EffectiveMatrix: total, read-only mapping permission_id -> bool.

These are pure data structures. No side effects. No persistence.
The matrix is derived on demand and never stored.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator

from accessctl.exceptions import AccessControlError
from accessctl.permissions.catalog import (
    all_permission_ids,
    permission_ids_for_module,
)


# ══════════════════════════════════════════════════════════════
# PERMISSION SOURCE
# ══════════════════════════════════════════════════════════════

class PermissionSource:
    """Where an effective value came from."""
    INHERITED = "inherited"
    OVERRIDE = "override"

    ALL = frozenset({"inherited", "override"})


# ══════════════════════════════════════════════════════════════
# PERMISSION STATE (single resolved id)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PermissionState:
    permission_id: str
    active: bool
    source: str

    def __post_init__(self):
        if self.source not in PermissionSource.ALL:
            raise ValueError(
                f"source '{self.source}' not valid. "
                f"Must be one of: {sorted(PermissionSource.ALL)}"
            )

    @property
    def is_override(self) -> bool:
        return self.source == PermissionSource.OVERRIDE

    @property
    def label(self) -> str:
        if self.is_override:
            return "Explicit Allow" if self.active else "Explicit Deny"
        return "Inherited from Role"


# ══════════════════════════════════════════════════════════════
# EFFECTIVE MATRIX (aggregate over the catalog)
# ══════════════════════════════════════════════════════════════

class EffectiveMatrix(Mapping):
    """
    Read-only permission_id -> bool mapping, total over the catalog.

    Iteration follows catalog order. Non-fatal resolution problems
    (unknown role references, duplicate overrides) are carried in
    `warnings` instead of being raised.
    """

    def __init__(
        self,
        states: Iterable[PermissionState],
        warnings: Iterable[AccessControlError] = (),
    ):
        by_id = {state.permission_id: state for state in states}
        catalog = all_permission_ids()
        missing = [pid for pid in catalog if pid not in by_id]
        if missing or len(by_id) != len(catalog):
            raise ValueError(
                "EffectiveMatrix must cover exactly the permission catalog; "
                f"missing={missing}"
            )
        self._states = MappingProxyType(
            {pid: by_id[pid] for pid in catalog}
        )
        self._warnings = tuple(warnings)

    def __getitem__(self, permission_id: str) -> bool:
        return self._states[permission_id].active

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __repr__(self) -> str:
        return (
            f"EffectiveMatrix(granted={len(self.granted_ids())}/"
            f"{len(self)}, warnings={len(self._warnings)})"
        )

    @property
    def warnings(self) -> tuple[AccessControlError, ...]:
        return self._warnings

    def state(self, permission_id: str) -> PermissionState:
        return self._states[permission_id]

    def granted_ids(self) -> tuple[str, ...]:
        """Ids resolving to True, in catalog order."""
        return tuple(pid for pid, s in self._states.items() if s.active)

    def module_states(self, module: str) -> tuple[PermissionState, ...]:
        return tuple(
            self._states[pid] for pid in permission_ids_for_module(module)
        )

    def is_module_fully_active(self, module: str) -> bool:
        return all(state.active for state in self.module_states(module))

    def to_dict(self) -> dict[str, bool]:
        return {pid: state.active for pid, state in self._states.items()}

"""
accessctl Config — Engine Settings and Protected Configuration
==============================================================
Configuration is data passed explicitly, never read from globals.

AccessSettings: how the access service attributes its audit entries.
SettingsStore:  protected system configuration; every change is audited.
"""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Protocol, Tuple

from accessctl.exceptions import UnknownSettingKey
from accessctl.permissions.constants import (
    AUDIT_MODULES,
    MODULE_SETTINGS,
    MODULE_USERS,
)


# ══════════════════════════════════════════════════════════════
# DEFAULT PROTECTED SETTINGS
# ══════════════════════════════════════════════════════════════

DEFAULT_SETTINGS: Dict[str, Any] = {
    "store_name": "",
    "store_email": "",
    "currency": "USD",
    "timezone": "UTC",
    "maintenance_mode": False,
    "api_keys": {},
}


# ══════════════════════════════════════════════════════════════
# ACCESS SETTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AccessSettings:
    """Audit attribution for access-control mutations."""

    audit_module_for_overrides: str = MODULE_USERS
    audit_module_for_settings: str = MODULE_SETTINGS
    protected_setting_keys: Tuple[str, ...] = field(
        default_factory=lambda: tuple(DEFAULT_SETTINGS)
    )

    def __post_init__(self) -> None:
        for module in (
            self.audit_module_for_overrides,
            self.audit_module_for_settings,
        ):
            if module not in AUDIT_MODULES:
                raise ValueError(
                    f"audit module '{module}' not valid. "
                    f"Must be one of: {sorted(AUDIT_MODULES)}"
                )
        if not isinstance(self.protected_setting_keys, tuple):
            raise ValueError("protected_setting_keys must be a tuple.")


# ══════════════════════════════════════════════════════════════
# SETTINGS STORE PROTOCOL
# ══════════════════════════════════════════════════════════════

class SettingsStore(Protocol):
    """
    Protocol for protected configuration storage.

    Implementations may back this with a database, file, or in-memory store.
    """

    def load(self) -> Dict[str, Any]:
        ...  # pragma: no cover

    def save(self, values: Mapping[str, Any]) -> None:
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IN-MEMORY SETTINGS STORE (for testing / bootstrap)
# ══════════════════════════════════════════════════════════════

class InMemorySettingsStore:
    """Simple in-memory settings store for testing and bootstrap."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._lock = threading.Lock()
        self._values: Dict[str, Any] = copy.deepcopy(DEFAULT_SETTINGS)
        if initial:
            self._values.update(copy.deepcopy(dict(initial)))

    def load(self) -> Dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._values)

    def save(self, values: Mapping[str, Any]) -> None:
        with self._lock:
            self._values = copy.deepcopy(dict(values))


def apply_setting_changes(
    current: Mapping[str, Any],
    changes: Mapping[str, Any],
    allowed_keys: Tuple[str, ...],
) -> Dict[str, Any]:
    """Return a new settings mapping; unknown keys are rejected up front."""
    for key in changes:
        if key not in allowed_keys:
            raise UnknownSettingKey(key)
    updated = copy.deepcopy(dict(current))
    updated.update(copy.deepcopy(dict(changes)))
    return updated

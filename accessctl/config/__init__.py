"""
accessctl Config — Public API
=============================
Engine settings and protected system configuration.
"""

from accessctl.config.settings import (
    DEFAULT_SETTINGS,
    AccessSettings,
    InMemorySettingsStore,
    SettingsStore,
    apply_setting_changes,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "AccessSettings",
    "SettingsStore",
    "InMemorySettingsStore",
    "apply_setting_changes",
]

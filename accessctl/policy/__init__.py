"""
accessctl Policy - Public API
=============================
"""

from accessctl.policy.resolver import (
    PolicyResolver,
    resolve,
    resolve_for_user,
    toggle_module,
    toggle_single_permission,
)
from accessctl.policy.result import (
    EffectiveMatrix,
    PermissionSource,
    PermissionState,
)

__all__ = [
    "PolicyResolver",
    "EffectiveMatrix",
    "PermissionSource",
    "PermissionState",
    "resolve",
    "resolve_for_user",
    "toggle_single_permission",
    "toggle_module",
]

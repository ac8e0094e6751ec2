"""
accessctl Permissions - Public API
==================================
"""

from accessctl.permissions.catalog import (
    all_permission_ids,
    all_permissions,
    is_valid_module,
    is_valid_permission_id,
    make_permission_id,
    parse_permission_id,
    permission_ids_for_module,
    require_override_target,
)
from accessctl.permissions.constants import (
    ACTIONS,
    MODULE_AUTH,
    MODULES,
    WILDCARD,
)
from accessctl.permissions.models import Override, Permission, Role
from accessctl.permissions.overrides import (
    InMemoryOverrideStore,
    OverrideStore,
    ensure_unique,
    find_override,
)
from accessctl.permissions.registry import InMemoryRoleRegistry, RoleRegistry

__all__ = [
    "MODULES",
    "ACTIONS",
    "MODULE_AUTH",
    "WILDCARD",
    "Permission",
    "Role",
    "Override",
    "RoleRegistry",
    "InMemoryRoleRegistry",
    "OverrideStore",
    "InMemoryOverrideStore",
    "ensure_unique",
    "find_override",
    "all_permission_ids",
    "all_permissions",
    "is_valid_module",
    "is_valid_permission_id",
    "make_permission_id",
    "parse_permission_id",
    "permission_ids_for_module",
    "require_override_target",
]

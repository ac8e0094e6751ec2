"""
accessctl Permissions — Permission Catalog
==========================================
Single source of validity for permission ids.

Wire format: "<module>.<action>", case-sensitive.
"*" is reserved for wildcard roles and is never an override target.

Pure lookups, no side effects.
"""

from __future__ import annotations

from accessctl.exceptions import InvalidModule, InvalidPermissionId
from accessctl.permissions.constants import (
    ACTIONS,
    MODULES,
    PERMISSION_SEPARATOR,
    VALID_ACTIONS,
    VALID_MODULES,
    WILDCARD,
)
from accessctl.permissions.models import Permission


def make_permission_id(module: str, action: str) -> str:
    return f"{module}{PERMISSION_SEPARATOR}{action}"


_ALL_PERMISSIONS: tuple[Permission, ...] = tuple(
    Permission(module=module, action=action)
    for module in MODULES
    for action in ACTIONS
)
_ALL_PERMISSION_IDS: tuple[str, ...] = tuple(p.id for p in _ALL_PERMISSIONS)
_PERMISSIONS_BY_ID: dict[str, Permission] = {p.id: p for p in _ALL_PERMISSIONS}
_IDS_BY_MODULE: dict[str, tuple[str, ...]] = {
    module: tuple(make_permission_id(module, action) for action in ACTIONS)
    for module in MODULES
}


def _split(permission_id: object) -> tuple[str, str] | None:
    if not isinstance(permission_id, str):
        return None
    module, sep, action = permission_id.partition(PERMISSION_SEPARATOR)
    if not sep:
        return None
    return module, action


def is_valid_permission_id(permission_id: object) -> bool:
    """True for a known module.action pair, or the wildcard token."""
    if permission_id == WILDCARD:
        return True
    parts = _split(permission_id)
    if parts is None:
        return False
    module, action = parts
    return module in VALID_MODULES and action in VALID_ACTIONS


def is_valid_module(module: object) -> bool:
    return isinstance(module, str) and module in VALID_MODULES


def all_permission_ids() -> tuple[str, ...]:
    """Every catalog id; modules outer, actions inner, declaration order."""
    return _ALL_PERMISSION_IDS


def all_permissions() -> tuple[Permission, ...]:
    return _ALL_PERMISSIONS


def permission_ids_for_module(module: str) -> tuple[str, ...]:
    """Catalog ids of one module in action declaration order."""
    if not is_valid_module(module):
        raise InvalidModule(module)
    return _IDS_BY_MODULE[module]


def parse_permission_id(permission_id: str) -> Permission:
    """
    Parse a concrete permission id into a Permission.

    The wildcard is rejected: it has no (module, action) pair.
    """
    if not isinstance(permission_id, str):
        raise InvalidPermissionId(permission_id)
    permission = _PERMISSIONS_BY_ID.get(permission_id)
    if permission is None:
        raise InvalidPermissionId(permission_id)
    return permission


def require_override_target(permission_id: str) -> str:
    """Validate an id before it is written as an override."""
    if permission_id == WILDCARD or not is_valid_permission_id(permission_id):
        raise InvalidPermissionId(permission_id)
    return permission_id

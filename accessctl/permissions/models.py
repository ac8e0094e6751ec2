"""
accessctl Permissions - Immutable Permission/Role/Override Models
=================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from accessctl.exceptions import InvalidPermissionId
from accessctl.permissions.constants import (
    PERMISSION_SEPARATOR,
    VALID_ACTIONS,
    VALID_MODULES,
    WILDCARD,
)


@dataclass(frozen=True)
class Permission:
    module: str
    action: str

    def __post_init__(self):
        if self.module not in VALID_MODULES or self.action not in VALID_ACTIONS:
            raise InvalidPermissionId(
                f"{self.module}{PERMISSION_SEPARATOR}{self.action}"
            )

    @property
    def id(self) -> str:
        return f"{self.module}{PERMISSION_SEPARATOR}{self.action}"

    @property
    def name(self) -> str:
        return f"{self.action.capitalize()} {self.module.capitalize()}"


@dataclass(frozen=True)
class Role:
    """
    Named set of permission ids, or a wildcard granting the whole catalog.

    A "*" inside permission_ids is normalized to is_wildcard=True.
    Inactive roles are kept for reference but grant nothing.
    """

    role_id: str
    name: str
    permission_ids: frozenset[str] = frozenset()
    is_wildcard: bool = False
    display_name: str = ""
    is_active: bool = True

    def __post_init__(self):
        from accessctl.permissions.catalog import is_valid_permission_id

        if not self.role_id or not isinstance(self.role_id, str):
            raise ValueError("role_id must be a non-empty string.")

        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")

        if isinstance(self.permission_ids, str):
            raise ValueError("permission_ids must be a collection, not a string.")

        normalized = frozenset(self.permission_ids)
        for permission_id in normalized:
            if not is_valid_permission_id(permission_id):
                raise InvalidPermissionId(permission_id)

        is_wildcard = bool(self.is_wildcard) or WILDCARD in normalized
        object.__setattr__(self, "permission_ids", normalized - {WILDCARD})
        object.__setattr__(self, "is_wildcard", is_wildcard)
        if not self.display_name:
            object.__setattr__(self, "display_name", self.name)

    def grants(self, permission_id: str) -> bool:
        """Inherited contribution of this role for one permission id."""
        if not self.is_active:
            return False
        return self.is_wildcard or permission_id in self.permission_ids

    def to_dict(self) -> dict:
        return {
            "id": self.role_id,
            "name": self.name,
            "display_name": self.display_name,
            "is_active": self.is_active,
            "permissions": (
                [WILDCARD] if self.is_wildcard else sorted(self.permission_ids)
            ),
        }


@dataclass(frozen=True)
class Override:
    """Explicit per-user allow/deny. Highest precedence signal."""

    permission_id: str
    is_allowed: bool

    def __post_init__(self):
        from accessctl.permissions.catalog import require_override_target

        require_override_target(self.permission_id)
        if not isinstance(self.is_allowed, bool):
            raise ValueError("is_allowed must be a bool.")

    def to_dict(self) -> dict:
        return {"permission_id": self.permission_id, "is_allowed": self.is_allowed}

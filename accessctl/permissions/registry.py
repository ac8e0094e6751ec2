"""
accessctl Permissions - Role Registry Protocol and In-Memory Registry
=====================================================================
Role lifecycle (create/edit/deactivate) belongs to the role-management
collaborator. The core only reads roles by value.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from accessctl.permissions.models import Role


class RoleRegistry(Protocol):
    def get_role(self, role_id: str) -> Role | None:
        ...

    def list_roles(self) -> tuple[Role, ...]:
        ...


class InMemoryRoleRegistry:
    """
    Deterministic in-memory registry used for bootstrap/tests.
    """

    def __init__(self, roles: Iterable[Role] | None = None):
        self._roles: dict[str, Role] = {}
        for role in roles or ():
            if role.role_id in self._roles:
                raise ValueError(f"Duplicate role_id '{role.role_id}'.")
            self._roles[role.role_id] = role

    def get_role(self, role_id: str) -> Role | None:
        return self._roles.get(role_id)

    def list_roles(self) -> tuple[Role, ...]:
        return tuple(self._roles.values())

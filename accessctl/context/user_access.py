"""
accessctl Context - UserAccessContext
=====================================
Caller-owned access state for one user: assigned roles and overrides.
Passed into every resolution call; never cached by the core.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from accessctl.permissions.models import Override


@dataclass(frozen=True)
class UserAccessContext:
    user_id: str
    role_ids: tuple[str, ...] = field(default_factory=tuple)
    overrides: tuple[Override, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.user_id or not isinstance(self.user_id, str):
            raise ValueError("user_id must be a non-empty string.")

        if isinstance(self.role_ids, str):
            raise ValueError("role_ids must be a sequence of role ids.")

        # Ordered set: first occurrence wins.
        object.__setattr__(
            self, "role_ids", tuple(dict.fromkeys(self.role_ids))
        )
        object.__setattr__(self, "overrides", tuple(self.overrides))

    def has_role(self, role_id: str) -> bool:
        return role_id in self.role_ids

    def with_role_toggled(self, role_id: str) -> "UserAccessContext":
        """Add role_id at the end, or remove it if already assigned."""
        if not role_id or not isinstance(role_id, str):
            raise ValueError("role_id must be a non-empty string.")
        if role_id in self.role_ids:
            role_ids = tuple(r for r in self.role_ids if r != role_id)
        else:
            role_ids = self.role_ids + (role_id,)
        return replace(self, role_ids=role_ids)

    def snapshot(self) -> dict:
        return {
            "user_id": self.user_id,
            "roles": list(self.role_ids),
            "overrides": [o.to_dict() for o in self.overrides],
        }

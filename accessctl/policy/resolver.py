"""
accessctl Policy — Deterministic Policy Resolver
================================================
Computes effective permissions from roles + overrides and derives
the override sets produced by the two toggle operations.

Precedence (per catalog id):
    1. Override for the id          → override.is_allowed (always wins)
    2. Any active role grants the id → True (wildcard grants everything)
    3. Otherwise                     → False (default deny)

All operations are pure: inputs are passed explicitly, outputs are
new immutable values. Callers own persistence and locking.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from accessctl.exceptions import (
    AccessControlError,
    DuplicateOverride,
    UnknownRoleReference,
)
from accessctl.permissions.catalog import (
    all_permission_ids,
    permission_ids_for_module,
    require_override_target,
)
from accessctl.permissions.models import Override, Role
from accessctl.permissions.registry import RoleRegistry
from accessctl.policy.result import (
    EffectiveMatrix,
    PermissionSource,
    PermissionState,
)

logger = logging.getLogger("accessctl.policy")


class PolicyResolver:
    # ══════════════════════════════════════════════════════════
    # RESOLUTION
    # ══════════════════════════════════════════════════════════

    @staticmethod
    def _index_overrides(
        overrides: Iterable[Override],
    ) -> tuple[dict[str, Override], list[AccessControlError]]:
        """Last applied override wins for a repeated permission id."""
        indexed: dict[str, Override] = {}
        warnings: list[AccessControlError] = []
        for override in overrides:
            if override.permission_id in indexed:
                warning = DuplicateOverride(override.permission_id)
                logger.warning(f"{warning} Last write wins.")
                warnings.append(warning)
            indexed[override.permission_id] = override
        return indexed, warnings

    @staticmethod
    def _inherited_ids(roles: Iterable[Role]) -> frozenset[str] | None:
        """Union of active role grants; None means wildcard (everything)."""
        granted: set[str] = set()
        for role in roles:
            if not role.is_active:
                continue
            if role.is_wildcard:
                return None
            granted.update(role.permission_ids)
        return frozenset(granted)

    @staticmethod
    def resolve(
        roles: Iterable[Role],
        overrides: Iterable[Override],
        warnings: Iterable[AccessControlError] = (),
    ) -> EffectiveMatrix:
        """
        Resolve the effective permission matrix.

        Result is total over the catalog and independent of the
        ordering of roles and (unique) overrides.
        """
        inherited = PolicyResolver._inherited_ids(roles)
        indexed, duplicate_warnings = PolicyResolver._index_overrides(overrides)

        states = []
        for permission_id in all_permission_ids():
            override = indexed.get(permission_id)
            if override is not None:
                states.append(
                    PermissionState(
                        permission_id=permission_id,
                        active=override.is_allowed,
                        source=PermissionSource.OVERRIDE,
                    )
                )
                continue

            states.append(
                PermissionState(
                    permission_id=permission_id,
                    active=inherited is None or permission_id in inherited,
                    source=PermissionSource.INHERITED,
                )
            )

        return EffectiveMatrix(
            states,
            warnings=tuple(warnings) + tuple(duplicate_warnings),
        )

    @staticmethod
    def roles_for(
        role_ids: Iterable[str],
        registry: RoleRegistry,
    ) -> tuple[tuple[Role, ...], tuple[UnknownRoleReference, ...]]:
        """
        Look up role ids in registry order given by the user.

        Unknown ids contribute nothing and are reported as warnings.
        """
        roles: list[Role] = []
        unknown: list[UnknownRoleReference] = []
        for role_id in role_ids:
            role = registry.get_role(role_id)
            if role is None:
                warning = UnknownRoleReference(role_id)
                logger.warning(str(warning))
                unknown.append(warning)
                continue
            roles.append(role)
        return tuple(roles), tuple(unknown)

    @staticmethod
    def resolve_for_user(context, registry: RoleRegistry) -> EffectiveMatrix:
        """Resolve a UserAccessContext against a role registry."""
        roles, unknown = PolicyResolver.roles_for(context.role_ids, registry)
        return PolicyResolver.resolve(roles, context.overrides, warnings=unknown)

    @staticmethod
    def is_allowed(
        roles: Iterable[Role],
        overrides: Iterable[Override],
        permission_id: str,
    ) -> bool:
        return PolicyResolver.resolve(roles, overrides)[
            require_override_target(permission_id)
        ]

    # ══════════════════════════════════════════════════════════
    # MUTATIONS (return new override tuples)
    # ══════════════════════════════════════════════════════════

    @staticmethod
    def toggle_single_permission(
        roles: Sequence[Role],
        overrides: Sequence[Override],
        permission_id: str,
    ) -> tuple[Override, ...]:
        """
        Flip the effective value of one permission via an explicit override.

        An existing override at the id is replaced in place; any
        duplicates at the same id are dropped.
        """
        require_override_target(permission_id)

        current = PolicyResolver.resolve(roles, overrides)[permission_id]
        flipped = Override(permission_id=permission_id, is_allowed=not current)

        updated: list[Override] = []
        placed = False
        for override in overrides:
            if override.permission_id != permission_id:
                updated.append(override)
            elif not placed:
                updated.append(flipped)
                placed = True
        if not placed:
            updated.append(flipped)

        logger.debug(
            f"Toggle {permission_id}: {current} -> {flipped.is_allowed}"
        )
        return tuple(updated)

    @staticmethod
    def toggle_module(
        roles: Sequence[Role],
        overrides: Sequence[Override],
        module: str,
    ) -> tuple[Override, ...]:
        """
        Bulk-toggle a module between explicit full-deny and full-allow.

        All actions effective  → every action gets an explicit False.
        Otherwise              → every action gets an explicit True.

        The module's overrides are replaced, never merged.
        """
        module_ids = permission_ids_for_module(module)

        matrix = PolicyResolver.resolve(roles, overrides)
        all_active = all(matrix[pid] for pid in module_ids)
        target = not all_active

        module_id_set = frozenset(module_ids)
        kept = tuple(
            o for o in overrides if o.permission_id not in module_id_set
        )
        replaced = tuple(
            Override(permission_id=pid, is_allowed=target) for pid in module_ids
        )

        logger.debug(
            f"Toggle module {module}: all_active={all_active} -> "
            f"explicit {'allow' if target else 'deny'}"
        )
        return kept + replaced


resolve = PolicyResolver.resolve
resolve_for_user = PolicyResolver.resolve_for_user
toggle_single_permission = PolicyResolver.toggle_single_permission
toggle_module = PolicyResolver.toggle_module

"""
accessctl — Audited Access Control Service
==========================================
Wraps policy mutations with load → mutate → audit → save.

Ordering guarantees:
- Input is validated before anything is loaded or written.
- The audit entry is recorded BEFORE the new state is saved.
  If the audit write fails (AuditWriteError) nothing is saved and
  the mutation is reported as failed.

Writes to the same user's overrides are serialized by a per-user lock;
writes for different users proceed in parallel. A user lock is dropped
once no caller holds or awaits it. Settings writes share one lock.
Reads take no service-level lock.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional

from accessctl.audit.models import AuditEntry
from accessctl.audit.recorder import AuditRecorder
from accessctl.config.settings import (
    AccessSettings,
    SettingsStore,
    apply_setting_changes,
)
from accessctl.context.actor_context import ActorContext
from accessctl.context.user_access import UserAccessContext
from accessctl.exceptions import UnknownRoleReference
from accessctl.permissions.catalog import (
    permission_ids_for_module,
    require_override_target,
)
from accessctl.permissions.models import Override
from accessctl.permissions.overrides import OverrideStore
from accessctl.permissions.registry import RoleRegistry
from accessctl.policy.resolver import PolicyResolver
from accessctl.policy.result import EffectiveMatrix

logger = logging.getLogger("accessctl.service")


# ══════════════════════════════════════════════════════════════
# AUDIT ACTIONS
# ══════════════════════════════════════════════════════════════

ACTION_OVERRIDE_PERMISSION = "override_permission"
ACTION_OVERRIDE_MODULE = "override_module"
ACTION_RESET_OVERRIDES = "reset_overrides"
ACTION_ASSIGN_ROLE = "assign_role"
ACTION_REVOKE_ROLE = "revoke_role"
ACTION_UPDATE_GLOBAL_CONFIG = "update_global_config"


def override_snapshot(
    user_id: str,
    overrides: Iterable[Override],
) -> Dict[str, Any]:
    """Flat snapshot: one key per overridden permission id."""
    snapshot: Dict[str, Any] = {"user_id": user_id}
    for override in overrides:
        snapshot[override.permission_id] = override.is_allowed
    return snapshot


class AccessControlService:
    """
    Audited access-control mutations over caller-supplied stores.

    Usage:
        service = AccessControlService(
            registry=InMemoryRoleRegistry(roles),
            override_store=InMemoryOverrideStore(),
            recorder=AuditRecorder(),
        )
        service.toggle_permission(actor, "user-2", ("role-manager",),
                                  "orders.view")
    """

    def __init__(
        self,
        registry: RoleRegistry,
        override_store: OverrideStore,
        recorder: AuditRecorder,
        settings_store: Optional[SettingsStore] = None,
        settings: Optional[AccessSettings] = None,
    ):
        self._registry = registry
        self._override_store = override_store
        self._recorder = recorder
        self._settings_store = settings_store
        self._settings = settings if settings is not None else AccessSettings()

        # user_id -> [lock, holders]; removed when the last holder leaves
        self._user_locks: Dict[str, list] = {}
        self._user_locks_guard = threading.Lock()
        self._settings_lock = threading.Lock()

    @property
    def recorder(self) -> AuditRecorder:
        return self._recorder

    @contextmanager
    def _user_lock(self, user_id: str) -> Iterator[None]:
        if not user_id or not isinstance(user_id, str):
            raise ValueError("user_id must be a non-empty string.")
        with self._user_locks_guard:
            slot = self._user_locks.setdefault(user_id, [threading.Lock(), 0])
            slot[1] += 1
        try:
            with slot[0]:
                yield
        finally:
            with self._user_locks_guard:
                slot[1] -= 1
                if slot[1] == 0:
                    del self._user_locks[user_id]

    # ══════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════

    def effective_permissions(
        self,
        user_id: str,
        role_ids: Iterable[str],
    ) -> EffectiveMatrix:
        context = UserAccessContext(
            user_id=user_id,
            role_ids=tuple(role_ids),
            overrides=self._override_store.load(user_id),
        )
        return PolicyResolver.resolve_for_user(context, self._registry)

    # ══════════════════════════════════════════════════════════
    # OVERRIDE MUTATIONS
    # ══════════════════════════════════════════════════════════

    def _commit_overrides(
        self,
        actor: ActorContext,
        user_id: str,
        action: str,
        before: tuple[Override, ...],
        after: tuple[Override, ...],
    ) -> AuditEntry:
        entry = self._recorder.record(
            actor,
            self._settings.audit_module_for_overrides,
            action,
            old_data=override_snapshot(user_id, before),
            new_data=override_snapshot(user_id, after),
        )
        self._override_store.save(user_id, after)
        logger.info(
            f"Overrides updated for {user_id}: {action} "
            f"({len(before)} -> {len(after)}) audit=#{entry.sequence}"
        )
        return entry

    def toggle_permission(
        self,
        actor: ActorContext,
        user_id: str,
        role_ids: Iterable[str],
        permission_id: str,
    ) -> tuple[Override, ...]:
        """Flip one effective permission for a user. Returns new overrides."""
        require_override_target(permission_id)
        role_ids = tuple(role_ids)

        with self._user_lock(user_id):
            before = tuple(self._override_store.load(user_id))
            roles, _ = PolicyResolver.roles_for(role_ids, self._registry)
            after = PolicyResolver.toggle_single_permission(
                roles, before, permission_id
            )
            self._commit_overrides(
                actor, user_id, ACTION_OVERRIDE_PERMISSION, before, after
            )
        return after

    def toggle_module(
        self,
        actor: ActorContext,
        user_id: str,
        role_ids: Iterable[str],
        module: str,
    ) -> tuple[Override, ...]:
        """Alternate a module between explicit full-deny and full-allow."""
        permission_ids_for_module(module)
        role_ids = tuple(role_ids)

        with self._user_lock(user_id):
            before = tuple(self._override_store.load(user_id))
            roles, _ = PolicyResolver.roles_for(role_ids, self._registry)
            after = PolicyResolver.toggle_module(roles, before, module)
            self._commit_overrides(
                actor, user_id, ACTION_OVERRIDE_MODULE, before, after
            )
        return after

    def clear_overrides(self, actor: ActorContext, user_id: str) -> None:
        """Drop every override so the user falls back to inherited access."""
        with self._user_lock(user_id):
            before = tuple(self._override_store.load(user_id))
            if not before:
                return
            self._commit_overrides(
                actor, user_id, ACTION_RESET_OVERRIDES, before, ()
            )

    # ══════════════════════════════════════════════════════════
    # ROLE ASSIGNMENT
    # ══════════════════════════════════════════════════════════

    def toggle_role_assignment(
        self,
        actor: ActorContext,
        context: UserAccessContext,
        role_id: str,
    ) -> UserAccessContext:
        """
        Assign role_id if missing, revoke it if present.

        Assigning an unregistered role raises UnknownRoleReference;
        revoking a stale reference is always allowed.
        """
        assigning = not context.has_role(role_id)
        if assigning and self._registry.get_role(role_id) is None:
            raise UnknownRoleReference(role_id)

        with self._user_lock(context.user_id):
            updated = context.with_role_toggled(role_id)
            self._recorder.record(
                actor,
                self._settings.audit_module_for_overrides,
                ACTION_ASSIGN_ROLE if assigning else ACTION_REVOKE_ROLE,
                old_data=context.snapshot(),
                new_data=updated.snapshot(),
            )
        return updated

    # ══════════════════════════════════════════════════════════
    # PROTECTED SETTINGS
    # ══════════════════════════════════════════════════════════

    def update_settings(
        self,
        actor: ActorContext,
        changes: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """
        Apply changes to protected configuration. Returns the new values.

        Only the changed keys are snapshotted.
        """
        if self._settings_store is None:
            raise RuntimeError("No settings store configured.")

        with self._settings_lock:
            current = self._settings_store.load()
            updated = apply_setting_changes(
                current, changes, self._settings.protected_setting_keys
            )
            self._recorder.record(
                actor,
                self._settings.audit_module_for_settings,
                ACTION_UPDATE_GLOBAL_CONFIG,
                old_data={k: current[k] for k in changes if k in current},
                new_data={k: updated[k] for k in changes},
            )
            self._settings_store.save(updated)

        logger.info(
            f"Settings updated by {actor.actor_id}: {sorted(changes)}"
        )
        return updated

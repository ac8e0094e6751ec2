"""
accessctl — Exceptions
======================
Structured errors for catalog validation, resolution and audit.

Validation errors are raised BEFORE any state mutation.
UnknownRoleReference and DuplicateOverride are also used as
non-fatal warning values during resolution (never raised there).
"""

from __future__ import annotations


class AccessControlError(Exception):
    """Base error for accessctl operations."""
    pass


class InvalidPermissionId(AccessControlError, ValueError):
    """Permission id is not part of the catalog (or is the wildcard)."""

    def __init__(self, permission_id: object):
        self.permission_id = permission_id
        super().__init__(
            f"Permission id '{permission_id}' is not in the permission catalog."
        )


class InvalidModule(AccessControlError, ValueError):
    """Module id is not part of the catalog."""

    def __init__(self, module: object):
        self.module = module
        super().__init__(f"Module '{module}' is not in the permission catalog.")


class UnknownRoleReference(AccessControlError):
    """A user references a role id the registry does not know."""

    def __init__(self, role_id: str):
        self.role_id = role_id
        super().__init__(
            f"Role '{role_id}' is not registered; ignored during resolution."
        )


class DuplicateOverride(AccessControlError):
    """More than one override for the same (user, permission id)."""

    def __init__(self, permission_id: str):
        self.permission_id = permission_id
        super().__init__(
            f"Duplicate override for permission id '{permission_id}'."
        )


class AuditWriteError(AccessControlError):
    """The audit sink failed to persist an entry. Fatal for the mutation."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(
            f"Audit entry could not be persisted: "
            f"{type(cause).__name__}: {cause}"
        )


class AuditEntryNotFound(AccessControlError, KeyError):
    """Requested audit entry id does not exist in the ledger."""

    def __init__(self, entry_id: object):
        self.entry_id = entry_id
        super().__init__(f"Audit entry '{entry_id}' not found.")

    def __str__(self) -> str:
        return self.args[0]


class UnknownSettingKey(AccessControlError, KeyError):
    """Protected settings update references a key that is not configured."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Setting '{key}' is not a protected setting key.")

    def __str__(self) -> str:
        return self.args[0]

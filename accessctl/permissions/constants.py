"""
accessctl Permissions — Catalog Constants
=========================================
The fixed universe of modules and actions.
Declaration order is significant: it defines catalog order.
"""

from __future__ import annotations

# ══════════════════════════════════════════════════════════════
# MODULES
# ══════════════════════════════════════════════════════════════

MODULE_USERS = "users"
MODULE_ROLES = "roles"
MODULE_PRODUCTS = "products"
MODULE_CATEGORIES = "categories"
MODULE_ORDERS = "orders"
MODULE_CUSTOMERS = "customers"
MODULE_PAYMENTS = "payments"
MODULE_REPORTS = "reports"
MODULE_SETTINGS = "settings"
MODULE_CONTENT = "content"

MODULES = (
    MODULE_USERS,
    MODULE_ROLES,
    MODULE_PRODUCTS,
    MODULE_CATEGORIES,
    MODULE_ORDERS,
    MODULE_CUSTOMERS,
    MODULE_PAYMENTS,
    MODULE_REPORTS,
    MODULE_SETTINGS,
    MODULE_CONTENT,
)

# Audit-only module for login/logout events; never part of a permission id.
MODULE_AUTH = "auth"

# ══════════════════════════════════════════════════════════════
# ACTIONS
# ══════════════════════════════════════════════════════════════

ACTION_VIEW = "view"
ACTION_CREATE = "create"
ACTION_EDIT = "edit"
ACTION_DELETE = "delete"
ACTION_APPROVE = "approve"
ACTION_EXPORT = "export"

ACTIONS = (
    ACTION_VIEW,
    ACTION_CREATE,
    ACTION_EDIT,
    ACTION_DELETE,
    ACTION_APPROVE,
    ACTION_EXPORT,
)

# ══════════════════════════════════════════════════════════════
# WIRE FORMAT
# ══════════════════════════════════════════════════════════════

PERMISSION_SEPARATOR = "."
WILDCARD = "*"

VALID_MODULES = frozenset(MODULES)
VALID_ACTIONS = frozenset(ACTIONS)
AUDIT_MODULES = frozenset(MODULES) | {MODULE_AUTH}

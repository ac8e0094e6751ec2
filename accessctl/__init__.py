"""
accessctl
=========
Policy resolution and audit trail for role-based access control.

Sub-packages:
    permissions  — catalog, roles, overrides
    policy       — effective-permission resolution and toggles
    audit        — append-only ledger and structural diff
    config       — protected settings and engine configuration
    service      — audited mutations over caller-supplied stores
"""

__version__ = "1.0.0"

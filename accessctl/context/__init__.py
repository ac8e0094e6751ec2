"""
accessctl Context - Public API
==============================
"""

from accessctl.context.actor_context import ActorContext
from accessctl.context.user_access import UserAccessContext

__all__ = [
    "ActorContext",
    "UserAccessContext",
]

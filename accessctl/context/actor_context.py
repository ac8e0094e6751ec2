"""
accessctl Context - ActorContext
================================
Immutable, already-authenticated actor identity used for audit attribution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ActorContext:
    """
    Who performed a mutation, as supplied by the session collaborator.

    The core never authenticates; it only attributes.
    """

    actor_id: str
    actor_name: str
    role_at_time: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    def __post_init__(self):
        if not self.actor_id or not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a non-empty string.")

        if not self.actor_name or not isinstance(self.actor_name, str):
            raise ValueError("actor_name must be a non-empty string.")

        if not isinstance(self.role_at_time, str):
            raise ValueError("role_at_time must be a string.")

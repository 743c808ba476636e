"""Enum types mirroring the Postgres columns used by the matching tables."""

from enum import Enum


class ConnectionStatus(str, Enum):
    """Lifecycle status of a connection request."""
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class ConnectionDecision(str, Enum):
    """Terminal statuses a pending request can be moved to."""
    accepted = "accepted"
    rejected = "rejected"


class RoleCategory(str, Enum):
    """Heuristic role classes used for the synergy bonus."""
    tech = "tech"
    biz = "biz"

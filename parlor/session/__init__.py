"""
Session Module - Lifecycle of game sessions on top of an atomic Store.

A session represents one game being played:
- Created by a player, optionally inviting an opponent
- Joined (or started by the host) to begin play
- Mutated one move per atomic Store transaction
- Finished through play or cancelled while waiting

Reads go through projections so hidden words never leave the engine.
"""

from .store import Store, InMemoryStore
from .identity import IdentityResolver, HeaderIdentityResolver, TokenIdentityResolver
from .notifications import (
    NotificationType,
    GameEvent,
    NotificationSink,
    LoggingNotificationSink,
    RecordingSink,
)
from .projection import project
from .manager import SessionManager

__all__ = [
    "Store",
    "InMemoryStore",
    "IdentityResolver",
    "HeaderIdentityResolver",
    "TokenIdentityResolver",
    "NotificationType",
    "GameEvent",
    "NotificationSink",
    "LoggingNotificationSink",
    "RecordingSink",
    "project",
    "SessionManager",
]

"""
Notifications - Events handed to an external delivery service.

The engine never delivers anything. It builds GameEvent values and passes
them to a NotificationSink once the transaction that caused them has
committed.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    GAME_INVITE = "game_invite"
    GAME_STARTED = "game_started"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameEvent:
    notification_type: NotificationType
    recipient_id: str
    session_id: str
    game_type: str
    actor_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


class NotificationSink(ABC):
    @abstractmethod
    def publish(self, event: GameEvent) -> None:
        """Hand one event to the delivery service."""


class LoggingNotificationSink(NotificationSink):
    """Default sink: logs events when no delivery service is wired."""

    def publish(self, event: GameEvent) -> None:
        logger.info(
            f"Notify {event.recipient_id}: {event.notification_type.value} "
            f"for {event.game_type} game {event.session_id}"
        )


class RecordingSink(NotificationSink):
    """Keeps every event in memory."""

    def __init__(self):
        self.events: list[GameEvent] = []

    def publish(self, event: GameEvent) -> None:
        self.events.append(event)

    def of_type(self, notification_type: NotificationType) -> list[GameEvent]:
        return [e for e in self.events if e.notification_type == notification_type]

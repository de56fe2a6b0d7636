from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Literal, Protocol

logger = logging.getLogger(__name__)

Level = Literal["success", "error"]


@dataclass(frozen=True)
class Notification:
    message: str
    level: Level


class NotificationSink(Protocol):
    def notify(self, message: str, level: Level) -> None: ...


class RecordingNotifier:
    """Logs every notification and keeps the most recent ones for display."""

    def __init__(self, max_items: int = 20):
        self._items: deque[Notification] = deque(maxlen=max_items)

    def notify(self, message: str, level: Level) -> None:
        text = message or "Unexpected Error"
        if level == "error":
            logger.warning("wizard_notification level=%s message=%s", level, text)
        else:
            logger.info("wizard_notification level=%s message=%s", level, text)
        self._items.append(Notification(message=text, level=level))

    @property
    def items(self) -> list[Notification]:
        return list(self._items)

    @property
    def last(self) -> Notification | None:
        return self._items[-1] if self._items else None

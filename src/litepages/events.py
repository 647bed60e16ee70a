"""Page-view notifications.

The full-page route announces each successful render on an ``EventBus``.
Side effects such as the view counter subscribe to it, so the route does
not know about them and a failing subscriber never changes the response.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    LITE_VIEWED = "lite_viewed"


@dataclass(frozen=True)
class Event:
    event_type: EventType
    lite_id: int
    slug: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


Subscriber = Callable[[Event], None]


class EventBus:
    """Synchronous fan-out of page events to best-effort subscribers."""

    def __init__(self) -> None:
        self._subscribers: dict[EventType, list[Subscriber]] = defaultdict(list)

    def subscribe(self, event_type: EventType, callback: Subscriber) -> None:
        self._subscribers[event_type].append(callback)

    def publish(self, event: Event) -> int:
        """Deliver ``event`` to every subscriber and return how many of them failed."""
        failures = 0
        for callback in list(self._subscribers.get(event.event_type, ())):
            try:
                callback(event)
            except Exception:
                failures += 1
                logger.exception(
                    "Subscriber %s failed on %s for lite %s",
                    getattr(callback, "__name__", callback),
                    event.event_type.value,
                    event.lite_id,
                )
        return failures

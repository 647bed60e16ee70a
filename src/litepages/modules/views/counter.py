"""Per-lite page view counter."""

from __future__ import annotations

import logging

from sqlalchemy import update

from litepages.database import Database
from litepages.events import Event, EventBus, EventType
from litepages.models.lite import LiteEntry

logger = logging.getLogger(__name__)


class ViewCounter:
    """Bumps ``LiteEntry.views`` with a single atomic UPDATE per page view."""

    def __init__(self, database: Database) -> None:
        self._db = database

    def setup_event_handlers(self, bus: EventBus) -> None:
        """Subscribe to page-view events."""
        bus.subscribe(EventType.LITE_VIEWED, self._on_view)

    def _on_view(self, event: Event) -> None:
        self.increment(event.lite_id)

    def increment(self, lite_id: int) -> None:
        session = self._db.session()
        try:
            session.execute(
                update(LiteEntry)
                .where(LiteEntry.id == lite_id)
                .values(views=LiteEntry.views + 1)
                .execution_options(synchronize_session=False)
            )
            session.commit()
        finally:
            session.close()
        logger.debug("Counted view for lite %s", lite_id)

    def count(self, lite_id: int) -> int:
        session = self._db.session()
        try:
            lite = session.get(LiteEntry, lite_id)
            return lite.views if lite else 0
        finally:
            session.close()

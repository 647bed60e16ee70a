"""Slug registry: maps published slugs to a property/account and display settings."""

from __future__ import annotations

import logging
import random
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from litepages.config import lite_settings
from litepages.database import Database
from litepages.errors import NotFound, SlugTaken
from litepages.models.lite import DEFAULT_ACCENT, DEFAULT_THEME, LiteEntry
from litepages.models.property import Property
from litepages.models.unit import BookableUnit

logger = logging.getLogger(__name__)

_SLUG_INVALID = re.compile(r"[^a-z0-9-]")

# Patch fields that fall back to the stored value when sent as null
COALESCED_FIELDS = (
    "slug",
    "theme",
    "accent_color",
    "active",
    "show_pricing",
    "show_availability",
    "show_reviews",
    "show_qr",
)
# Patch fields where an explicit null clears the stored value
NULLABLE_FIELDS = ("custom_title", "custom_tagline")


def normalize_slug(slug: str) -> str:
    """Lowercase and replace every character outside ``[a-z0-9-]`` with ``-``."""
    return _SLUG_INVALID.sub("-", slug.lower())


@dataclass
class LiteDraft:
    property_id: int
    slug: str
    account_id: int | None = None
    unit_id: int | None = None
    custom_title: str | None = None
    custom_tagline: str | None = None
    theme: str | None = None
    accent_color: str | None = None


class SlugRegistry:
    """Create, look up, patch and delete lite entries."""

    def __init__(self, database: Database) -> None:
        self._db = database

    def resolve(self, slug: str) -> LiteEntry:
        """Return the active entry for a slug, with its property, unit and account loaded."""
        session = self._db.session()
        try:
            lite = session.scalars(
                select(LiteEntry)
                .options(
                    joinedload(LiteEntry.prop),
                    joinedload(LiteEntry.unit),
                    joinedload(LiteEntry.account),
                )
                .where(LiteEntry.slug == slug.lower(), LiteEntry.active.is_(True))
            ).first()
            if lite is None:
                raise NotFound(f"Lite {slug!r}")
            return lite
        finally:
            session.close()

    def check_available(self, slug: str) -> bool:
        session = self._db.session()
        try:
            return self._slug_exists(session, normalize_slug(slug)) is False
        finally:
            session.close()

    def create(self, draft: LiteDraft) -> LiteEntry:
        """Insert a new entry.

        Raises NotFound if the property (or the pinned unit) does not exist,
        and SlugTaken if the normalized slug is already registered.
        """
        slug = normalize_slug(draft.slug)
        cfg = lite_settings()
        session = self._db.session()
        try:
            if session.get(Property, draft.property_id) is None:
                raise NotFound(f"Property {draft.property_id}")
            if draft.unit_id is not None:
                unit = session.get(BookableUnit, draft.unit_id)
                if unit is None or unit.property_id != draft.property_id:
                    raise NotFound(f"Room {draft.unit_id} of property {draft.property_id}")
            if self._slug_exists(session, slug):
                raise SlugTaken(slug)
            lite = LiteEntry(
                property_id=draft.property_id,
                unit_id=draft.unit_id,
                account_id=draft.account_id,
                slug=slug,
                custom_title=draft.custom_title,
                custom_tagline=draft.custom_tagline,
                theme=draft.theme or cfg.get("default_theme", DEFAULT_THEME),
                accent_color=draft.accent_color or cfg.get("default_accent", DEFAULT_ACCENT),
            )
            session.add(lite)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                # Lost a race with another create for the same slug
                if self._slug_exists(session, slug):
                    raise SlugTaken(slug) from exc
                raise
            logger.info("Published lite %s for property %s", slug, draft.property_id)
        finally:
            session.close()
        return lite

    def update(self, lite_id: int, patch: dict[str, Any]) -> LiteEntry:
        """Apply a partial update; keys absent from ``patch`` keep their stored value."""
        session = self._db.session()
        try:
            lite = session.get(LiteEntry, lite_id)
            if lite is None:
                raise NotFound(f"Lite {lite_id}")
            current_slug = lite.slug

            changed = []
            for field_name in COALESCED_FIELDS:
                value = patch.get(field_name)
                if value is None:
                    continue
                if field_name == "slug":
                    value = normalize_slug(value)
                    if value != lite.slug and self._slug_exists(session, value):
                        raise SlugTaken(value)
                setattr(lite, field_name, value)
                changed.append(field_name)
            for field_name in NULLABLE_FIELDS:
                if field_name in patch:
                    setattr(lite, field_name, patch[field_name])
                    changed.append(field_name)

            lite.updated_at = datetime.now(timezone.utc)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                wanted = normalize_slug(patch.get("slug") or current_slug)
                if wanted != current_slug and self._slug_exists(session, wanted):
                    raise SlugTaken(wanted) from exc
                raise
            logger.info("Updated lite %s: %s", lite_id, ", ".join(changed) or "no changes")
        finally:
            session.close()
        return lite

    def remove(self, lite_id: int) -> bool:
        """Delete an entry. Deleting an unknown id is not an error; returns whether a row went."""
        session = self._db.session()
        try:
            result = session.execute(delete(LiteEntry).where(LiteEntry.id == lite_id))
            session.commit()
            deleted = bool(result.rowcount)
        finally:
            session.close()

        if deleted:
            logger.info("Removed lite %s", lite_id)
        return deleted

    def list_by_account(self, account_id: int) -> list[LiteEntry]:
        session = self._db.session()
        try:
            return list(session.scalars(
                select(LiteEntry)
                .options(joinedload(LiteEntry.prop), joinedload(LiteEntry.unit))
                .where(LiteEntry.account_id == account_id)
                .order_by(LiteEntry.id)
            ))
        finally:
            session.close()

    def for_property(self, property_id: int) -> LiteEntry | None:
        """The property's lite: the active one if any, else the most recent."""
        session = self._db.session()
        try:
            return session.scalars(
                select(LiteEntry)
                .where(LiteEntry.property_id == property_id)
                .order_by(LiteEntry.active.desc(), LiteEntry.id.desc())
            ).first()
        finally:
            session.close()

    def for_unit(self, unit_id: int) -> LiteEntry | None:
        session = self._db.session()
        try:
            return session.scalars(
                select(LiteEntry).where(LiteEntry.unit_id == unit_id).order_by(LiteEntry.id)
            ).first()
        finally:
            session.close()

    def get_or_create_for_unit(self, unit_id: int) -> tuple[LiteEntry, bool]:
        """Return the unit's lite, creating one with a random numeric slug if needed."""
        existing = self.for_unit(unit_id)
        if existing is not None:
            return existing, False

        session = self._db.session()
        try:
            unit = session.get(BookableUnit, unit_id, options=[joinedload(BookableUnit.prop)])
            if unit is None:
                raise NotFound(f"Room {unit_id}")
            slug = self._random_slug(session)
            draft = LiteDraft(
                property_id=unit.property_id,
                unit_id=unit.id,
                account_id=unit.prop.account_id,
                slug=slug,
            )
        finally:
            session.close()
        return self.create(draft), True

    def _random_slug(self, session: Session, attempts: int = 10) -> str:
        """Six random digits; falls back to a base-36 timestamp after repeated collisions."""
        for _ in range(attempts):
            candidate = str(random.randint(100000, 999999))
            if not self._slug_exists(session, candidate):
                return candidate
        logger.warning("Random slug collided %d times, using timestamp slug", attempts)
        return _base36(int(time.time() * 1000))

    def _slug_exists(self, session: Session, slug: str) -> bool:
        return session.scalars(select(LiteEntry.id).where(LiteEntry.slug == slug)).first() is not None


def _base36(value: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    out = ""
    while value:
        value, rem = divmod(value, 36)
        out = digits[rem] + out
    return out or "0"

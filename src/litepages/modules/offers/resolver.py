"""Promo-code lookup and discount arithmetic."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from litepages.database import Database
from litepages.models.offer import Offer
from litepages.models.property import Property
from litepages.text import round_half_up

logger = logging.getLogger(__name__)

PERCENTAGE_TYPES = ("percentage", "percent")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how offer windows are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class OfferInfo:
    """Snapshot of an offer handed to the renderer."""

    id: int
    code: str
    name: str | None
    discount_type: str
    discount_value: float | None
    custom_price: float | None
    valid_until: datetime | None
    min_nights: int | None

    @classmethod
    def from_model(cls, offer: Offer) -> OfferInfo:
        return cls(
            id=offer.id,
            code=offer.code,
            name=offer.name,
            discount_type=offer.discount_type or "percentage",
            discount_value=offer.discount_value,
            custom_price=offer.custom_price,
            valid_until=offer.valid_until,
            min_nights=offer.min_nights,
        )


def _in_window(now: datetime):
    return (
        or_(Offer.valid_from.is_(None), Offer.valid_from <= now),
        or_(Offer.valid_until.is_(None), Offer.valid_until >= now),
    )


def _website_offers(property_id: int, account_id: int | None, now: datetime) -> list:
    """Active, website-visible, in-window offers on the property or anywhere in its account."""
    scope = [Offer.property_id == property_id]
    if account_id is not None:
        scope.append(Offer.account_id == account_id)
        scope.append(Offer.property_id.in_(
            select(Property.id).where(Property.account_id == account_id)
        ))
    return [
        Offer.active.is_(True),
        or_(Offer.available_website.is_(None), Offer.available_website.is_(True)),
        or_(*scope),
        *_in_window(now),
    ]


class OfferResolver:
    """Resolves request promo codes to currently valid offers."""

    def __init__(self, database: Database) -> None:
        self._db = database

    def resolve(self, code: str | None, now: datetime | None = None) -> Offer | None:
        if not code or not code.strip():
            return None
        session = self._db.session()
        try:
            return self.resolve_in(session, code, now)
        finally:
            session.close()

    def resolve_in(self, session: Session, code: str | None, now: datetime | None = None) -> Offer | None:
        """Same as ``resolve`` but inside a caller-owned session."""
        if not code or not code.strip():
            return None
        now = now or utcnow()
        matches = list(session.scalars(
            select(Offer)
            .where(Offer.code == code.strip().upper(), Offer.active.is_(True), *_in_window(now))
            .order_by(Offer.id)
        ))
        if len(matches) > 1:
            logger.warning(
                "%d active offers share code %s; using offer %s",
                len(matches), code.upper(), matches[0].id,
            )
        return matches[0] if matches else None

    def has_active_offers(
        self,
        session: Session,
        property_id: int,
        account_id: int | None,
        now: datetime | None = None,
    ) -> bool:
        """Whether any website-visible offer currently applies to the property or its account."""
        now = now or utcnow()
        found = session.scalars(
            select(Offer.id)
            .where(*_website_offers(property_id, account_id, now))
            .limit(1)
        ).first()
        return found is not None

    def eligible(
        self,
        property_id: int,
        account_id: int | None = None,
        unit_id: int | None = None,
        checkin: date | None = None,
        checkout: date | None = None,
        today: date | None = None,
        now: datetime | None = None,
    ) -> list[Offer]:
        """Website offers for a property, highest priority first.

        With both stay dates given, offers whose night, lead-time or
        weekday rules exclude the stay are dropped.
        """
        now = now or utcnow()
        session = self._db.session()
        try:
            if account_id is None:
                account_id = session.scalar(select(Property.account_id).where(Property.id == property_id))
            query = (
                select(Offer)
                .where(*_website_offers(property_id, account_id, now))
                .order_by(Offer.priority.desc(), Offer.discount_value.desc(), Offer.id)
            )
            if unit_id is not None:
                query = query.where(or_(Offer.unit_id.is_(None), Offer.unit_id == unit_id))
            offers = list(session.scalars(query))
        finally:
            session.close()

        if checkin is None or checkout is None:
            return offers
        today = today or now.date()
        return [offer for offer in offers if stay_qualifies(offer, checkin, checkout, today)]


def weekday_number(day: date) -> int:
    """Weekday numbered 0 = Sunday ... 6 = Saturday, as offer rules store it."""
    return (day.weekday() + 1) % 7


def _weekdays(value: str | None) -> set[int] | None:
    if not value or not value.strip():
        return None
    return {int(part) for part in value.split(",") if part.strip().isdigit()}


def stay_qualifies(offer: Offer, checkin: date, checkout: date, today: date) -> bool:
    """Whether a stay meets the offer's length, lead-time and weekday rules. Unset or zero rules pass."""
    nights = (checkout - checkin).days
    lead_days = (checkin - today).days
    if offer.min_nights and nights < offer.min_nights:
        return False
    if offer.max_nights and nights > offer.max_nights:
        return False
    if offer.min_advance_days and lead_days < offer.min_advance_days:
        return False
    if offer.max_advance_days and lead_days > offer.max_advance_days:
        return False
    checkin_days = _weekdays(offer.allowed_checkin_days)
    if checkin_days is not None and weekday_number(checkin) not in checkin_days:
        return False
    checkout_days = _weekdays(offer.allowed_checkout_days)
    if checkout_days is not None and weekday_number(checkout) not in checkout_days:
        return False
    return True


def apply_discount(price: float | None, offer: OfferInfo | None) -> float | None:
    """Price after the offer's discount; unchanged when nothing applies."""
    if offer is None:
        return price
    if offer.discount_type == "custom" and offer.custom_price is not None:
        return offer.custom_price
    if price is None or offer.discount_value is None:
        return price
    if offer.discount_type in PERCENTAGE_TYPES:
        return round_half_up(price * (1 - offer.discount_value / 100))
    if offer.discount_type == "fixed":
        return max(0.0, price - offer.discount_value)
    return price


def discount_label(offer: OfferInfo, symbol: str = "$") -> str:
    value = offer.discount_value
    if offer.discount_type in PERCENTAGE_TYPES and value is not None:
        return f"{_trim(value)}% OFF"
    if offer.discount_type == "fixed" and value is not None:
        return f"{symbol}{_trim(value)} OFF"
    return "SPECIAL PRICE"


def _trim(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"

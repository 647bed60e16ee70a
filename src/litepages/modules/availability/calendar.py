"""Unit availability reads, display-price precedence and stay quotes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from litepages.database import Database
from litepages.errors import QuoteError
from litepages.models.availability import AvailabilityEntry
from litepages.models.unit import BookableUnit
from litepages.modules.availability.taxes import TaxBreakdown, stay_taxes

logger = logging.getLogger(__name__)


def display_price(entry: AvailabilityEntry | None) -> float | None:
    """Direct price, else standard (rack) price, else channel-manager price."""
    if entry is None:
        return None
    for price in (entry.direct_price, entry.standard_price, entry.cm_price):
        if price is not None:
            return price
    return None


@dataclass
class NightlyRate:
    date: date
    price: float


@dataclass
class StayQuote:
    unit_id: int
    checkin: date
    checkout: date
    nights: int
    nightly_rates: list[NightlyRate] = field(default_factory=list)
    nightly_total: float = 0.0
    cleaning_fee: float = 0.0
    taxes: TaxBreakdown = field(default_factory=TaxBreakdown)

    @property
    def subtotal(self) -> float:
        return round(self.nightly_total + self.cleaning_fee, 2)

    @property
    def avg_per_night(self) -> float:
        return round(self.nightly_total / self.nights, 2) if self.nights else 0.0

    @property
    def total(self) -> float:
        """Subtotal plus taxes, before any offer."""
        return round(self.subtotal + self.taxes.total, 2)

    def to_dict(self) -> dict:
        return {
            "nights": self.nights,
            "nightlyRates": [{"date": r.date.isoformat(), "price": r.price} for r in self.nightly_rates],
            "nightlyTotal": round(self.nightly_total, 2),
            "cleaningFee": self.cleaning_fee,
            "subtotal": self.subtotal,
            "avgPerNight": self.avg_per_night,
            **self.taxes.to_dict(),
            "total": self.total,
        }


class AvailabilityCalendar:
    """Reads the per-date availability table for a unit."""

    def __init__(self, database: Database) -> None:
        self._db = database

    def price_for(self, session: Session, unit_id: int, day: date) -> AvailabilityEntry | None:
        return session.scalars(
            select(AvailabilityEntry).where(
                AvailabilityEntry.unit_id == unit_id,
                AvailabilityEntry.day == day,
            )
        ).first()

    def entries(self, session: Session, unit_id: int, start: date, end: date) -> list[AvailabilityEntry]:
        """Rows with ``start <= date <= end``, ordered by date."""
        return list(session.scalars(
            select(AvailabilityEntry)
            .where(
                AvailabilityEntry.unit_id == unit_id,
                AvailabilityEntry.day >= start,
                AvailabilityEntry.day <= end,
            )
            .order_by(AvailabilityEntry.day)
        ))

    def date_range(self, unit_id: int, start: date, end: date) -> list[dict]:
        session = self._db.session()
        try:
            return [
                {
                    "date": entry.day.isoformat(),
                    "is_available": bool(entry.is_available),
                    "is_blocked": bool(entry.is_blocked),
                    "price": display_price(entry),
                    "min_stay": entry.min_stay,
                }
                for entry in self.entries(session, unit_id, start, end)
            ]
        finally:
            session.close()

    def quote(
        self,
        unit_id: int,
        checkin: date,
        checkout: date,
        adults: int = 1,
        children: int = 0,
    ) -> StayQuote:
        """Price a stay of the nights in ``[checkin, checkout)``.

        Nights without an availability row are priced at the unit's base
        price and treated as open.
        """
        if checkout <= checkin:
            raise QuoteError("Check-out must be after check-in")

        session = self._db.session()
        try:
            unit = session.get(BookableUnit, unit_id)
            if unit is None:
                raise QuoteError("Room not found")
            if unit.max_guests and adults + children > unit.max_guests:
                raise QuoteError(f"Maximum {unit.max_guests} guests")

            rows = {e.day: e for e in self.entries(session, unit_id, checkin, checkout - timedelta(days=1))}
            quote = StayQuote(
                unit_id=unit_id,
                checkin=checkin,
                checkout=checkout,
                nights=(checkout - checkin).days,
                cleaning_fee=unit.cleaning_fee or 0.0,
            )

            day = checkin
            while day < checkout:
                entry = rows.get(day)
                if entry is not None and not entry.bookable:
                    raise QuoteError("Some dates are not available")
                price = display_price(entry)
                if price is None:
                    price = unit.base_price
                if price is None:
                    raise QuoteError(f"No rate for {day.isoformat()}")
                quote.nightly_rates.append(NightlyRate(date=day, price=price))
                quote.nightly_total += price
                day += timedelta(days=1)

            first = rows.get(checkin)
            min_stay = (first.min_stay if first else None) or 1
            if quote.nights < min_stay:
                raise QuoteError(f"Minimum stay is {min_stay} nights")

            quote.taxes = stay_taxes(session, unit_id, quote.nights, adults + children, quote.subtotal)

            logger.debug("Quoted unit %s %s..%s: %.2f", unit_id, checkin, checkout, quote.subtotal)
            return quote
        finally:
            session.close()

    def taxes(self, unit_id: int, nights: int = 1, guests: int = 1, subtotal: float = 0.0) -> TaxBreakdown:
        """Tax breakdown for a stay shape without pricing the individual nights."""
        session = self._db.session()
        try:
            return stay_taxes(session, unit_id, nights, guests, subtotal)
        finally:
            session.close()

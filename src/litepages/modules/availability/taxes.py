"""Stay taxes: per-property tax rows, falling back to the property's tourist tax."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from litepages.models.property import Property
from litepages.models.tax import Tax
from litepages.models.unit import BookableUnit

logger = logging.getLogger(__name__)

PER_NIGHT = "per_night"
PER_GUEST_PER_NIGHT = ("per_guest_per_night", "per_person_per_night")
PERCENTAGE = "percentage"
FLAT = ("per_booking", "fixed")
TOURIST_TAX = "tourist_tax"


@dataclass(frozen=True)
class TaxLine:
    name: str
    amount: float
    kind: str

    def to_dict(self) -> dict:
        return {"name": self.name, "amount": round(self.amount, 2), "type": self.kind}


@dataclass
class TaxBreakdown:
    lines: list[TaxLine] = field(default_factory=list)

    @property
    def total(self) -> float:
        return round(sum(line.amount for line in self.lines), 2)

    def to_dict(self) -> dict:
        return {"taxes": [line.to_dict() for line in self.lines], "taxTotal": self.total}


def tax_charge(
    kind: str | None,
    rate: float,
    nights: int,
    guests: int,
    subtotal: float,
    max_nights: int | None = None,
) -> float:
    """Amount one tax adds to a stay.

    Percentages apply to ``subtotal``; nightly kinds count at most
    ``max_nights`` nights; anything else is a flat charge per booking.
    """
    taxable_nights = min(nights, max_nights) if max_nights else nights
    if kind == PERCENTAGE:
        return subtotal * rate / 100
    if kind == PER_NIGHT:
        return rate * taxable_nights
    if kind in PER_GUEST_PER_NIGHT:
        return rate * taxable_nights * guests
    return rate


def stay_taxes(
    session: Session,
    unit_id: int,
    nights: int,
    guests: int,
    subtotal: float,
) -> TaxBreakdown:
    """Taxes for a stay in ``unit_id``. An unknown unit has no taxes."""
    unit = session.get(BookableUnit, unit_id)
    if unit is None:
        return TaxBreakdown()

    breakdown = TaxBreakdown()
    rows = list(session.scalars(
        select(Tax)
        .where(
            Tax.active.is_(True),
            Tax.property_id == unit.property_id,
            or_(Tax.unit_id.is_(None), Tax.unit_id == unit_id),
        )
        .order_by(Tax.id)
    ))
    if rows:
        for tax in rows:
            amount = tax_charge(tax.amount_type, tax.amount or 0.0, nights, guests, subtotal, tax.max_nights)
            if amount > 0:
                breakdown.lines.append(TaxLine(name=tax.name, amount=amount, kind=tax.amount_type or "fixed"))
        return breakdown

    prop = session.get(Property, unit.property_id)
    if prop is not None and prop.tourist_tax_enabled and prop.tourist_tax_amount:
        kind = prop.tourist_tax_type
        if kind not in (PERCENTAGE, PER_NIGHT, *PER_GUEST_PER_NIGHT, *FLAT):
            kind = PER_GUEST_PER_NIGHT[0]
        amount = tax_charge(
            kind,
            prop.tourist_tax_amount,
            nights,
            guests,
            subtotal,
            prop.tourist_tax_max_nights,
        )
        if amount > 0:
            breakdown.lines.append(TaxLine(
                name=prop.tourist_tax_name or "Tourist Tax",
                amount=amount,
                kind=TOURIST_TAX,
            ))
    logger.debug("Unit %s: %d tax line(s), total %.2f", unit_id, len(breakdown.lines), breakdown.total)
    return breakdown

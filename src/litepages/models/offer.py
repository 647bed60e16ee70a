"""Promotional offer model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from litepages.database import Base


class Offer(Base):
    __tablename__ = "offers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)  # Stored uppercase
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    valid_from: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)  # Naive UTC
    valid_until: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    discount_type: Mapped[str] = mapped_column(String(20), default="percentage")  # percentage, fixed, custom
    discount_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    custom_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    min_nights: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_nights: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_advance_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_advance_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Comma-separated weekday numbers, 0 = Sunday ... 6 = Saturday
    allowed_checkin_days: Mapped[str | None] = mapped_column(String(20), nullable=True)
    allowed_checkout_days: Mapped[str | None] = mapped_column(String(20), nullable=True)
    priority: Mapped[int] = mapped_column(Integer, default=0)
    property_id: Mapped[int | None] = mapped_column(ForeignKey("properties.id"), nullable=True)
    account_id: Mapped[int | None] = mapped_column(ForeignKey("accounts.id"), nullable=True)
    unit_id: Mapped[int | None] = mapped_column(ForeignKey("bookable_units.id"), nullable=True)
    available_website: Mapped[bool | None] = mapped_column(Boolean, default=True)

    def __repr__(self) -> str:
        return f"<Offer id={self.id} code={self.code!r} active={self.active}>"

    def to_dict(self) -> dict:
        """Public fields for the booking sidebar; the promo code is not exposed."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "discount_type": self.discount_type,
            "discount_value": self.discount_value,
            "valid_from": self.valid_from.isoformat() if self.valid_from else None,
            "valid_until": self.valid_until.isoformat() if self.valid_until else None,
            "min_nights": self.min_nights,
            "max_nights": self.max_nights,
            "min_advance_days": self.min_advance_days,
            "max_advance_days": self.max_advance_days,
            "allowed_checkin_days": self.allowed_checkin_days,
            "allowed_checkout_days": self.allowed_checkout_days,
            "property_id": self.property_id,
            "room_id": self.unit_id,
        }

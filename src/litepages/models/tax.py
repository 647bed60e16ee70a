"""Stay tax model."""

from __future__ import annotations

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from litepages.database import Base


class Tax(Base):
    __tablename__ = "taxes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    unit_id: Mapped[int | None] = mapped_column(ForeignKey("bookable_units.id", ondelete="CASCADE"), nullable=True)  # None = every unit
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[float] = mapped_column(Float, default=0.0)  # Percent for "percentage", money otherwise
    # percentage, per_night, per_guest_per_night, per_booking, fixed
    amount_type: Mapped[str] = mapped_column(String(30), default="fixed")
    max_nights: Mapped[int | None] = mapped_column(Integer, nullable=True)  # Cap on taxable nights
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self) -> str:
        return f"<Tax id={self.id} name={self.name!r} {self.amount_type}={self.amount}>"

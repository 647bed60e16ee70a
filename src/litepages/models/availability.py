"""Per-unit, per-date availability and pricing."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Boolean, Date, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from litepages.database import Base


class AvailabilityEntry(Base):
    __tablename__ = "room_availability"
    __table_args__ = (UniqueConstraint("unit_id", "date", name="uq_room_availability_unit_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    unit_id: Mapped[int] = mapped_column(ForeignKey("bookable_units.id", ondelete="CASCADE"), nullable=False)
    day: Mapped[date] = mapped_column("date", Date, nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    is_blocked: Mapped[bool] = mapped_column(Boolean, default=False)
    cm_price: Mapped[float | None] = mapped_column(Float, nullable=True)  # Channel manager
    direct_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    standard_price: Mapped[float | None] = mapped_column(Float, nullable=True)  # Rack rate
    min_stay: Mapped[int | None] = mapped_column(Integer, nullable=True)

    unit: Mapped["BookableUnit"] = relationship(back_populates="availability")  # noqa: F821

    def __repr__(self) -> str:
        return f"<AvailabilityEntry unit_id={self.unit_id} date={self.day}>"

    @property
    def bookable(self) -> bool:
        return bool(self.is_available) and not self.is_blocked

"""Bookable unit models: the rentable room/apartment, its images and amenities."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from litepages.database import Base


class BookableUnit(Base):
    __tablename__ = "bookable_units"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)  # Plain text or {"en": ...} JSON
    short_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    full_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    unit_type: Mapped[str | None] = mapped_column(String(50), nullable=True)  # apartment, suite, villa, ...
    num_bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    num_bathrooms: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_guests: Mapped[int | None] = mapped_column(Integer, nullable=True)
    base_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    cleaning_fee: Mapped[float] = mapped_column(Float, default=0.0)
    hidden: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))

    prop: Mapped["Property"] = relationship(back_populates="units")  # noqa: F821
    images: Mapped[list["UnitImage"]] = relationship(back_populates="unit")
    availability: Mapped[list["AvailabilityEntry"]] = relationship(back_populates="unit")  # noqa: F821

    def __repr__(self) -> str:
        return f"<BookableUnit id={self.id} property_id={self.property_id} name={self.name!r}>"


class UnitImage(Base):
    __tablename__ = "unit_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    unit_id: Mapped[int] = mapped_column(ForeignKey("bookable_units.id", ondelete="CASCADE"), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    caption: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    unit: Mapped["BookableUnit"] = relationship(back_populates="images")

    def __repr__(self) -> str:
        return f"<UnitImage id={self.id} unit_id={self.unit_id} primary={self.is_primary}>"


class UnitAmenity(Base):
    __tablename__ = "unit_amenities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    unit_id: Mapped[int] = mapped_column(ForeignKey("bookable_units.id", ondelete="CASCADE"), nullable=False)
    amenity_id: Mapped[int] = mapped_column(ForeignKey("amenities.id", ondelete="CASCADE"), nullable=False)

    amenity: Mapped["Amenity"] = relationship()  # noqa: F821

    def __repr__(self) -> str:
        return f"<UnitAmenity unit_id={self.unit_id} amenity_id={self.amenity_id}>"

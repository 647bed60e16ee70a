"""Property, property image and amenity catalogue models."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from litepages.database import Base


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int | None] = mapped_column(ForeignKey("accounts.id"), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    short_description: Mapped[str | None] = mapped_column(Text, nullable=True)  # Plain text or {"en": ...} JSON
    full_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    check_in_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    check_out_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    house_rules: Mapped[str | None] = mapped_column(Text, nullable=True)  # Host-authored HTML
    cancellation_policy: Mapped[str | None] = mapped_column(Text, nullable=True)
    average_rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    pets_allowed: Mapped[bool] = mapped_column(Boolean, default=False)
    children_allowed: Mapped[bool] = mapped_column(Boolean, default=True)
    smoking_allowed: Mapped[bool] = mapped_column(Boolean, default=False)
    events_allowed: Mapped[bool] = mapped_column(Boolean, default=False)
    # Property-level tourist tax, used only when the property has no rows in the taxes table
    tourist_tax_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    tourist_tax_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tourist_tax_type: Mapped[str | None] = mapped_column(String(30), nullable=True)  # Same kinds as Tax.amount_type
    tourist_tax_amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    tourist_tax_max_nights: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))

    account: Mapped["Account | None"] = relationship(back_populates="properties")  # noqa: F821
    units: Mapped[list["BookableUnit"]] = relationship(back_populates="prop")  # noqa: F821
    images: Mapped[list["PropertyImage"]] = relationship(back_populates="prop")
    reviews: Mapped[list["Review"]] = relationship(back_populates="prop")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Property id={self.id} name={self.name!r}>"


class PropertyImage(Base):
    __tablename__ = "property_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    caption: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    prop: Mapped["Property"] = relationship(back_populates="images")

    def __repr__(self) -> str:
        return f"<PropertyImage id={self.id} property_id={self.property_id} primary={self.is_primary}>"


class Amenity(Base):
    __tablename__ = "amenities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)  # Plain text or {"en": ...} JSON
    icon: Mapped[str | None] = mapped_column(String(50), nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Amenity id={self.id} name={self.name!r} category={self.category!r}>"

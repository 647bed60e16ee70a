"""Lite page registry model."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from litepages.database import Base

DEFAULT_THEME = "default"
DEFAULT_ACCENT = "#3b82f6"


class LiteEntry(Base):
    __tablename__ = "lite_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    unit_id: Mapped[int | None] = mapped_column(ForeignKey("bookable_units.id", ondelete="CASCADE"), nullable=True)
    account_id: Mapped[int | None] = mapped_column(ForeignKey("accounts.id"), nullable=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    custom_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    custom_tagline: Mapped[str | None] = mapped_column(String(500), nullable=True)
    theme: Mapped[str] = mapped_column(String(50), default=DEFAULT_THEME)
    accent_color: Mapped[str] = mapped_column(String(7), default=DEFAULT_ACCENT)
    show_pricing: Mapped[bool] = mapped_column(Boolean, default=True)
    show_availability: Mapped[bool] = mapped_column(Boolean, default=True)
    show_reviews: Mapped[bool] = mapped_column(Boolean, default=True)
    show_qr: Mapped[bool] = mapped_column(Boolean, default=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    views: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))  # Set by registry edits only

    prop: Mapped["Property"] = relationship()  # noqa: F821
    unit: Mapped["BookableUnit | None"] = relationship()  # noqa: F821
    account: Mapped["Account | None"] = relationship()  # noqa: F821

    def __repr__(self) -> str:
        return f"<LiteEntry id={self.id} slug={self.slug!r} active={self.active}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "property_id": self.property_id,
            "room_id": self.unit_id,
            "account_id": self.account_id,
            "slug": self.slug,
            "custom_title": self.custom_title,
            "custom_tagline": self.custom_tagline,
            "theme": self.theme,
            "accent_color": self.accent_color,
            "show_pricing": self.show_pricing,
            "show_availability": self.show_availability,
            "show_reviews": self.show_reviews,
            "show_qr": self.show_qr,
            "active": self.active,
            "views": self.views,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

"""Account model (owned by the wider platform, read here for display)."""

from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from litepages.database import Base


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    business_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    properties: Mapped[list["Property"]] = relationship(back_populates="account")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Account id={self.id} name={self.name!r}>"

    @property
    def display_name(self) -> str:
        return self.business_name or self.name

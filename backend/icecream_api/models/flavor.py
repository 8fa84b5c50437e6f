"""
Acme Ice Cream API: Flavor SQLAlchemy Model
============================================

What:  ORM model representing the `flavors` table.
How:   Inherits from the declarative Base; the startup routine creates the
       table from this model's metadata.
Who:   Used by FlavorService for CRUD statements and by the seed routine.

Table:
    id          SERIAL PRIMARY KEY (INTEGER PRIMARY KEY on SQLite)
    name        VARCHAR(100) NOT NULL, not unique
    updated_at  TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP

`updated_at` is only set by the server default at insert time. Nothing
refreshes it on update; there is deliberately no `onupdate` here.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from icecream_api.database import Base


class Flavor(Base):
    """An ice-cream flavor: server-assigned id, a name and a timestamp."""

    __tablename__ = "flavors"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Flavor(id={self.id}, name='{self.name}')>"

"""SQLAlchemy ORM models for job persistence.

One row per job. The full job document is kept as JSON text in ``data``;
``status`` and ``created_at`` are copied out so the table can be inspected
and ordered without decoding every document.

Table names are prefixed with ``tg_`` to avoid collisions in shared databases.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class JobRow(Base):
    """Row model for ``tg_jobs``."""

    __tablename__ = "tg_jobs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, index=True)
    status: Mapped[str] = mapped_column(String(32), index=True)
    data: Mapped[str] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional, List

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Float, DateTime

from tenders_map.db.base import Base

DEFAULT_STATUS = "planowany"


class Point(Base):
    __tablename__ = "points"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    director: Mapped[Optional[str]] = mapped_column(Text)
    winner: Mapped[Optional[str]] = mapped_column(Text)
    note: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(32), default=DEFAULT_STATUS, nullable=False)

    # geometry is fixed once the point is placed
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lng: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True
    )

    photos: Mapped[List["Photo"]] = relationship(
        back_populates="point",
        cascade="all, delete-orphan",
        order_by="Photo.id.desc()",
    )

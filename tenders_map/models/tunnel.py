from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import JSON, String, Text, DateTime
from sqlalchemy.dialects.postgresql import JSONB

from tenders_map.db.base import Base
from tenders_map.models.point import DEFAULT_STATUS


class Tunnel(Base):
    __tablename__ = "tunnels"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    director: Mapped[Optional[str]] = mapped_column(Text)
    winner: Mapped[Optional[str]] = mapped_column(Text)
    note: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(32), default=DEFAULT_STATUS, nullable=False)

    # ordered [{"lat": .., "lng": ..}, ...]; replaced as a whole on edit
    path: Mapped[list] = mapped_column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True
    )

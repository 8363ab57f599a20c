from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, Float, Text, Uuid, func
from scavenger.db import Base, UTCDateTime, utcnow

class Task(Base):
    __tablename__ = "tasks"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text(), nullable=False)  # riddle text
    location_hint: Mapped[str] = mapped_column(Text(), nullable=False)  # general area, always shown
    detailed_hint: Mapped[str] = mapped_column(Text(), nullable=False, default="")  # time-gated
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    order: Mapped[int] = mapped_column("display_order", Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Map coordinates (time-gated for teams)
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    map_label: Mapped[str] = mapped_column(String(80), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, server_default=func.now(), nullable=False)

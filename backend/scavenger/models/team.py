from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean, Uuid, func
from scavenger.db import Base, JSONType, UTCDateTime, utcnow

class Team(Base):
    __tablename__ = "teams"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(40), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="team")  # team|admin
    avatar_color: Mapped[str] = mapped_column(String(16), nullable=False, default="#00f0ff")
    # Snapshot of task ids (as strings) in the order this team should play them
    task_queue: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    # Teams can change name/password once
    profile_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, server_default=func.now(), nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

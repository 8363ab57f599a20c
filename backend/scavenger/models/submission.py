from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Integer, BigInteger, ForeignKey, UniqueConstraint, Uuid, func
from scavenger.db import Base, UTCDateTime, utcnow


class Submission(Base):
    """
    One attempt of a team at a task.

    Lifecycle:
      in-progress  -> completed   (photo upload; elapsed_ms frozen)
      completed   <-> blocked     (admin moderation)
      completed/blocked -> in-progress (admin deletes the photo; riddle_opened_at kept)
    """
    __tablename__ = "submissions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    team_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("teams.id", ondelete="CASCADE"), index=True, nullable=False
    )
    task_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), index=True, nullable=False
    )

    # Timer (server-authoritative)
    riddle_opened_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)  # written once
    photo_submitted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    elapsed_ms: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    # Photo
    photo_key: Mapped[str | None] = mapped_column(Text(), nullable=True)
    photo_mime: Mapped[str | None] = mapped_column(String(64), nullable=True)
    photo_phash: Mapped[str | None] = mapped_column(String(32), nullable=True)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default="in-progress")  # in-progress|completed|blocked

    # Admin moderation
    blocked_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    blocked_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    block_reason: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # Admin photo scoring (None = not scored yet)
    photo_points: Mapped[int | None] = mapped_column(Integer, nullable=True)
    scored_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    scored_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("team_id", "task_id", name="uq_submission_team_task"),
    )

from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, Float, CheckConstraint, func
from scavenger.db import Base, UTCDateTime, utcnow

SINGLETON_ID = 1

class GameConfig(Base):
    """
    Admin-editable game settings. Exactly one row (id=1), created lazily with these defaults.
    """
    __tablename__ = "game_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SINGLETON_ID)

    # Points & scoring
    default_task_points: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    time_bonus_threshold_sec: Mapped[int] = mapped_column(Integer, nullable=False, default=120)
    time_bonus_points: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    hint_penalty_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # fastest|most-tasks
    leaderboard_mode: Mapped[str] = mapped_column(String(16), nullable=False, default="most-tasks")

    # Game state
    game_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    game_title: Mapped[str] = mapped_column(String(120), nullable=False, default="Scavenger Hunt")
    game_subtitle: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    allow_registration: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Map
    map_center_lat: Mapped[float] = mapped_column(Float, nullable=False, default=52.2297)
    map_center_lng: Mapped[float] = mapped_column(Float, nullable=False, default=21.0122)
    map_zoom: Mapped[int] = mapped_column(Integer, nullable=False, default=17)
    boundary_radius_meters: Mapped[int] = mapped_column(Integer, nullable=False, default=500)

    # Task queue
    shuffle_task_order: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Timed reveals, counted from riddle_opened_at
    hint_reveal_delay_sec: Mapped[int] = mapped_column(Integer, nullable=False, default=180)
    location_reveal_delay_sec: Mapped[int] = mapped_column(Integer, nullable=False, default=360)

    # Game end (None / 0 = no limit)
    game_end_time: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    game_duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(f"id = {SINGLETON_ID}", name="ck_game_config_singleton"),
    )

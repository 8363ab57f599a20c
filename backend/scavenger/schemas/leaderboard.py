from __future__ import annotations
from uuid import UUID
from scavenger.schemas.base import CamelModel


class LeaderboardRow(CamelModel):
    rank: int
    team_id: UUID
    team_name: str
    avatar_color: str
    completed_tasks: int
    task_base_points: int
    photo_points: int
    total_points: int
    total_elapsed_ms: int

from __future__ import annotations
import uuid
from dataclasses import dataclass
from typing import Iterable, Mapping
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.models.submission import Submission
from scavenger.models.task import Task
from scavenger.models.team import Team
from scavenger.schemas.leaderboard import LeaderboardRow
from scavenger.services.game_config import get_config

SCORED_STATUSES = ("completed", "blocked")
DEFAULT_AVATAR = "#00f0ff"


@dataclass
class _Tally:
    completed_tasks: int = 0
    task_base_points: int = 0
    photo_points: int = 0
    total_elapsed_ms: int = 0

    @property
    def total_points(self) -> int:
        return self.task_base_points + self.photo_points


def _sort_key(mode: str):
    # Final tie-break on team id keeps the order stable between runs
    if mode == "fastest":
        return lambda item: (item[1].total_elapsed_ms, -item[1].total_points, str(item[0]))
    return lambda item: (-item[1].total_points, item[1].total_elapsed_ms, str(item[0]))


def compute_leaderboard(
    attempts: Iterable,
    task_points: Mapping[uuid.UUID, int],
    teams: Mapping[uuid.UUID, Team],
    mode: str = "most-tasks",
) -> list[LeaderboardRow]:
    """
    Rank teams from their completed and blocked attempts.

    - completed attempts count as done, earn the task's current base points and add
      their elapsed time
    - blocked attempts earn nothing but their photo points (normally 0, set by the block;
      a later admin score still counts)
    - teams with nothing completed or blocked, admins and unknown teams are left out

    mode "most-tasks": total points desc, then total elapsed asc.
    mode "fastest": shortest total elapsed first, then points desc.
    """
    tallies: dict[uuid.UUID, _Tally] = {}
    for a in attempts:
        if a.status not in SCORED_STATUSES:
            continue
        t = tallies.setdefault(a.team_id, _Tally())
        t.photo_points += int(a.photo_points or 0)
        if a.status == "completed":
            t.completed_tasks += 1
            t.task_base_points += int(task_points.get(a.task_id, 0))
            t.total_elapsed_ms += int(a.elapsed_ms or 0)

    ranked = sorted(
        ((tid, tally) for tid, tally in tallies.items() if tid in teams and teams[tid].role != "admin"),
        key=_sort_key(mode),
    )
    return [
        LeaderboardRow(
            rank=i + 1,
            team_id=tid,
            team_name=teams[tid].name,
            avatar_color=teams[tid].avatar_color or DEFAULT_AVATAR,
            completed_tasks=tally.completed_tasks,
            task_base_points=tally.task_base_points,
            photo_points=tally.photo_points,
            total_points=tally.total_points,
            total_elapsed_ms=tally.total_elapsed_ms,
        )
        for i, (tid, tally) in enumerate(ranked)
    ]


async def leaderboard(session: AsyncSession) -> list[LeaderboardRow]:
    config = await get_config(session)
    attempts = (await session.execute(
        select(Submission).where(Submission.status.in_(SCORED_STATUSES))
    )).scalars().all()
    # Fresh points snapshot; attempts never cache task points
    task_points = {tid: pts for (tid, pts) in (await session.execute(select(Task.id, Task.points))).all()}
    team_ids = {a.team_id for a in attempts}
    teams = {}
    if team_ids:
        teams = {t.id: t for t in (await session.execute(select(Team).where(Team.id.in_(team_ids)))).scalars().all()}
    return compute_leaderboard(attempts, task_points, teams, config.leaderboard_mode)

from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.auth_deps import get_current_team
from scavenger.db import get_session
from scavenger.errors import NotFound
from scavenger.models.team import Team
from scavenger.schemas.submission import SubmissionPublic, TaskWithSubmission
from scavenger.schemas.task import TaskSummary
from scavenger.services.attempts import get_attempt, start_attempt
from scavenger.services.catalog import task_or_404, tasks_for_team
from scavenger.services.clock import Clock, get_clock
from scavenger.services.game_config import get_config
from scavenger.services.moderation import submission_fields
from scavenger.services.reveal import visible_task

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.get("", response_model=list[TaskSummary])
async def list_tasks(session: AsyncSession = Depends(get_session), team: Team = Depends(get_current_team)):
    return await tasks_for_team(session, team)

@router.get("/{task_id}", response_model=TaskWithSubmission)
async def get_task(
    task_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    team: Team = Depends(get_current_team),
    clock: Clock = Depends(get_clock),
):
    """Read-only view; opening the riddle (and starting the timer) is POST /tasks/{id}/start."""
    task = await task_or_404(session, task_id)
    attempt = await get_attempt(session, team.id, task.id)
    if attempt is None and not task.is_active and not team.is_admin:
        # Inactive tasks stay visible only to teams that already opened them
        raise NotFound("Task not found")
    config = await get_config(session)
    return TaskWithSubmission(
        task=visible_task(task, attempt, config, clock.now(), as_admin=team.is_admin),
        submission=SubmissionPublic(**submission_fields(attempt)) if attempt else None,
    )

@router.post("/{task_id}/start", response_model=TaskWithSubmission)
async def start_task(
    task_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    team: Team = Depends(get_current_team),
    clock: Clock = Depends(get_clock),
):
    now = clock.now()
    task, attempt = await start_attempt(session, team, task_id, now)
    config = await get_config(session)
    return TaskWithSubmission(
        task=visible_task(task, attempt, config, now, as_admin=team.is_admin),
        submission=SubmissionPublic(**submission_fields(attempt)),
    )

from __future__ import annotations
import uuid
import structlog
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.errors import NotFound
from scavenger.models.submission import Submission
from scavenger.models.task import Task
from scavenger.models.team import Team
from scavenger.schemas.task import TaskCreate, TaskUpdate, TaskSummary
from scavenger.services.game_config import get_config
from scavenger.services.storage import BlobStore, discard_blob
from scavenger.services.task_queue import merge_queue

log = structlog.get_logger()

# Nullable columns an admin may clear by sending null
CLEARABLE_FIELDS = {"lat", "lng"}


async def task_or_404(session: AsyncSession, task_id: uuid.UUID) -> Task:
    task = await session.get(Task, task_id)
    if not task:
        raise NotFound("Task not found")
    return task


async def list_all(session: AsyncSession) -> list[Task]:
    return list((await session.execute(
        select(Task).order_by(Task.order.asc(), Task.created_at.asc())
    )).scalars().all())


async def create_task(session: AsyncSession, payload: TaskCreate) -> Task:
    points = payload.points
    if points is None:
        points = (await get_config(session)).default_task_points
    task = Task(
        title=payload.title,
        description=payload.description,
        location_hint=payload.location_hint,
        detailed_hint=payload.detailed_hint,
        points=points,
        order=payload.order,
        is_active=payload.is_active,
        lat=payload.lat,
        lng=payload.lng,
        map_label=payload.map_label,
    )
    session.add(task)
    await session.commit()
    await session.refresh(task)
    log.info("task_created", task_id=str(task.id), points=task.points)
    return task


async def update_task(session: AsyncSession, task_id: uuid.UUID, patch: TaskUpdate) -> Task:
    task = await task_or_404(session, task_id)
    for field, value in patch.model_dump(exclude_unset=True).items():
        if value is None and field not in CLEARABLE_FIELDS:
            continue
        setattr(task, field, value)
    await session.commit()
    await session.refresh(task)
    log.info("task_updated", task_id=str(task.id))
    return task


async def delete_task(session: AsyncSession, store: BlobStore, task_id: uuid.UUID) -> None:
    """Removes the task with every attempt on it; their photos are discarded after commit."""
    task = await task_or_404(session, task_id)
    tid = task.id
    keys = (await session.execute(
        select(Submission.photo_key).where(Submission.task_id == tid, Submission.photo_key.is_not(None))
    )).scalars().all()
    result = await session.execute(delete(Submission).where(Submission.task_id == tid))
    await session.delete(task)
    await session.commit()
    for key in keys:
        discard_blob(store, key)
    log.info("task_deleted", task_id=str(tid), attempts_removed=result.rowcount)


async def tasks_for_team(session: AsyncSession, team: Team) -> list[TaskSummary]:
    """Active tasks in the team's (merged) queue order, with the team's progress on each."""
    active = (await session.execute(
        select(Task).where(Task.is_active.is_(True)).order_by(Task.order.asc(), Task.created_at.asc())
    )).scalars().all()
    by_id = {str(t.id): t for t in active}
    order = merge_queue(team.task_queue or [], list(by_id))
    attempts = {
        a.task_id: a
        for a in (await session.execute(select(Submission).where(Submission.team_id == team.id))).scalars().all()
    }
    out = []
    for position, tid in enumerate(order, start=1):
        task = by_id[tid]
        attempt = attempts.get(task.id)
        out.append(TaskSummary(
            id=task.id,
            title=task.title,
            location_hint=task.location_hint,
            points=task.points,
            order=task.order,
            queue_position=position,
            status=attempt.status if attempt else "not-started",
            elapsed_ms=attempt.elapsed_ms if attempt else None,
        ))
    return out

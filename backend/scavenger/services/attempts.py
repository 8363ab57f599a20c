from __future__ import annotations
import uuid
from datetime import datetime, timedelta
from typing import Any
import structlog
from fastapi import UploadFile
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.errors import (
    NotFound, NotStarted, AlreadySubmitted, SubmissionBlocked, InvalidScore, Conflict,
)
from scavenger.models.submission import Submission
from scavenger.models.task import Task
from scavenger.models.team import Team
from scavenger.services.media import read_photo, photo_key
from scavenger.services.storage import BlobStore, discard_blob

log = structlog.get_logger()

IN_PROGRESS = "in-progress"
COMPLETED = "completed"
BLOCKED = "blocked"

DEFAULT_BLOCK_REASON = "Blocked by admin"


def elapsed_between(opened_at: datetime, submitted_at: datetime) -> int:
    """Whole milliseconds from opening the riddle to the photo upload."""
    return (submitted_at - opened_at) // timedelta(milliseconds=1)


def parse_points(value: Any) -> int:
    """Accept non-negative integers (or their string / integral float forms)."""
    if isinstance(value, bool) or value is None:
        raise InvalidScore()
    if isinstance(value, int):
        points = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise InvalidScore()
        points = int(value)
    elif isinstance(value, str):
        try:
            points = int(value.strip())
        except ValueError:
            raise InvalidScore()
    else:
        raise InvalidScore()
    if points < 0:
        raise InvalidScore()
    return points


async def get_attempt(session: AsyncSession, team_id: uuid.UUID, task_id: uuid.UUID) -> Submission | None:
    return await session.scalar(
        select(Submission).where(Submission.team_id == team_id, Submission.task_id == task_id)
    )


async def get_submission_or_404(session: AsyncSession, submission_id: uuid.UUID) -> Submission:
    s = await session.get(Submission, submission_id)
    if not s:
        raise NotFound("Submission not found")
    return s


async def start_attempt(
    session: AsyncSession,
    team: Team,
    task_id: uuid.UUID,
    now: datetime,
) -> tuple[Task, Submission]:
    """
    Open a riddle and start its timer. Idempotent: an existing attempt is returned
    untouched, so opening twice never resets riddle_opened_at.
    """
    task = await session.get(Task, task_id)
    if not task:
        raise NotFound("Task not found")

    existing = await get_attempt(session, team.id, task.id)
    if existing:
        return task, existing

    if not task.is_active:
        raise NotFound("Task not found")

    team_id, tid = team.id, task.id
    attempt = Submission(team_id=team_id, task_id=tid, riddle_opened_at=now, status=IN_PROGRESS)
    session.add(attempt)
    try:
        await session.commit()
    except IntegrityError:
        # A concurrent start won the unique (team, task) slot; resolve to that row
        await session.rollback()
        existing = await get_attempt(session, team_id, tid)
        if existing is None:
            raise
        # rollback expired everything the caller still holds
        for obj in (team, task):
            await session.refresh(obj)
        return task, existing

    log.info("attempt_started", submission_id=str(attempt.id), task_id=str(task.id), team_id=str(team.id))
    return task, attempt


async def upload_photo(
    session: AsyncSession,
    store: BlobStore,
    team: Team,
    task_id: uuid.UUID,
    upload: UploadFile | None,
    now: datetime,
    max_bytes: int,
) -> Submission:
    """
    Stop the timer: store the photo and flip in-progress -> completed.
    elapsed_ms is computed here and nowhere else.
    """
    attempt = await get_attempt(session, team.id, task_id)
    if attempt is None:
        raise NotStarted()
    if attempt.status == COMPLETED:
        raise AlreadySubmitted()
    if attempt.status == BLOCKED:
        raise SubmissionBlocked()

    photo = await read_photo(upload, max_bytes)

    key = photo_key("tasks", team.id, task_id, photo)
    store.put_bytes(key, photo.data, photo.mime)

    attempt_id = attempt.id
    elapsed_ms = elapsed_between(attempt.riddle_opened_at, now)
    try:
        # Conditional flip: only an in-progress row may complete. Status, timestamps and
        # photo change together in one statement.
        result = await session.execute(
            update(Submission)
            .where(Submission.id == attempt_id, Submission.status == IN_PROGRESS)
            .values(
                status=COMPLETED,
                photo_submitted_at=now,
                elapsed_ms=elapsed_ms,
                photo_key=key,
                photo_mime=photo.mime,
                photo_phash=photo.phash,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await session.rollback()
            discard_blob(store, key)
            current = await session.get(Submission, attempt_id, populate_existing=True)
            if current is not None and current.status == BLOCKED:
                raise SubmissionBlocked()
            raise AlreadySubmitted()
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        discard_blob(store, key)
        raise

    await session.refresh(attempt)
    log.info(
        "attempt_completed",
        submission_id=str(attempt.id), task_id=str(task_id), team_id=str(team.id), elapsed_ms=elapsed_ms,
    )
    return attempt


async def block_attempt(
    session: AsyncSession, submission_id: uuid.UUID, admin: Team, reason: str | None, now: datetime
) -> Submission:
    """completed -> blocked. Forces photo_points to 0; the team cannot re-upload until an admin acts."""
    s = await get_submission_or_404(session, submission_id)
    result = await session.execute(
        update(Submission)
        .where(Submission.id == s.id, Submission.status == COMPLETED)
        .values(
            status=BLOCKED,
            blocked_at=now,
            blocked_by=admin.id,
            block_reason=(reason or "").strip() or DEFAULT_BLOCK_REASON,
            photo_points=0,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await session.rollback()
        await session.refresh(s)
        if s.status == BLOCKED:
            raise Conflict("Submission is already blocked")
        raise Conflict("Only completed submissions can be blocked")
    await session.commit()
    await session.refresh(s)
    log.info("attempt_blocked", submission_id=str(s.id), admin_id=str(admin.id), reason=s.block_reason)
    return s


async def unblock_attempt(session: AsyncSession, submission_id: uuid.UUID, admin: Team) -> Submission:
    """blocked -> completed. Block fields cleared; photo_points stays as the block left it."""
    s = await get_submission_or_404(session, submission_id)
    result = await session.execute(
        update(Submission)
        .where(Submission.id == s.id, Submission.status == BLOCKED)
        .values(status=COMPLETED, blocked_at=None, blocked_by=None, block_reason="")
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await session.rollback()
        raise Conflict("Submission is not blocked")
    await session.commit()
    await session.refresh(s)
    log.info("attempt_unblocked", submission_id=str(s.id), admin_id=str(admin.id))
    return s


async def score_attempt(
    session: AsyncSession, submission_id: uuid.UUID, admin: Team, points: Any, now: datetime
) -> Submission:
    """Set admin photo points. Allowed in any status and may be repeated."""
    s = await get_submission_or_404(session, submission_id)
    value = parse_points(points)
    await session.execute(
        update(Submission)
        .where(Submission.id == s.id)
        .values(photo_points=value, scored_at=now, scored_by=admin.id)
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    await session.refresh(s)
    log.info("attempt_scored", submission_id=str(s.id), admin_id=str(admin.id), photo_points=value)
    return s


async def delete_photo(
    session: AsyncSession, store: BlobStore, submission_id: uuid.UUID, admin: Team
) -> Submission:
    """
    Throw the photo away so the team can upload again. Back to in-progress with
    photo, timing, scoring and block fields cleared. riddle_opened_at is kept:
    the next upload is timed from the original opening.
    """
    s = await get_submission_or_404(session, submission_id)
    old_key = s.photo_key
    await session.execute(
        update(Submission)
        .where(Submission.id == s.id)
        .values(
            status=IN_PROGRESS,
            photo_key=None,
            photo_mime=None,
            photo_phash=None,
            photo_submitted_at=None,
            elapsed_ms=None,
            photo_points=None,
            scored_at=None,
            scored_by=None,
            blocked_at=None,
            blocked_by=None,
            block_reason="",
        )
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    await session.refresh(s)
    discard_blob(store, old_key)
    log.info("attempt_photo_deleted", submission_id=str(s.id), admin_id=str(admin.id))
    return s

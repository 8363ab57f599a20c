from __future__ import annotations
import uuid
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.models.side_quest import SideQuestSubmission
from scavenger.models.submission import Submission
from scavenger.models.task import Task
from scavenger.models.team import Team
from scavenger.schemas.submission import SubmissionModerationRow, FeedItem, TeamBrief, TaskBrief
from scavenger.services.media import hamming_hex, DUPLICATE_HAMMING_DISTANCE
from scavenger.services.storage import media_url

FEED_LIMIT = 100


def submission_fields(s: Submission) -> dict:
    return dict(
        id=s.id,
        team_id=s.team_id,
        task_id=s.task_id,
        riddle_opened_at=s.riddle_opened_at,
        photo_submitted_at=s.photo_submitted_at,
        elapsed_ms=s.elapsed_ms,
        status=s.status,
        photo_url=media_url(s.photo_key),
    )


def admin_fields(s: Submission) -> dict:
    return dict(
        submission_fields(s),
        blocked_at=s.blocked_at,
        blocked_by=s.blocked_by,
        block_reason=s.block_reason,
        photo_points=s.photo_points,
        scored_at=s.scored_at,
        scored_by=s.scored_by,
    )


def find_duplicates(items: list[tuple[uuid.UUID, str | None]]) -> dict[uuid.UUID, uuid.UUID]:
    """
    Map each submission id to an earlier-listed one whose perceptual hash is within
    DUPLICATE_HAMMING_DISTANCE. A hint for moderators, never acted on automatically.
    """
    hits: dict[uuid.UUID, uuid.UUID] = {}
    seen: list[tuple[uuid.UUID, str]] = []
    for sid, phash in items:
        if not phash:
            continue
        for other_id, other_hash in seen:
            if hamming_hex(phash, other_hash) <= DUPLICATE_HAMMING_DISTANCE:
                hits[sid] = other_id
                break
        seen.append((sid, phash))
    return hits


async def moderation_list(
    session: AsyncSession, status: str | None = None, task_id: uuid.UUID | None = None
) -> list[SubmissionModerationRow]:
    q = (
        select(Submission, Team, Task)
        .join(Team, Team.id == Submission.team_id)
        .join(Task, Task.id == Submission.task_id)
    )
    if status:
        q = q.where(Submission.status == status)
    if task_id is not None:
        q = q.where(Submission.task_id == task_id)
    q = q.order_by(Submission.photo_submitted_at.desc().nulls_last(), Submission.created_at.desc())
    rows = (await session.execute(q)).all()

    # Compare against every stored hash, not just the filtered page
    hashes = (await session.execute(
        select(Submission.id, Submission.photo_phash)
        .where(Submission.photo_phash.is_not(None))
        .order_by(Submission.photo_submitted_at.asc(), Submission.id.asc())
    )).all()
    duplicates = find_duplicates([(sid, ph) for sid, ph in hashes])

    return [
        SubmissionModerationRow(
            **admin_fields(s),
            team=TeamBrief(id=team.id, name=team.name, avatar_color=team.avatar_color),
            task=TaskBrief(id=task.id, title=task.title, location_hint=task.location_hint, order=task.order),
            possible_duplicate_of=duplicates.get(s.id),
        )
        for (s, team, task) in rows
    ]


async def feed(session: AsyncSession) -> list[FeedItem]:
    rows = (await session.execute(
        select(Submission, Team, Task)
        .join(Team, Team.id == Submission.team_id)
        .join(Task, Task.id == Submission.task_id)
        .where(Submission.status == "completed", Submission.photo_key.is_not(None), Submission.blocked_at.is_(None))
        .order_by(Submission.photo_submitted_at.desc())
        .limit(FEED_LIMIT)
    )).all()
    return [
        FeedItem(
            id=s.id,
            photo_url=media_url(s.photo_key),
            photo_submitted_at=s.photo_submitted_at,
            elapsed_ms=s.elapsed_ms,
            team=TeamBrief(id=team.id, name=team.name, avatar_color=team.avatar_color),
            task=TaskBrief(id=task.id, title=task.title, location_hint=task.location_hint, order=task.order),
        )
        for (s, team, task) in rows
    ]


async def stats(session: AsyncSession) -> dict:
    async def count(model, *where) -> int:
        return int(await session.scalar(select(func.count()).select_from(model).where(*where)) or 0)

    return {
        "teams": await count(Team, Team.role != "admin"),
        "tasks": await count(Task),
        "submissions": await count(Submission),
        "completed": await count(Submission, Submission.status == "completed"),
        "blocked": await count(Submission, Submission.status == "blocked"),
        "inProgress": await count(Submission, Submission.status == "in-progress"),
        "sideQuestPending": await count(SideQuestSubmission, SideQuestSubmission.status == "pending"),
    }

from __future__ import annotations
import uuid
from datetime import datetime
import structlog
from fastapi import UploadFile
from sqlalchemy import select, delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.errors import NotFound, AlreadySubmitted, InvalidRequest
from scavenger.models.side_quest import SideQuest, SideQuestSubmission
from scavenger.models.team import Team
from scavenger.schemas.side_quest import SideQuestCreate, SideQuestUpdate
from scavenger.services.media import read_photo, photo_key
from scavenger.services.storage import BlobStore, discard_blob

log = structlog.get_logger()

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
REVIEW_ACTIONS = {"approve": APPROVED, "reject": REJECTED}

GALLERY_LIMIT = 200


async def quest_or_404(session: AsyncSession, quest_id: uuid.UUID) -> SideQuest:
    quest = await session.get(SideQuest, quest_id)
    if not quest:
        raise NotFound("Side quest not found")
    return quest


async def create_quest(session: AsyncSession, payload: SideQuestCreate) -> SideQuest:
    quest = SideQuest(title=payload.title.strip(), description=payload.description, is_active=payload.is_active)
    session.add(quest)
    await session.commit()
    await session.refresh(quest)
    log.info("side_quest_created", side_quest_id=str(quest.id))
    return quest


async def update_quest(session: AsyncSession, quest_id: uuid.UUID, patch: SideQuestUpdate) -> SideQuest:
    quest = await quest_or_404(session, quest_id)
    for field, value in patch.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(quest, field, value)
    await session.commit()
    await session.refresh(quest)
    log.info("side_quest_updated", side_quest_id=str(quest.id))
    return quest


async def delete_quest(session: AsyncSession, store: BlobStore, quest_id: uuid.UUID) -> None:
    quest = await quest_or_404(session, quest_id)
    qid = quest.id
    keys = (await session.execute(
        select(SideQuestSubmission.photo_key).where(SideQuestSubmission.side_quest_id == qid)
    )).scalars().all()
    await session.execute(delete(SideQuestSubmission).where(SideQuestSubmission.side_quest_id == qid))
    await session.delete(quest)
    await session.commit()
    for key in keys:
        discard_blob(store, key)
    log.info("side_quest_deleted", side_quest_id=str(qid), photos_removed=len(keys))


async def submit(
    session: AsyncSession,
    store: BlobStore,
    team: Team,
    quest_id: uuid.UUID,
    upload: UploadFile | None,
    now: datetime,
    max_bytes: int,
) -> SideQuestSubmission:
    """One photo per team per side quest; lands as pending for admin review."""
    quest = await quest_or_404(session, quest_id)
    if not quest.is_active:
        raise InvalidRequest("Side quest is not active")
    existing = await session.scalar(
        select(SideQuestSubmission.id).where(
            SideQuestSubmission.team_id == team.id, SideQuestSubmission.side_quest_id == quest.id
        )
    )
    if existing:
        raise AlreadySubmitted("Already submitted for this side quest")

    photo = await read_photo(upload, max_bytes)
    key = photo_key("sidequests", team.id, quest.id, photo)
    store.put_bytes(key, photo.data, photo.mime)

    sub = SideQuestSubmission(
        team_id=team.id,
        side_quest_id=quest.id,
        photo_key=key,
        photo_mime=photo.mime,
        status=PENDING,
        submitted_at=now,
    )
    session.add(sub)
    try:
        await session.commit()
    except IntegrityError:
        # Concurrent submit for the same pair won the unique slot
        await session.rollback()
        discard_blob(store, key)
        raise AlreadySubmitted("Already submitted for this side quest")
    except SQLAlchemyError:
        await session.rollback()
        discard_blob(store, key)
        raise
    await session.refresh(sub)
    log.info("side_quest_submitted", submission_id=str(sub.id), side_quest_id=str(quest_id), team_id=str(team.id))
    return sub


async def review(
    session: AsyncSession, submission_id: uuid.UUID, action: str, admin: Team, now: datetime
) -> SideQuestSubmission:
    """approve | reject. Informational only; nothing flows into the leaderboard."""
    status = REVIEW_ACTIONS.get(action)
    if status is None:
        raise InvalidRequest("Action must be approve or reject")
    sub = await session.get(SideQuestSubmission, submission_id)
    if not sub:
        raise NotFound("Side quest submission not found")
    await session.execute(
        update(SideQuestSubmission)
        .where(SideQuestSubmission.id == sub.id)
        .values(status=status, reviewed_by=admin.id, reviewed_at=now)
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    await session.refresh(sub)
    log.info("side_quest_reviewed", submission_id=str(sub.id), status=status, admin_id=str(admin.id))
    return sub


async def listing_for_team(session: AsyncSession, team: Team) -> tuple[list[tuple[SideQuest, SideQuestSubmission | None]], dict]:
    quests = (await session.execute(
        select(SideQuest).where(SideQuest.is_active.is_(True)).order_by(SideQuest.created_at.asc())
    )).scalars().all()
    mine = {
        s.side_quest_id: s
        for s in (await session.execute(
            select(SideQuestSubmission).where(SideQuestSubmission.team_id == team.id)
        )).scalars().all()
    }
    rows = [(q, mine.get(q.id)) for q in quests]
    subs = [s for _, s in rows if s is not None]
    summary = {
        "submitted": len(subs),
        "approved": sum(1 for s in subs if s.status == APPROVED),
        "rejected": sum(1 for s in subs if s.status == REJECTED),
        "pending": sum(1 for s in subs if s.status == PENDING),
    }
    return rows, summary


async def gallery(session: AsyncSession, quest_id: uuid.UUID | None = None):
    """Side-quest photos with team and quest, newest first."""
    q = (
        select(SideQuestSubmission, Team, SideQuest)
        .join(Team, Team.id == SideQuestSubmission.team_id)
        .join(SideQuest, SideQuest.id == SideQuestSubmission.side_quest_id)
        .where(SideQuestSubmission.photo_key.is_not(None))
    )
    if quest_id is not None:
        q = q.where(SideQuestSubmission.side_quest_id == quest_id)
    q = q.order_by(SideQuestSubmission.submitted_at.desc()).limit(GALLERY_LIMIT)
    return (await session.execute(q)).all()


async def admin_submissions(session: AsyncSession, status: str | None = None, quest_id: uuid.UUID | None = None):
    q = (
        select(SideQuestSubmission, Team, SideQuest)
        .join(Team, Team.id == SideQuestSubmission.team_id)
        .join(SideQuest, SideQuest.id == SideQuestSubmission.side_quest_id)
    )
    if status:
        q = q.where(SideQuestSubmission.status == status)
    if quest_id is not None:
        q = q.where(SideQuestSubmission.side_quest_id == quest_id)
    return (await session.execute(q.order_by(SideQuestSubmission.submitted_at.desc()))).all()

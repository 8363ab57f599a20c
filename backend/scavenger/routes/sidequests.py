from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends, Query, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.auth_deps import get_current_team
from scavenger.config import settings
from scavenger.db import get_session
from scavenger.models.side_quest import SideQuest, SideQuestSubmission
from scavenger.models.team import Team
from scavenger.schemas.side_quest import (
    SideQuestBrief, SideQuestForTeam, SideQuestGalleryItem, SideQuestListing, SideQuestSubmissionPublic,
    SideQuestSubmitResponse, SideQuestSummary,
)
from scavenger.schemas.submission import TeamBrief
from scavenger.services import side_quests
from scavenger.services.clock import Clock, get_clock
from scavenger.services.storage import BlobStore, get_blob_store, media_url

router = APIRouter(prefix="/sidequests", tags=["sidequests"])


def submission_public(s: SideQuestSubmission) -> SideQuestSubmissionPublic:
    return SideQuestSubmissionPublic(
        id=s.id,
        team_id=s.team_id,
        side_quest_id=s.side_quest_id,
        photo_url=media_url(s.photo_key),
        status=s.status,
        reviewed_by=s.reviewed_by,
        reviewed_at=s.reviewed_at,
        submitted_at=s.submitted_at,
    )


def gallery_item(s: SideQuestSubmission, team: Team, quest: SideQuest) -> SideQuestGalleryItem:
    return SideQuestGalleryItem(
        **submission_public(s).model_dump(),
        team=TeamBrief(id=team.id, name=team.name, avatar_color=team.avatar_color),
        side_quest=SideQuestBrief(id=quest.id, title=quest.title, description=quest.description),
    )


@router.get("", response_model=SideQuestListing)
async def list_side_quests(session: AsyncSession = Depends(get_session), team: Team = Depends(get_current_team)):
    rows, summary = await side_quests.listing_for_team(session, team)
    quests = [
        SideQuestForTeam(
            id=q.id,
            title=q.title,
            description=q.description,
            is_active=q.is_active,
            created_at=q.created_at,
            submitted=sub is not None,
            status=sub.status if sub else None,
            photo_url=media_url(sub.photo_key) if sub else None,
        )
        for (q, sub) in rows
    ]
    return SideQuestListing(quests=quests, summary=SideQuestSummary(**summary))


@router.get("/gallery", response_model=list[SideQuestGalleryItem])
async def side_quest_gallery(
    quest_id: uuid.UUID | None = Query(default=None, alias="questId"),
    session: AsyncSession = Depends(get_session),
    team: Team = Depends(get_current_team),
):
    rows = await side_quests.gallery(session, quest_id)
    return [gallery_item(s, t, q) for (s, t, q) in rows]


@router.post("/{quest_id}/submit", response_model=SideQuestSubmitResponse)
async def submit_side_quest(
    quest_id: uuid.UUID,
    photo: UploadFile | None = File(default=None, description="JPEG, PNG or WEBP photo"),
    session: AsyncSession = Depends(get_session),
    team: Team = Depends(get_current_team),
    store: BlobStore = Depends(get_blob_store),
    clock: Clock = Depends(get_clock),
):
    sub = await side_quests.submit(session, store, team, quest_id, photo, clock.now(), settings.max_upload_bytes)
    return SideQuestSubmitResponse(message="Side quest completed!", submission=submission_public(sub))

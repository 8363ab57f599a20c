from __future__ import annotations
import uuid
from typing import Literal
from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.auth_deps import require_admin
from scavenger.db import get_session
from scavenger.models.side_quest import SideQuest
from scavenger.models.team import Team
from scavenger.schemas.game_config import GameConfigPublic, GameConfigUpdate
from scavenger.schemas.side_quest import (
    SideQuestCreate, SideQuestUpdate, SideQuestPublic, SideQuestGalleryItem, SideQuestSubmitResponse,
)
from scavenger.schemas.submission import (
    SubmissionAdmin, SubmissionModerationRow, ModerationResponse, BlockRequest, ScoreRequest,
)
from scavenger.schemas.task import TaskAdmin, TaskCreate, TaskUpdate
from scavenger.schemas.team import TeamCreate, TeamBulkCreate, TeamPublic, GeneratedCredential, ReshuffleResponse
from scavenger.services import attempts, catalog, side_quests, teams
from scavenger.services.clock import Clock, get_clock
from scavenger.services.game_config import get_config, update_config
from scavenger.services.moderation import admin_fields, moderation_list, stats
from scavenger.services.storage import BlobStore, get_blob_store
from scavenger.routes.sidequests import gallery_item, submission_public

# Every route here is admin-only
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _moderated(message: str, s) -> ModerationResponse:
    return ModerationResponse(message=message, submission=SubmissionAdmin(**admin_fields(s)))


# --- game config ---

@router.get("/config", response_model=GameConfigPublic)
async def read_config(session: AsyncSession = Depends(get_session)):
    return GameConfigPublic.model_validate(await get_config(session))

@router.put("/config", response_model=GameConfigPublic)
async def write_config(payload: GameConfigUpdate, session: AsyncSession = Depends(get_session)):
    return GameConfigPublic.model_validate(await update_config(session, payload))


# --- tasks ---

@router.get("/tasks", response_model=list[TaskAdmin])
async def list_tasks(session: AsyncSession = Depends(get_session)):
    return [TaskAdmin.model_validate(t) for t in await catalog.list_all(session)]

@router.post("/tasks", response_model=TaskAdmin, status_code=201)
async def create_task(payload: TaskCreate, session: AsyncSession = Depends(get_session)):
    return TaskAdmin.model_validate(await catalog.create_task(session, payload))

@router.put("/tasks/{task_id}", response_model=TaskAdmin)
async def update_task(task_id: uuid.UUID, payload: TaskUpdate, session: AsyncSession = Depends(get_session)):
    return TaskAdmin.model_validate(await catalog.update_task(session, task_id, payload))

@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    store: BlobStore = Depends(get_blob_store),
):
    await catalog.delete_task(session, store, task_id)
    return {"message": "Task deleted"}


# --- photo moderation ---

@router.get("/submissions", response_model=list[SubmissionModerationRow])
async def list_submissions(
    status: Literal["in-progress", "completed", "blocked"] | None = Query(default=None),
    task_id: uuid.UUID | None = Query(default=None, alias="taskId"),
    session: AsyncSession = Depends(get_session),
):
    return await moderation_list(session, status, task_id)

@router.put("/submissions/{submission_id}/block", response_model=ModerationResponse)
async def block_submission(
    submission_id: uuid.UUID,
    payload: BlockRequest | None = None,
    session: AsyncSession = Depends(get_session),
    admin: Team = Depends(require_admin),
    clock: Clock = Depends(get_clock),
):
    reason = payload.reason if payload else None
    s = await attempts.block_attempt(session, submission_id, admin, reason, clock.now())
    return _moderated("Submission blocked", s)

@router.put("/submissions/{submission_id}/unblock", response_model=ModerationResponse)
async def unblock_submission(
    submission_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    admin: Team = Depends(require_admin),
):
    s = await attempts.unblock_attempt(session, submission_id, admin)
    return _moderated("Submission unblocked", s)

@router.put("/submissions/{submission_id}/score", response_model=ModerationResponse)
async def score_submission(
    submission_id: uuid.UUID,
    payload: ScoreRequest,
    session: AsyncSession = Depends(get_session),
    admin: Team = Depends(require_admin),
    clock: Clock = Depends(get_clock),
):
    s = await attempts.score_attempt(session, submission_id, admin, payload.points, clock.now())
    return _moderated("Points assigned", s)

@router.delete("/submissions/{submission_id}", response_model=ModerationResponse)
async def delete_submission_photo(
    submission_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    admin: Team = Depends(require_admin),
    store: BlobStore = Depends(get_blob_store),
):
    s = await attempts.delete_photo(session, store, submission_id, admin)
    return _moderated("Photo deleted, team can upload again", s)


# --- teams ---

@router.get("/teams", response_model=list[TeamPublic])
async def list_teams(session: AsyncSession = Depends(get_session)):
    rows = (await session.execute(select(Team).where(Team.role != "admin").order_by(Team.name.asc()))).scalars().all()
    return [TeamPublic.model_validate(t) for t in rows]

@router.post("/teams", response_model=TeamPublic, status_code=201)
async def create_team(payload: TeamCreate, session: AsyncSession = Depends(get_session)):
    team = await teams.create_team(session, payload.name, payload.password, payload.avatar_color)
    return TeamPublic.model_validate(team)

@router.post("/teams/generate", response_model=list[GeneratedCredential], status_code=201)
async def generate_teams(payload: TeamBulkCreate, session: AsyncSession = Depends(get_session)):
    created = await teams.generate_teams(session, payload.count, payload.prefix)
    return [GeneratedCredential(id=t.id, name=t.name, password=pw) for t, pw in created]

@router.post("/teams/{team_id}/reshuffle", response_model=ReshuffleResponse)
async def reshuffle_team(team_id: uuid.UUID, session: AsyncSession = Depends(get_session)):
    team = await teams.reshuffle_queue(session, team_id)
    return ReshuffleResponse(message="Task order reshuffled", task_queue=team.task_queue)

@router.delete("/teams/{team_id}")
async def delete_team(
    team_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    store: BlobStore = Depends(get_blob_store),
):
    await teams.delete_team(session, store, team_id)
    return {"message": "Team deleted"}


# --- side quests ---

@router.get("/sidequests", response_model=list[SideQuestPublic])
async def list_side_quests(session: AsyncSession = Depends(get_session)):
    rows = (await session.execute(select(SideQuest).order_by(SideQuest.created_at.asc()))).scalars().all()
    return [SideQuestPublic.model_validate(q) for q in rows]

@router.post("/sidequests", response_model=SideQuestPublic, status_code=201)
async def create_side_quest(payload: SideQuestCreate, session: AsyncSession = Depends(get_session)):
    return SideQuestPublic.model_validate(await side_quests.create_quest(session, payload))

@router.put("/sidequests/{quest_id}", response_model=SideQuestPublic)
async def update_side_quest(quest_id: uuid.UUID, payload: SideQuestUpdate, session: AsyncSession = Depends(get_session)):
    return SideQuestPublic.model_validate(await side_quests.update_quest(session, quest_id, payload))

@router.delete("/sidequests/{quest_id}")
async def delete_side_quest(
    quest_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    store: BlobStore = Depends(get_blob_store),
):
    await side_quests.delete_quest(session, store, quest_id)
    return {"message": "Side quest deleted"}

@router.get("/sidequests/submissions", response_model=list[SideQuestGalleryItem])
async def list_side_quest_submissions(
    status: Literal["pending", "approved", "rejected"] | None = Query(default=None),
    quest_id: uuid.UUID | None = Query(default=None, alias="questId"),
    session: AsyncSession = Depends(get_session),
):
    rows = await side_quests.admin_submissions(session, status, quest_id)
    return [gallery_item(s, team, quest) for (s, team, quest) in rows]

@router.put("/sidequests/submissions/{submission_id}/{action}", response_model=SideQuestSubmitResponse)
async def review_side_quest_submission(
    submission_id: uuid.UUID,
    action: Literal["approve", "reject"],
    session: AsyncSession = Depends(get_session),
    admin: Team = Depends(require_admin),
    clock: Clock = Depends(get_clock),
):
    sub = await side_quests.review(session, submission_id, action, admin, clock.now())
    return SideQuestSubmitResponse(message=f"Submission {sub.status}", submission=submission_public(sub))


# --- dashboard ---

@router.get("/stats")
async def dashboard_stats(session: AsyncSession = Depends(get_session)):
    return await stats(session)

from __future__ import annotations
import uuid
import structlog
from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.errors import NotFound, Conflict, InvalidRequest, Forbidden
from scavenger.models.side_quest import SideQuestSubmission
from scavenger.models.submission import Submission
from scavenger.models.team import Team
from scavenger.security import hash_password, generate_password
from scavenger.services.game_config import get_config
from scavenger.services.storage import BlobStore, discard_blob
from scavenger.services.task_queue import build_task_queue, active_task_ids

log = structlog.get_logger()

ADMIN_AVATAR = "#ffd700"
TEAM_AVATAR = "#00f0ff"
# Rotated through for generated teams
AVATAR_PALETTE = ["#00f0ff", "#ff00aa", "#39ff14", "#ffd700", "#ff6b00", "#b026ff", "#ff3131", "#00ff9f"]


async def team_or_404(session: AsyncSession, team_id: uuid.UUID) -> Team:
    team = await session.get(Team, team_id)
    if not team:
        raise NotFound("Team not found")
    return team


async def name_taken(session: AsyncSession, name: str, exclude_id: uuid.UUID | None = None) -> bool:
    q = select(Team.id).where(Team.name == name)
    if exclude_id is not None:
        q = q.where(Team.id != exclude_id)
    return (await session.scalar(q)) is not None


async def create_team(
    session: AsyncSession, name: str, password: str, avatar_color: str | None = None
) -> Team:
    """Admin-created team with its task queue snapshotted from the current active tasks."""
    name = name.strip()
    if not name:
        raise InvalidRequest("Name is required")
    config = await get_config(session)
    if await name_taken(session, name):
        raise Conflict("Team name already taken")
    queue = build_task_queue(await active_task_ids(session), config.shuffle_task_order)
    team = Team(
        name=name,
        password_hash=hash_password(password),
        role="team",
        avatar_color=avatar_color or TEAM_AVATAR,
        task_queue=queue,
    )
    session.add(team)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise Conflict("Team name already taken")
    await session.refresh(team)
    log.info("team_created", team_id=str(team.id), queue_len=len(queue))
    return team


async def generate_teams(session: AsyncSession, count: int, prefix: str) -> list[tuple[Team, str]]:
    """
    Create `count` teams named "<prefix> <n>", skipping names already in use.
    Returns (team, plain password) pairs; passwords are only ever shown here.
    """
    config = await get_config(session)
    tasks = await active_task_ids(session)
    existing = set((await session.execute(select(Team.name))).scalars().all())
    created: list[tuple[Team, str]] = []
    n = 0
    while len(created) < count:
        n += 1
        name = f"{prefix.strip()} {n}"
        if name in existing:
            continue
        password = generate_password()
        team = Team(
            name=name,
            password_hash=hash_password(password),
            role="team",
            avatar_color=AVATAR_PALETTE[(n - 1) % len(AVATAR_PALETTE)],
            task_queue=build_task_queue(tasks, config.shuffle_task_order),
        )
        session.add(team)
        created.append((team, password))
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise Conflict("Generated team name collided with an existing team; retry")
    for team, _ in created:
        await session.refresh(team)
    log.info("teams_generated", count=len(created), prefix=prefix)
    return created


async def reshuffle_queue(session: AsyncSession, team_id: uuid.UUID) -> Team:
    """Replace the stored queue with a fresh shuffle of the current active tasks."""
    team = await team_or_404(session, team_id)
    team.task_queue = build_task_queue(await active_task_ids(session), shuffle=True)
    await session.commit()
    await session.refresh(team)
    log.info("team_queue_reshuffled", team_id=str(team.id), queue_len=len(team.task_queue))
    return team


async def delete_team(session: AsyncSession, store: BlobStore, team_id: uuid.UUID) -> None:
    team = await team_or_404(session, team_id)
    if team.is_admin:
        raise InvalidRequest("Cannot delete admin account")
    keys = list((await session.execute(
        select(Submission.photo_key).where(Submission.team_id == team.id, Submission.photo_key.is_not(None))
    )).scalars().all())
    keys += list((await session.execute(
        select(SideQuestSubmission.photo_key)
        .where(SideQuestSubmission.team_id == team.id, SideQuestSubmission.photo_key.is_not(None))
    )).scalars().all())
    tid = team.id
    await session.execute(delete(Submission).where(Submission.team_id == tid))
    await session.execute(delete(SideQuestSubmission).where(SideQuestSubmission.team_id == tid))
    await session.delete(team)
    await session.commit()
    for key in keys:
        discard_blob(store, key)
    log.info("team_deleted", team_id=str(tid), photos_removed=len(keys))


async def create_admin(session: AsyncSession, name: str, password: str) -> Team:
    """One-time admin bootstrap."""
    exists = await session.scalar(select(func.count()).select_from(Team).where(Team.role == "admin"))
    if exists:
        raise Conflict("Admin account already exists. Use login.")
    if await name_taken(session, name):
        raise Conflict("Team name already taken")
    admin = Team(name=name, password_hash=hash_password(password), role="admin", avatar_color=ADMIN_AVATAR, task_queue=[])
    session.add(admin)
    await session.commit()
    await session.refresh(admin)
    log.info("admin_created", team_id=str(admin.id))
    return admin


async def update_profile(session: AsyncSession, team: Team, name: str | None, password: str | None) -> Team:
    """Teams may change their name and/or password exactly once."""
    if team.profile_edited:
        raise Forbidden("Profile can only be edited once")
    new_name = name.strip() if name is not None else None
    if new_name is None and not password:
        raise InvalidRequest("Nothing to update")
    if new_name is not None:
        if not new_name:
            raise InvalidRequest("Name is required")
        if await name_taken(session, new_name, exclude_id=team.id):
            raise Conflict("Team name already taken")
        team.name = new_name
    if password:
        team.password_hash = hash_password(password)
    team.profile_edited = True
    await session.commit()
    await session.refresh(team)
    log.info("team_profile_edited", team_id=str(team.id), name_changed=new_name is not None, password_changed=bool(password))
    return team

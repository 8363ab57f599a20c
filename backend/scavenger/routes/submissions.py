from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.auth_deps import get_current_team
from scavenger.config import settings
from scavenger.db import get_session
from scavenger.models.team import Team
from scavenger.schemas.submission import FeedItem, UploadResponse, UploadResult
from scavenger.services.attempts import upload_photo
from scavenger.services.clock import Clock, get_clock
from scavenger.services.moderation import feed
from scavenger.services.storage import BlobStore, get_blob_store, media_url

router = APIRouter(prefix="/submissions", tags=["submissions"])

@router.get("/feed", response_model=list[FeedItem])
async def photo_feed(session: AsyncSession = Depends(get_session), team: Team = Depends(get_current_team)):
    return await feed(session)

@router.post("/{task_id}/upload", response_model=UploadResponse)
async def upload(
    task_id: uuid.UUID,
    photo: UploadFile | None = File(default=None, description="JPEG, PNG or WEBP photo"),
    session: AsyncSession = Depends(get_session),
    team: Team = Depends(get_current_team),
    store: BlobStore = Depends(get_blob_store),
    clock: Clock = Depends(get_clock),
):
    """Stops the task timer. The server clock is the only time source."""
    now = clock.now()
    s = await upload_photo(session, store, team, task_id, photo, now, settings.max_upload_bytes)
    return UploadResponse(
        message="Photo submitted!",
        submission=UploadResult(id=s.id, elapsed_ms=s.elapsed_ms, photo_url=media_url(s.photo_key), status=s.status),
    )

from __future__ import annotations
from fastapi import APIRouter, Depends, Response
from scavenger.auth_deps import get_current_team
from scavenger.errors import NotFound
from scavenger.models.team import Team
from scavenger.services.storage import BlobStore, get_blob_store

router = APIRouter(tags=["media"])

@router.get("/media/{key:path}")
async def get_media(key: str, team: Team = Depends(get_current_team), store: BlobStore = Depends(get_blob_store)):
    """Serve a stored photo. Any signed-in team may view; photos are shared in the feed and gallery."""
    try:
        data, content_type = store.get_bytes(key)
    except FileNotFoundError:
        raise NotFound("Photo not found")
    return Response(content=data, media_type=content_type, headers={"Cache-Control": "private, max-age=3600"})

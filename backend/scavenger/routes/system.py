from __future__ import annotations
from fastapi import APIRouter, Depends, Request
from scavenger.config import settings
from scavenger.services.clock import Clock, get_clock

router = APIRouter(tags=["system"])

@router.get("/health")
async def health(request: Request, clock: Clock = Depends(get_clock)):
    return {
        "status": "ok",
        "env": settings.environment,
        "time": clock.now().isoformat(),
        "request_id": request.headers.get("x-request-id") or getattr(request.state, "request_id", None),
    }

@router.get("/version")
async def version():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "git_sha": settings.git_sha,
        "build": "docker",
    }

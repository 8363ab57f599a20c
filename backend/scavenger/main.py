from __future__ import annotations
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from scavenger.config import settings
from scavenger.errors import register_error_handlers
from scavenger.logging_setup import configure_logging
from scavenger.routes.system import router as system_router
from scavenger.routes.auth import router as auth_router
from scavenger.routes.tasks import router as tasks_router
from scavenger.routes.submissions import router as submissions_router
from scavenger.routes.leaderboard import router as leaderboard_router
from scavenger.routes.game_config import router as config_router
from scavenger.routes.sidequests import router as sidequests_router
from scavenger.routes.media import router as media_router
from scavenger.routes.admin import router as admin_router
import structlog

configure_logging()
log = structlog.get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    log.info("startup", env=settings.environment, version=settings.app_version, git_sha=settings.git_sha,
             storage=settings.storage_backend)
    yield
    # Shutdown
    log.info("shutdown")

app = FastAPI(
    title=f"{settings.app_display_name} API",
    version=settings.app_version,
    lifespan=lifespan,
    description=f"{settings.app_display_name} API: timed riddle tasks, photo proofs, leaderboard",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "dev" else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(system_router)
app.include_router(auth_router)
app.include_router(tasks_router)
app.include_router(submissions_router)
app.include_router(leaderboard_router)
app.include_router(config_router)
app.include_router(sidequests_router)
app.include_router(media_router)
app.include_router(admin_router)

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    structlog.contextvars.bind_contextvars(request_id=rid)
    try:
        response: Response = await call_next(request)
    finally:
        structlog.contextvars.clear_contextvars()
    response.headers["X-Request-ID"] = rid
    return response

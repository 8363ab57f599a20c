from __future__ import annotations
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

log = structlog.get_logger()


class DomainError(Exception):
    """
    Base for every failure the API reports to clients.
    `kind` is the machine-readable name, `status_code` the HTTP status it maps to.
    """
    kind = "Error"
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(DomainError):
    kind = "NotFound"
    status_code = 404
    default_message = "Not found"

class NotStarted(DomainError):
    kind = "NotStarted"
    default_message = "You must open the riddle before uploading"

class AlreadySubmitted(DomainError):
    kind = "AlreadySubmitted"
    default_message = "Photo already submitted for this task"

class SubmissionBlocked(DomainError):
    kind = "SubmissionBlocked"
    status_code = 403
    default_message = "This submission was blocked by an admin"

class InvalidUpload(DomainError):
    kind = "InvalidUpload"
    default_message = "No photo uploaded"

class InvalidScore(DomainError):
    kind = "InvalidScore"
    default_message = "Points must be a non-negative integer"

class InvalidRequest(DomainError):
    kind = "InvalidRequest"
    default_message = "Invalid request"

class Unauthorized(DomainError):
    kind = "Unauthorized"
    status_code = 401
    default_message = "Invalid or expired token"

class Forbidden(DomainError):
    kind = "Forbidden"
    status_code = 403
    default_message = "Admin access required"

class Conflict(DomainError):
    kind = "Conflict"
    status_code = 409
    default_message = "Conflict"


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    log.info("request_failed", kind=exc.kind, status=exc.status_code, path=request.url.path)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.message},
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)

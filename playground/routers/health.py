"""Liveness of the playground process and its workspace session."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from playground import __version__

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str
    session_started: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Report the process as healthy and whether the session is up.

    Does not contact the backend API.
    """
    started = getattr(request.app.state, "session", None) is not None
    return HealthResponse(status="healthy", version=__version__, session_started=started)

"""API routes for Image Foundry."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field, field_validator

from image_foundry.models import SessionResponse, SessionStatus, utc_now
from image_foundry.services import (
    InvalidTransitionError,
    PipelineError,
    PreconditionFailedError,
    SessionNotFoundError,
    SessionOrchestrator,
)


router = APIRouter()

MAX_PROMPT_LENGTH = 500
MAX_FEEDBACK_LENGTH = 1000


# Request/Response models
class CreateSessionRequest(BaseModel):
    """Request to start a new image generation session."""
    user_prompt: str = Field(min_length=1, max_length=MAX_PROMPT_LENGTH)

    @field_validator("user_prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("user_prompt must not be blank")
        return value


class RefineRequest(BaseModel):
    """Feedback used to refine the current description."""
    user_feedback: str = Field(min_length=1, max_length=MAX_FEEDBACK_LENGTH)

    @field_validator("user_feedback")
    @classmethod
    def feedback_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("user_feedback must not be blank")
        return value


class SessionListResponse(BaseModel):
    """Paginated list of sessions."""
    items: list[SessionResponse]
    total: int
    page: int
    per_page: int


def get_orchestrator(request: Request) -> SessionOrchestrator:
    return request.app.state.orchestrator


def to_http_error(exc: Exception) -> HTTPException:
    """Translate orchestrator errors into HTTP responses."""
    if isinstance(exc, SessionNotFoundError):
        return HTTPException(status_code=404, detail="Session not found")
    if isinstance(exc, InvalidTransitionError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, PreconditionFailedError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, PipelineError):
        return HTTPException(status_code=500, detail=f"{exc}. Please try again.")
    return HTTPException(status_code=500, detail="Unexpected server error")


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": utc_now().isoformat()}


@router.post("/api/sessions", response_model=SessionResponse)
async def create_session(
    request: CreateSessionRequest,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
):
    """Create a new session in the `prompt` step."""
    try:
        return await orchestrator.create_session(request.user_prompt)
    except PreconditionFailedError as exc:
        raise to_http_error(exc)


@router.get("/api/sessions", response_model=SessionListResponse)
async def list_sessions(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    status: Optional[SessionStatus] = None,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
):
    """List sessions, newest first, with pagination."""
    skip = (page - 1) * per_page
    status_value = status.value if status else None
    sessions = await orchestrator.list_sessions(skip=skip, limit=per_page, status=status_value)
    total = await orchestrator.count_sessions(status=status_value)

    return SessionListResponse(
        items=[SessionResponse.model_validate(s, from_attributes=True) for s in sessions],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/api/sessions/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: int,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
):
    """Get a specific session by ID."""
    try:
        return await orchestrator.get_session(session_id)
    except SessionNotFoundError as exc:
        raise to_http_error(exc)


@router.post("/api/sessions/{session_id}/generate-description", response_model=SessionResponse)
async def generate_description(
    session_id: int,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
):
    """
    Expand the session prompt into an AI description.

    The session reads `describing` while this runs and lands in `feedback`.
    """
    try:
        return await orchestrator.generate_description(session_id)
    except Exception as exc:
        raise to_http_error(exc) from exc


@router.post("/api/sessions/{session_id}/refine-description", response_model=SessionResponse)
async def refine_description(
    session_id: int,
    request: RefineRequest,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
):
    """Refine the current description with user feedback."""
    try:
        return await orchestrator.refine_description(session_id, request.user_feedback)
    except Exception as exc:
        raise to_http_error(exc) from exc


@router.post("/api/sessions/{session_id}/generate-image", response_model=SessionResponse)
async def generate_image(
    session_id: int,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
):
    """
    Generate the final image from the refined (or original) description.

    The session reads `generating` while this runs and lands in `completed`.
    """
    try:
        return await orchestrator.generate_image(session_id)
    except Exception as exc:
        raise to_http_error(exc) from exc

"""Session model for database persistence."""
from datetime import datetime, timezone
from typing import Optional
from sqlmodel import Field, SQLModel

from .state import SessionStatus


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Session(SQLModel, table=True):
    """Database model for an image generation session."""

    # AUTOINCREMENT keeps SQLite from handing out an id twice.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    user_prompt: str
    status: str = Field(default=SessionStatus.PROMPT.value, index=True)
    ai_description: Optional[str] = None
    user_feedback: Optional[str] = None
    final_description: Optional[str] = None
    generated_image_url: Optional[str] = None
    energy_saved: Optional[int] = None
    time_saved: Optional[int] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class SessionCreate(SQLModel):
    """Schema for creating a new session."""
    user_prompt: str
    status: Optional[str] = None
    ai_description: Optional[str] = None
    user_feedback: Optional[str] = None
    final_description: Optional[str] = None
    generated_image_url: Optional[str] = None
    energy_saved: Optional[int] = None
    time_saved: Optional[int] = None


class SessionUpdate(SQLModel):
    """Schema for updating a session."""
    status: Optional[str] = None
    ai_description: Optional[str] = None
    user_feedback: Optional[str] = None
    final_description: Optional[str] = None
    generated_image_url: Optional[str] = None
    energy_saved: Optional[int] = None
    time_saved: Optional[int] = None


class SessionResponse(SQLModel):
    """Schema for session API response."""
    id: int
    user_prompt: str
    status: str
    ai_description: Optional[str]
    user_feedback: Optional[str]
    final_description: Optional[str]
    generated_image_url: Optional[str]
    energy_saved: Optional[int]
    time_saved: Optional[int]
    created_at: datetime
    updated_at: datetime

"""Models package."""
from .state import TRANSITIONS, SessionStatus, can_transition
from .session import Session, SessionCreate, SessionResponse, SessionUpdate, utc_now

__all__ = [
    "Session",
    "SessionCreate",
    "SessionResponse",
    "SessionStatus",
    "SessionUpdate",
    "TRANSITIONS",
    "can_transition",
    "utc_now",
]

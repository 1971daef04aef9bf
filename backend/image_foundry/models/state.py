"""Session status values and the transition graph between them."""
from enum import Enum


class SessionStatus(str, Enum):
    """Status of an image generation session."""
    PROMPT = "prompt"
    DESCRIBING = "describing"
    FEEDBACK = "feedback"
    GENERATING = "generating"
    COMPLETED = "completed"


# Every status change the orchestrator may write, rollbacks included.
# Refinement keeps a session in FEEDBACK and writes no status at all.
TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.PROMPT: frozenset({SessionStatus.DESCRIBING}),
    SessionStatus.DESCRIBING: frozenset({SessionStatus.FEEDBACK, SessionStatus.PROMPT}),
    SessionStatus.FEEDBACK: frozenset({SessionStatus.FEEDBACK, SessionStatus.GENERATING}),
    SessionStatus.GENERATING: frozenset({SessionStatus.COMPLETED, SessionStatus.FEEDBACK}),
    SessionStatus.COMPLETED: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    """Return True if `current -> target` is an edge of the session graph."""
    try:
        source = SessionStatus(current)
        destination = SessionStatus(target)
    except ValueError:
        return False
    return destination in TRANSITIONS[source]

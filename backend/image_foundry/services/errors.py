"""Errors surfaced by the session orchestrator."""
from typing import Optional


class OrchestrationError(Exception):
    """Base class for errors returned to orchestrator callers."""

    def __init__(self, message: str, session_id: Optional[int] = None):
        super().__init__(message)
        self.session_id = session_id


class SessionNotFoundError(OrchestrationError):
    """The referenced session id does not exist."""

    def __init__(self, session_id: int):
        super().__init__(f"Session {session_id} not found", session_id)


class PreconditionFailedError(OrchestrationError):
    """A required input field is absent."""


class InvalidTransitionError(PreconditionFailedError):
    """The session is not in the status the requested step starts from."""

    def __init__(self, session_id: int, current: str, operation: str):
        super().__init__(
            f"Cannot {operation} while session {session_id} is '{current}'",
            session_id,
        )
        self.current = current
        self.operation = operation


class PipelineError(OrchestrationError):
    """A pipeline step failed; the session status was rolled back, retry is safe."""


class DescriptionGenerationError(PipelineError):
    pass


class RefinementError(PipelineError):
    pass


class ImageGenerationError(PipelineError):
    pass

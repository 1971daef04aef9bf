"""Services package."""
from .errors import (
    DescriptionGenerationError,
    ImageGenerationError,
    InvalidTransitionError,
    OrchestrationError,
    PipelineError,
    PreconditionFailedError,
    RefinementError,
    SessionNotFoundError,
)
from .session_service import SessionStore
from .orchestrator import SessionOrchestrator
from .factory import build_orchestrator

__all__ = [
    "DescriptionGenerationError",
    "ImageGenerationError",
    "InvalidTransitionError",
    "OrchestrationError",
    "PipelineError",
    "PreconditionFailedError",
    "RefinementError",
    "SessionNotFoundError",
    "SessionOrchestrator",
    "SessionStore",
    "build_orchestrator",
]

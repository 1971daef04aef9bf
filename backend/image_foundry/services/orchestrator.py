"""Session orchestrator: the prompt -> description -> image state machine."""
import asyncio
import logging
import random
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional, Protocol

from image_foundry.models import (
    Session as SessionModel,
    SessionCreate,
    SessionStatus,
    SessionUpdate,
    can_transition,
)
from .errors import (
    DescriptionGenerationError,
    ImageGenerationError,
    InvalidTransitionError,
    PreconditionFailedError,
    RefinementError,
    SessionNotFoundError,
)
from .session_service import SessionStore


logger = logging.getLogger(__name__)


class Describer(Protocol):
    async def generate(self, user_prompt: str) -> str: ...


class Refiner(Protocol):
    async def refine(self, original_description: str, user_feedback: str) -> str: ...


class ImageArtifact(Protocol):
    url: str


class Illustrator(Protocol):
    async def generate(self, description: str) -> ImageArtifact: ...


@dataclass
class _SessionLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class SessionOrchestrator:
    """
    Owns session status transitions.

    Transitions on one session id run one at a time behind a per-id lock;
    different sessions proceed concurrently. Reads skip the lock so the
    in-progress status written at the start of a step is visible to pollers.
    """

    def __init__(
        self,
        store: SessionStore,
        describer: Describer,
        refiner: Refiner,
        image_generator: Illustrator,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.describer = describer
        self.refiner = refiner
        self.image_generator = image_generator
        self.rng = rng or random.Random()
        self._locks: dict[int, _SessionLock] = {}

    async def create_session(self, user_prompt: str) -> SessionModel:
        if not user_prompt or not user_prompt.strip():
            raise PreconditionFailedError("A user prompt is required")
        session = self.store.create(
            SessionCreate(user_prompt=user_prompt, status=SessionStatus.PROMPT.value)
        )
        logger.info("Created session %s", session.id)
        return session

    async def get_session(self, session_id: int) -> SessionModel:
        return self._require(session_id)

    async def list_sessions(
        self,
        skip: int = 0,
        limit: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[SessionModel]:
        return self.store.list_all(skip=skip, limit=limit, status=status)

    async def count_sessions(self, status: Optional[str] = None) -> int:
        return self.store.count(status=status)

    async def generate_description(self, session_id: int) -> SessionModel:
        async with self._session_lock(session_id):
            session = self._require(session_id)
            if not session.user_prompt:
                raise PreconditionFailedError("No user prompt found", session_id)
            self._ensure_status(session, SessionStatus.PROMPT, "generate a description")

            try:
                self._advance(session_id, SessionStatus.PROMPT, SessionStatus.DESCRIBING)
                description = await self.describer.generate(session.user_prompt)
                updated = self._advance(
                    session_id,
                    SessionStatus.DESCRIBING,
                    SessionStatus.FEEDBACK,
                    ai_description=description,
                )
            except asyncio.CancelledError:
                logger.warning("Description generation cancelled for session %s", session_id)
                self._rollback(session_id, SessionStatus.PROMPT)
                raise
            except Exception as exc:
                logger.exception("Description generation failed for session %s", session_id)
                self._rollback(session_id, SessionStatus.PROMPT)
                raise DescriptionGenerationError(
                    "Failed to generate description", session_id
                ) from exc

            logger.info("Session %s described (%d chars)", session_id, len(description))
            return updated

    async def refine_description(self, session_id: int, user_feedback: str) -> SessionModel:
        async with self._session_lock(session_id):
            session = self._require(session_id)
            if not session.ai_description:
                raise PreconditionFailedError("No AI description found", session_id)
            if not user_feedback or not user_feedback.strip():
                raise PreconditionFailedError("Feedback is required", session_id)
            self._ensure_status(session, SessionStatus.FEEDBACK, "refine the description")

            try:
                refined = await self.refiner.refine(session.ai_description, user_feedback)
                updated = self.store.update(
                    session_id,
                    SessionUpdate(
                        user_feedback=user_feedback,
                        ai_description=refined,
                        final_description=refined,
                    ),
                )
            except Exception as exc:
                logger.exception("Refinement failed for session %s", session_id)
                raise RefinementError("Failed to refine description", session_id) from exc

            if updated is None:
                raise SessionNotFoundError(session_id)
            logger.info("Session %s refined", session_id)
            return updated

    async def generate_image(self, session_id: int) -> SessionModel:
        async with self._session_lock(session_id):
            session = self._require(session_id)
            description = session.final_description or session.ai_description
            if not description:
                raise PreconditionFailedError(
                    "No description found for image generation", session_id
                )
            self._ensure_status(session, SessionStatus.FEEDBACK, "generate an image")

            try:
                self._advance(session_id, SessionStatus.FEEDBACK, SessionStatus.GENERATING)
                image = await self.image_generator.generate(description)
                updated = self._advance(
                    session_id,
                    SessionStatus.GENERATING,
                    SessionStatus.COMPLETED,
                    generated_image_url=image.url,
                    final_description=description,
                    energy_saved=self.rng.randint(50, 79),
                    time_saved=self.rng.randint(30, 59),
                )
            except asyncio.CancelledError:
                logger.warning("Image generation cancelled for session %s", session_id)
                self._rollback(session_id, SessionStatus.FEEDBACK)
                raise
            except Exception as exc:
                logger.exception("Image generation failed for session %s", session_id)
                self._rollback(session_id, SessionStatus.FEEDBACK)
                raise ImageGenerationError("Failed to generate image", session_id) from exc

            logger.info("Session %s completed", session_id)
            return updated

    @asynccontextmanager
    async def _session_lock(self, session_id: int) -> AsyncIterator[None]:
        """
        Hold the lock for one session id.

        Unknown ids are rejected before a lock exists for them, and an id's
        lock is dropped once its last holder or waiter leaves.
        """
        self._require(session_id)
        entry = self._locks.setdefault(session_id, _SessionLock())
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[session_id]

    def _require(self, session_id: int) -> SessionModel:
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def _ensure_status(self, session: SessionModel, expected: SessionStatus, operation: str) -> None:
        if session.status != expected.value:
            raise InvalidTransitionError(session.id, session.status, operation)

    def _advance(
        self,
        session_id: int,
        current: SessionStatus,
        target: SessionStatus,
        **fields,
    ) -> SessionModel:
        if not can_transition(current, target):
            raise InvalidTransitionError(session_id, current.value, f"move to '{target.value}'")
        updated = self.store.update(session_id, SessionUpdate(status=target.value, **fields))
        if updated is None:
            raise SessionNotFoundError(session_id)
        return updated

    def _rollback(self, session_id: int, status: SessionStatus) -> None:
        try:
            self.store.update(session_id, SessionUpdate(status=status.value))
        except Exception:
            logger.exception("Rollback of session %s to '%s' failed", session_id, status.value)

"""Session store for image generation sessions."""
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, col, func, select

from image_foundry.models import (
    Session as SessionModel,
    SessionCreate,
    SessionStatus,
    SessionUpdate,
    utc_now,
)


class SessionStore:
    """CRUD operations on sessions. Holds no business rules."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def create(self, data: SessionCreate) -> SessionModel:
        """Create a new session, defaulting status to `prompt`."""
        fields = data.model_dump(exclude_none=True)
        fields.setdefault("status", SessionStatus.PROMPT.value)
        session = SessionModel(**fields)

        with Session(self.engine) as db:
            db.add(session)
            db.commit()
            db.refresh(session)
            return session

    def get(self, session_id: int) -> Optional[SessionModel]:
        """Get a session by ID."""
        with Session(self.engine) as db:
            return db.get(SessionModel, session_id)

    def list_all(
        self,
        skip: int = 0,
        limit: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[SessionModel]:
        """List sessions, newest first, with optional filtering."""
        with Session(self.engine) as db:
            statement = select(SessionModel).order_by(
                col(SessionModel.created_at).desc(),
                col(SessionModel.id).desc(),
            )

            if status:
                statement = statement.where(SessionModel.status == status)

            statement = statement.offset(skip)
            if limit is not None:
                statement = statement.limit(limit)
            return list(db.exec(statement).all())

    def update(self, session_id: int, data: SessionUpdate) -> Optional[SessionModel]:
        """Shallow-merge the fields set on `data` into a session."""
        with Session(self.engine) as db:
            session = db.get(SessionModel, session_id)
            if not session:
                return None

            update_data = data.model_dump(exclude_unset=True)
            for key, value in update_data.items():
                setattr(session, key, value)

            session.updated_at = utc_now()
            db.add(session)
            db.commit()
            db.refresh(session)
            return session

    def count(self, status: Optional[str] = None) -> int:
        """Count sessions with optional status filter."""
        with Session(self.engine) as db:
            statement = select(func.count()).select_from(SessionModel)
            if status:
                statement = statement.where(SessionModel.status == status)
            return db.exec(statement).one()

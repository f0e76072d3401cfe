"""In-memory workout session storage and the FastAPI dependency for it."""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from fastapi import Request

from formcoach.config import Settings
from formcoach.cv.workout_session import WorkoutSession

logger = logging.getLogger(__name__)


@dataclass
class ManagedSession:
    """A workout session plus the lock that serializes its frames."""
    id: str
    session: WorkoutSession
    lock: threading.Lock = field(default_factory=threading.Lock)


class SessionStore:
    """
    Live sessions keyed by id.

    Sessions hold analyzer state that only makes sense for a continuous
    frame stream, so nothing is persisted.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._sessions: Dict[str, ManagedSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, exercise: str) -> ManagedSession:
        managed = ManagedSession(
            id=str(uuid.uuid4()),
            session=WorkoutSession(exercise, settings=self.settings),
        )
        with self._lock:
            self._sessions[managed.id] = managed
        logger.info(f"Session {managed.id} started: {managed.session.exercise.value}")
        return managed

    def get(self, session_id: str) -> Optional[ManagedSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            managed = self._sessions.pop(session_id, None)
        if managed is None:
            return False
        logger.info(
            f"Session {session_id} ended after {managed.session.frames_processed} frames, "
            f"{managed.session.reps} reps"
        )
        return True

    def clear(self):
        with self._lock:
            self._sessions.clear()


def get_session_store(request: Request) -> SessionStore:
    """Dependency for getting the application's session store."""
    return request.app.state.session_store

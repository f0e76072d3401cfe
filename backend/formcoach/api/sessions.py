"""Workout session API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from formcoach.schemas.session import (
    ExerciseSwitch,
    FrameIn,
    FrameResponse,
    SessionCreate,
    SessionResponse,
)
from formcoach.session_store import ManagedSession, SessionStore, get_session_store

router = APIRouter()


def _get_or_404(session_id: str, store: SessionStore) -> ManagedSession:
    managed = store.get(session_id)
    if managed is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found"
        )
    return managed


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreate,
    store: SessionStore = Depends(get_session_store)
):
    """
    Start a workout session.

    Unknown exercise names start the default exercise; the response reports
    this through fallback_used.
    """
    managed = store.create(payload.exercise)
    return SessionResponse.from_session(managed.id, managed.session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store)
):
    """Get the current state of a session."""
    managed = _get_or_404(session_id, store)
    return SessionResponse.from_session(managed.id, managed.session)


@router.post("/{session_id}/frames", response_model=FrameResponse)
def process_frame(
    session_id: str,
    payload: FrameIn,
    store: SessionStore = Depends(get_session_store)
):
    """Analyze one frame of keypoints. Frames of one session are processed in order."""
    managed = _get_or_404(session_id, store)
    with managed.lock:
        update = managed.session.process_frame(payload.to_frame())
        exercise = managed.session.exercise.value
    return FrameResponse.from_update(managed.id, exercise, update)


@router.put("/{session_id}/exercise", response_model=SessionResponse)
def switch_exercise(
    session_id: str,
    payload: ExerciseSwitch,
    store: SessionStore = Depends(get_session_store)
):
    """Switch to another exercise, starting it from zero."""
    managed = _get_or_404(session_id, store)
    with managed.lock:
        managed.session.switch_exercise(payload.exercise)
        return SessionResponse.from_session(managed.id, managed.session)


@router.post("/{session_id}/reset", response_model=SessionResponse)
def reset_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store)
):
    """Reset reps, state and timers of the current exercise."""
    managed = _get_or_404(session_id, store)
    with managed.lock:
        managed.session.reset()
        return SessionResponse.from_session(managed.id, managed.session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store)
):
    """End a session."""
    if not store.delete(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)

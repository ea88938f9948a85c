"""Recommendation editor sessions: mount, edit fields and song rows, submit, close.

All handlers are async so every session is only ever touched from the event loop.
"""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from ratify.api.state import AppState, EditorSession, get_state
from ratify.forms.controller import SubmitOutcome
from ratify.forms.errors import UnknownFieldError

router = APIRouter()


class OpenEditorBody(BaseModel):
    """Omit recommendation_id to create a new recommendation."""
    recommendation_id: Optional[str] = None


class FieldChangeBody(BaseModel):
    name: str
    value: Any = None


class FieldBlurBody(BaseModel):
    name: str


def _session(session_id: str, state: AppState) -> EditorSession:
    session = state.get_editor(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Editor session not found")
    return session


def _view(session: EditorSession) -> dict:
    return {
        "session_id": session.session_id,
        "location": session.location,
        "view": session.controller.render(),
    }


def _field(session: EditorSession, name: str):
    try:
        return session.controller.field(name)
    except UnknownFieldError:
        raise HTTPException(status_code=404, detail=f"Unknown field: {name}")


@router.post("/", status_code=201)
async def open_editor(
    body: OpenEditorBody | None = Body(None),
    state: AppState = Depends(get_state),
):
    """Mount an editor; in edit mode the record and genres are loaded before returning."""
    session = state.open_editor(body.recommendation_id if body else None)
    await session.controller.mount()
    return _view(session)


@router.get("/{session_id}")
async def get_editor(session_id: str, state: AppState = Depends(get_state)):
    """Return the current editor view."""
    return _view(_session(session_id, state))


@router.patch("/{session_id}/fields")
async def change_field(session_id: str, body: FieldChangeBody, state: AppState = Depends(get_state)):
    """Apply a user edit to one field; `accepted` is False when the input was filtered out."""
    session = _session(session_id, state)
    accepted = _field(session, body.name).change(body.value)
    return {"accepted": accepted, **_view(session)}


@router.post("/{session_id}/fields/blur")
async def blur_field(session_id: str, body: FieldBlurBody, state: AppState = Depends(get_state)):
    """Mark a field touched."""
    session = _session(session_id, state)
    _field(session, body.name).blur()
    return _view(session)


@router.post("/{session_id}/rows")
async def add_row(session_id: str, state: AppState = Depends(get_state)):
    """Append an empty song row."""
    session = _session(session_id, state)
    session.controller.add_row()
    return _view(session)


@router.delete("/{session_id}/rows")
async def remove_last_row(session_id: str, state: AppState = Depends(get_state)):
    """Remove the last song row (no-op when there are none)."""
    session = _session(session_id, state)
    session.controller.remove_row()
    return _view(session)


@router.delete("/{session_id}/rows/{index}")
async def remove_row(session_id: str, index: int, state: AppState = Depends(get_state)):
    """Remove a specific song row and its values."""
    session = _session(session_id, state)
    try:
        session.controller.remove_row(index)
    except IndexError:
        raise HTTPException(status_code=404, detail=f"No song row {index}")
    return _view(session)


@router.post("/{session_id}/submit")
async def submit(session_id: str, state: AppState = Depends(get_state)):
    """Save the recommendation. 409 when the form is not dirty and valid (or a save is running).

    A successful save navigates away, which closes the session; the response
    carries its final view and `location`.
    """
    session = _session(session_id, state)
    outcome = await session.controller.submit()
    if outcome is SubmitOutcome.REJECTED:
        raise HTTPException(status_code=409, detail="Nothing to save or required fields missing")
    return {"outcome": outcome.value, **_view(session)}


@router.delete("/{session_id}", status_code=204)
async def close_editor(session_id: str, state: AppState = Depends(get_state)):
    """Unmount the editor; any load or save still running is ignored when it finishes."""
    if not state.close_editor(session_id):
        raise HTTPException(status_code=404, detail="Editor session not found")

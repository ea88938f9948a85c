"""Toast slot: the client polls for the latest requested notification."""
from fastapi import APIRouter, Depends

from ratify.api.state import AppState, get_state

router = APIRouter()


@router.get("")
def take_notification(state: AppState = Depends(get_state)):
    """Return the pending toast and mark it displayed; `toast` is None when nothing is pending."""
    toast = state.notifications.consume()
    return {"toast": toast.to_dict() if toast else None, "sequence": state.notifications.sequence}


@router.delete("", status_code=204)
def dismiss_notification(state: AppState = Depends(get_state)):
    """Hide the toast currently on screen."""
    state.notifications.dismiss()

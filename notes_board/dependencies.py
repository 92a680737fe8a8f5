"""
FastAPI dependencies for Notes Board
"""
from fastapi import HTTPException, Request, status

from .application.services import NotePublisher, NoteStore


def get_note_store(request: Request) -> NoteStore:
    """Note store created during application startup"""
    store = getattr(request.app.state, "note_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notes store not ready",
        )
    return store


def get_publisher(request: Request) -> NotePublisher:
    """Publisher created during application startup"""
    publisher = getattr(request.app.state, "publisher", None)
    if publisher is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notes store not ready",
        )
    return publisher

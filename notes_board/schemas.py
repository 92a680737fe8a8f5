"""
Pydantic schemas for Notes Board
"""
from dataclasses import asdict
from typing import List, Optional

from pydantic import BaseModel

from .domain.models import Note, NoteContent, TrendingNote


class NoteResponse(BaseModel):
    """Note as exposed to the presentation layer"""
    id: int
    content: str
    author: str
    created_at: int
    read_count: int
    content_hash: str
    has_media: bool = False
    media_hash: Optional[str] = None
    media_mime: Optional[str] = None
    media_size: Optional[int] = None
    thumbnail_hash: Optional[str] = None

    @classmethod
    def from_note(cls, note: Note) -> "NoteResponse":
        return cls(**note.to_dict())


class TrendingNoteResponse(NoteResponse):
    """Note with its trending position"""
    rank: int
    trend_score: float

    @classmethod
    def from_trending(cls, note: TrendingNote) -> "TrendingNoteResponse":
        return cls(**asdict(note))


class NotesResponse(BaseModel):
    """Held note collection and store state"""
    notes: List[NoteResponse]
    total: int
    has_more: bool
    is_loading: bool
    error: Optional[str] = None
    mode: str


class TrendingResponse(BaseModel):
    """Trending notes, rank 1 first"""
    notes: List[TrendingNoteResponse]


class NoteContentResponse(BaseModel):
    """Note text and media locators"""
    note_id: int
    content: str
    media_url: Optional[str] = None
    thumbnail_url: Optional[str] = None

    @classmethod
    def from_content(cls, content: NoteContent) -> "NoteContentResponse":
        return cls(**asdict(content))


class CreateNoteResponse(BaseModel):
    """Result of publishing a note"""
    message: str
    note: Optional[NoteResponse] = None


class MessageResponse(BaseModel):
    """Generic message response"""
    message: str


class ErrorResponse(BaseModel):
    """Error response"""
    detail: str

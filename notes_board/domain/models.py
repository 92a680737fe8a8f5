"""
Domain models - Core business entities
"""
import time
from dataclasses import dataclass, fields
from typing import Optional


def now_ms() -> int:
    """Current instant in milliseconds since epoch"""
    return int(time.time() * 1000)


@dataclass
class MediaAttachment:
    """Media fields attached to a note at creation"""
    media_hash: str
    media_mime: str
    media_size: int
    thumbnail_hash: str = ""


@dataclass
class Note:
    """Note domain model"""
    id: int
    content: str
    author: str
    created_at: int  # milliseconds since epoch
    read_count: int
    content_hash: str
    has_media: bool = False
    media_hash: Optional[str] = None
    media_mime: Optional[str] = None
    media_size: Optional[int] = None
    thumbnail_hash: Optional[str] = None

    def with_read(self) -> "Note":
        """Copy of this note with one more read"""
        return Note(**{**self.to_dict(), "read_count": self.read_count + 1})

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(Note)}


@dataclass
class TrendingNote(Note):
    """Note with its position in the trending ranking"""
    rank: int = 0
    trend_score: float = 0.0

    @classmethod
    def from_note(cls, note: Note, trend_score: float, rank: int = 0) -> "TrendingNote":
        return cls(**note.to_dict(), rank=rank, trend_score=trend_score)


@dataclass
class TxRef:
    """Reference to a submitted ledger transaction"""
    hash: str
    sender: Optional[str] = None


@dataclass
class WalletAccount:
    """Connected wallet account"""
    address: str
    public_key: str = ""


@dataclass
class NoteContent:
    """Note text and media locator loaded from the content store"""
    note_id: int
    content: str
    media_url: Optional[str] = None
    thumbnail_url: Optional[str] = None


@dataclass
class MediaUpload:
    """Raw media file submitted with a new note"""
    data: bytes
    mime_type: str
    filename: str = "media"

    @property
    def size(self) -> int:
        return len(self.data)

"""
Application services - Note state synchronization
"""
import logging
import secrets
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Callable, Iterable, List, Optional

from ..config import Settings, StoreMode
from ..domain.models import (
    MediaAttachment,
    MediaUpload,
    Note,
    NoteContent,
    TrendingNote,
    now_ms,
)
from ..domain.normalizer import normalize_record
from ..domain.repositories import IContentStore, ILedgerClient
from ..domain.sample_data import sample_notes
from ..domain.trending import ONE_DAY_MS, RECENCY_BOOST, TRENDING_LIMIT, rank_trending
from ..domain.validation import validate_content, validate_media
from ..exceptions import ConnectivityError, NotFoundError, NotesBoardError, StateError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


class NoteStore(ABC):
    """
    Holds the live note collection

    Every command clears `error` when it starts, keeps `is_loading` raised
    while it runs, and on failure stores a readable message in `error`
    before re-raising. A failed command never leaves a partially updated
    collection behind.
    """

    mode: StoreMode

    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        clock: Callable[[], int] = now_ms,
        trending_limit: int = TRENDING_LIMIT,
        trending_window_ms: int = ONE_DAY_MS,
        recency_boost: float = RECENCY_BOOST
    ):
        self.page_size = page_size
        self.clock = clock
        self.trending_limit = trending_limit
        self.trending_window_ms = trending_window_ms
        self.recency_boost = recency_boost

        self._notes: List[Note] = []
        self._error: Optional[str] = None
        self._has_more = False
        self._in_flight = 0
        self._alive = True

    @property
    def notes(self) -> List[Note]:
        return list(self._notes)

    @property
    def trending_notes(self) -> List[TrendingNote]:
        """Ranking of the current collection, recomputed on every access"""
        return rank_trending(
            self._notes,
            now=self.clock(),
            limit=self.trending_limit,
            window_ms=self.trending_window_ms,
            recency_boost=self.recency_boost,
        )

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def has_more(self) -> bool:
        return self._has_more

    @property
    def total_notes(self) -> int:
        return len(self._notes)

    @property
    def is_closed(self) -> bool:
        return not self._alive

    async def start(self) -> None:
        """Initial load, called once after construction"""

    def close(self) -> None:
        """Tear down; results of calls still in flight are discarded"""
        self._alive = False
        logger.info(f"{type(self).__name__} closed")

    def ensure_can_create(self) -> None:
        """Raise StateError if create_note cannot succeed right now"""
        if not self._alive:
            raise StateError("Notes store is closed")

    def find(self, note_id: int) -> Optional[Note]:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    async def get_note(self, note_id: int) -> Note:
        """Get a note from the held collection"""
        note = self.find(note_id)
        if note is None:
            raise NotFoundError(f"Note {note_id} not found")
        return note

    @asynccontextmanager
    async def _operation(self, failure_message: str):
        """Run one command with loading/error bookkeeping"""
        if not self._alive:
            raise StateError("Notes store is closed")

        self._in_flight += 1
        self._error = None
        try:
            yield
        except NotesBoardError as e:
            logger.error(f"{failure_message}: {e.message}")
            if self._alive:
                self._error = e.message
            raise
        except Exception as e:
            logger.error(f"{failure_message}: {e}")
            message = str(e) or failure_message
            if self._alive:
                self._error = message
            raise ConnectivityError(message) from e
        finally:
            self._in_flight -= 1

    @abstractmethod
    async def create_note(
        self,
        content: str,
        content_hash: str,
        media: Optional[MediaAttachment] = None
    ) -> Optional[Note]:
        """Create a note whose text is already stored under `content_hash`"""
        pass

    @abstractmethod
    async def read_note(self, note_id: int) -> Optional[Note]:
        """Record one read of a note; unknown ids are ignored"""
        pass

    @abstractmethod
    async def refresh(self) -> None:
        """Reload the first page"""
        pass

    @abstractmethod
    async def load_more(self) -> None:
        """Append the next page"""
        pass


class OptimisticNoteStore(NoteStore):
    """Applies every mutation locally without waiting for the ledger"""

    mode = StoreMode.OPTIMISTIC_LOCAL

    def __init__(
        self,
        initial_notes: Optional[Iterable[Note]] = None,
        author_factory: Optional[Callable[[], str]] = None,
        **kwargs
    ):
        super().__init__(**kwargs)
        self._notes = list(initial_notes or [])
        self.author_factory = author_factory or self._placeholder_author

    @staticmethod
    def _placeholder_author() -> str:
        return f"0x{secrets.token_hex(4)}..."

    def _next_id(self) -> int:
        return max([note.id for note in self._notes] + [0]) + 1

    async def create_note(
        self,
        content: str,
        content_hash: str,
        media: Optional[MediaAttachment] = None
    ) -> Optional[Note]:
        async with self._operation("Failed to create note"):
            note = Note(
                id=self._next_id(),
                content=content,
                author=self.author_factory(),
                created_at=self.clock(),
                read_count=0,
                content_hash=content_hash,
            )
            if media:
                note.has_media = True
                note.media_hash = media.media_hash
                note.media_mime = media.media_mime
                note.media_size = media.media_size
                note.thumbnail_hash = media.thumbnail_hash or None

            self._notes = [note] + self._notes
            logger.info(f"Created note {note.id} locally")
            return note

    async def read_note(self, note_id: int) -> Optional[Note]:
        async with self._operation("Failed to read note"):
            if self.find(note_id) is None:
                logger.debug(f"Read of unknown note {note_id} ignored")
                return None

            updated = None
            notes = []
            for note in self._notes:
                if note.id == note_id:
                    note = updated = note.with_read()
                notes.append(note)
            self._notes = notes
            return updated

    async def refresh(self) -> None:
        logger.debug("Refresh is a no-op in optimistic-local mode")

    async def load_more(self) -> None:
        logger.debug("Pagination is disabled in optimistic-local mode")


class LedgerNoteStore(NoteStore):
    """Mutates through the ledger and resynchronizes from it afterwards"""

    mode = StoreMode.LEDGER_BACKED

    def __init__(self, ledger: ILedgerClient, **kwargs):
        super().__init__(**kwargs)
        self.ledger = ledger
        self._has_more = True

    def ensure_can_create(self) -> None:
        super().ensure_can_create()
        if not self.ledger.can_submit:
            raise StateError("Wallet not connected")

    async def start(self) -> None:
        try:
            await self.refresh()
        except NotesBoardError as e:
            logger.error(f"Initial note load failed: {e.message}")

    async def _fetch_page(self, offset: int) -> Optional[List[Note]]:
        records = await self.ledger.fetch_recent_notes(self.page_size, offset)
        if not self._alive:
            logger.debug("Store closed during fetch, discarding page")
            return None
        return [normalize_record(record) for record in records]

    async def _reload_first_page(self) -> None:
        page = await self._fetch_page(0)
        if page is None:
            return
        self._notes = page
        self._has_more = len(page) == self.page_size
        logger.info(f"Loaded {len(page)} notes (has_more={self._has_more})")

    async def create_note(
        self,
        content: str,
        content_hash: str,
        media: Optional[MediaAttachment] = None
    ) -> Optional[Note]:
        async with self._operation("Failed to create note"):
            if media:
                tx = await self.ledger.submit_create_note_with_media(
                    content,
                    content_hash,
                    media.media_hash,
                    media.media_mime,
                    media.media_size,
                    media.thumbnail_hash,
                )
            else:
                tx = await self.ledger.submit_create_note(content, content_hash)

            await self.ledger.wait_for_confirmation(tx)
            logger.info(f"Note creation confirmed in transaction {tx.hash}")
            await self._reload_first_page()
            return None

    async def read_note(self, note_id: int) -> Optional[Note]:
        async with self._operation("Failed to read note"):
            if self.find(note_id) is None:
                logger.debug(f"Read of unknown note {note_id} ignored")
                return None

            tx = await self.ledger.submit_read_note(note_id)
            await self.ledger.wait_for_confirmation(tx)
            logger.info(f"Read of note {note_id} confirmed in transaction {tx.hash}")
            await self._reload_first_page()
            return self.find(note_id)

    async def refresh(self) -> None:
        async with self._operation("Failed to fetch notes"):
            await self._reload_first_page()

    async def load_more(self) -> None:
        if not self._has_more or self.is_loading:
            logger.debug("load_more skipped: no more notes or fetch in flight")
            return

        async with self._operation("Failed to fetch more notes"):
            page = await self._fetch_page(len(self._notes))
            if page is None:
                return
            self._notes = self._notes + page
            self._has_more = len(page) == self.page_size
            logger.info(f"Appended {len(page)} notes (has_more={self._has_more})")

    async def get_note(self, note_id: int) -> Note:
        """Get a note, falling back to the ledger when it is not held"""
        note = self.find(note_id)
        if note is not None:
            return note

        try:
            records = await self.ledger.fetch_notes_by_ids([note_id])
        except NotesBoardError:
            raise
        except Exception as e:
            logger.error(f"Failed to fetch note {note_id}: {e}")
            raise ConnectivityError(str(e) or "Failed to fetch note") from e

        for record in records:
            note = normalize_record(record)
            if note.id == note_id:
                return note
        raise NotFoundError(f"Note {note_id} not found")


def build_note_store(
    settings: Settings,
    ledger: Optional[ILedgerClient] = None,
    clock: Callable[[], int] = now_ms
) -> NoteStore:
    """Pick the store implementation for the configured mode"""
    mode = settings.store_mode
    options = dict(
        page_size=settings.PAGE_SIZE,
        clock=clock,
        trending_limit=settings.TRENDING_LIMIT,
        trending_window_ms=settings.TRENDING_WINDOW_MS,
        recency_boost=settings.TRENDING_RECENCY_BOOST,
    )

    if mode is StoreMode.OPTIMISTIC_LOCAL:
        seed = sample_notes(clock()) if settings.SEED_SAMPLE_NOTES else None
        logger.info("Using optimistic-local note store")
        return OptimisticNoteStore(initial_notes=seed, **options)

    if ledger is None:
        raise ValueError("A ledger client is required in ledger-backed mode")
    logger.info("Using ledger-backed note store")
    return LedgerNoteStore(ledger, **options)


class NotePublisher:
    """Uploads note content and media, then hands the note to the store"""

    def __init__(
        self,
        store: NoteStore,
        content_store: IContentStore,
        max_content_length: int = 500,
        allowed_media_types: Iterable[str] = ("video/mp4", "video/webm"),
        max_media_size: int = 50 * 1024 * 1024
    ):
        self.store = store
        self.content_store = content_store
        self.max_content_length = max_content_length
        self.allowed_media_types = list(allowed_media_types)
        self.max_media_size = max_media_size

    @classmethod
    def from_settings(
        cls,
        store: NoteStore,
        content_store: IContentStore,
        settings: Settings
    ) -> "NotePublisher":
        return cls(
            store,
            content_store,
            max_content_length=settings.MAX_CONTENT_LENGTH,
            allowed_media_types=settings.ALLOWED_MEDIA_TYPES,
            max_media_size=settings.MAX_MEDIA_SIZE,
        )

    async def publish(
        self,
        content: str,
        media: Optional[MediaUpload] = None
    ) -> Optional[Note]:
        """
        Publish a new note

        Args:
            content: Note text
            media: Optional video attachment

        Returns:
            The created note in optimistic-local mode, None in ledger-backed
            mode (the note shows up through the store's refresh)
        """
        validate_content(content, self.max_content_length)
        if media:
            validate_media(
                media.mime_type,
                media.size,
                self.allowed_media_types,
                self.max_media_size,
            )
        self.store.ensure_can_create()

        try:
            content_hash = await self.content_store.put_text(content)
            attachment = None
            if media:
                media_hash = await self.content_store.put_blob(
                    media.data,
                    media.mime_type,
                    media.filename,
                )
                attachment = MediaAttachment(
                    media_hash=media_hash,
                    media_mime=media.mime_type,
                    media_size=media.size,
                )
        except NotesBoardError:
            raise
        except Exception as e:
            logger.error(f"Content upload failed: {e}")
            raise ConnectivityError(str(e) or "Upload failed") from e

        return await self.store.create_note(content, content_hash, attachment)

    async def load_content(self, note: Note) -> NoteContent:
        """Load note text and media locators from the content store"""
        try:
            text = await self.content_store.get_text(note.content_hash)
        except NotesBoardError:
            raise
        except Exception as e:
            logger.error(f"Content download failed for note {note.id}: {e}")
            raise ConnectivityError(str(e) or "Download failed") from e

        media_url = None
        thumbnail_url = None
        if note.has_media and note.media_hash:
            media_url = self.content_store.resolve_url(note.media_hash)
            if note.thumbnail_hash:
                thumbnail_url = self.content_store.resolve_url(note.thumbnail_hash)

        return NoteContent(
            note_id=note.id,
            content=text,
            media_url=media_url,
            thumbnail_url=thumbnail_url,
        )

"""
FastAPI application for Notes Board
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .application.services import NotePublisher, NoteStore, build_note_store
from .config import Settings, StoreMode, settings as default_settings
from .dependencies import get_note_store, get_publisher
from .domain.models import MediaUpload
from .domain.repositories import IContentStore, ILedgerClient
from .exceptions import (
    ConnectivityError,
    NotFoundError,
    NotesBoardError,
    StateError,
    ValidationError,
)
from .infrastructure.content_store import ContentStoreClient
from .infrastructure.ledger_client import LedgerClient
from .infrastructure.wallet import RemoteWallet
from .schemas import (
    CreateNoteResponse,
    MessageResponse,
    NoteContentResponse,
    NoteResponse,
    NotesResponse,
    TrendingNoteResponse,
    TrendingResponse,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    StateError: status.HTTP_409_CONFLICT,
    ConnectivityError: status.HTTP_502_BAD_GATEWAY,
}


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.INFO if not settings.DEBUG else logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    settings: Settings = default_settings,
    ledger: Optional[ILedgerClient] = None,
    content_store: Optional[IContentStore] = None
) -> FastAPI:
    """
    Build the application

    Collaborators passed in are used as-is; missing ones are created from
    settings and owned by the application lifespan.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        logger.info("Starting Notes Board...")
        owned = []

        store_client = content_store
        if store_client is None:
            store_client = ContentStoreClient(
                settings.CONTENT_STORE_URL,
                settings.CONTENT_DOWNLOAD_URL,
                api_key=settings.CONTENT_STORE_API_KEY,
            )
            await store_client.start()
            owned.append(store_client)

        ledger_client = ledger
        if ledger_client is None and settings.store_mode is StoreMode.LEDGER_BACKED:
            wallet = RemoteWallet(settings.WALLET_SIGNER_URL, address=settings.WALLET_ADDRESS)
            await wallet.start()
            owned.append(wallet)
            try:
                await wallet.connect()
            except NotesBoardError as e:
                logger.warning(f"Wallet not connected: {e.message}")

            ledger_client = LedgerClient(
                wallet,
                settings.LEDGER_NODE_URL,
                settings.CONTRACT_ADDRESS,
                module_name=settings.MODULE_NAME,
                timeout=settings.LEDGER_TIMEOUT,
                confirmation_timeout=settings.CONFIRMATION_TIMEOUT,
            )
            await ledger_client.start()
            owned.append(ledger_client)

        store = build_note_store(settings, ledger_client)
        await store.start()
        app.state.note_store = store
        app.state.publisher = NotePublisher.from_settings(store, store_client, settings)

        logger.info(f"Notes Board started in {store.mode.value} mode")

        yield

        logger.info("Shutting down Notes Board...")
        store.close()
        for client in reversed(owned):
            await client.stop()
        logger.info("Notes Board shut down successfully")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Anonymous note board - ledger sync and trending notes",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotesBoardError)
    async def notes_board_error_handler(request: Request, exc: NotesBoardError):
        code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        return JSONResponse(status_code=code, content={"detail": exc.message})

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    # Note endpoints
    @app.get("/api/v1/notes", response_model=NotesResponse, tags=["Notes"])
    async def list_notes(store: NoteStore = Depends(get_note_store)):
        """Held notes, most recent first"""
        return NotesResponse(
            notes=[NoteResponse.from_note(note) for note in store.notes],
            total=store.total_notes,
            has_more=store.has_more,
            is_loading=store.is_loading,
            error=store.error,
            mode=store.mode.value,
        )

    @app.get("/api/v1/notes/trending", response_model=TrendingResponse, tags=["Notes"])
    async def trending_notes(store: NoteStore = Depends(get_note_store)):
        """Top notes by trend score"""
        return TrendingResponse(
            notes=[TrendingNoteResponse.from_trending(note) for note in store.trending_notes]
        )

    @app.post(
        "/api/v1/notes",
        response_model=CreateNoteResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["Notes"],
    )
    async def create_note(
        content: str = Form(...),
        media: Optional[UploadFile] = File(None),
        publisher: NotePublisher = Depends(get_publisher),
    ):
        """
        Publish a note

        - Text goes to the content store, optional video as a separate blob
        - In ledger-backed mode the note appears after the ledger confirms it
        """
        upload = None
        if media is not None:
            upload = MediaUpload(
                data=await media.read(),
                mime_type=media.content_type or "",
                filename=media.filename or "media",
            )

        note = await publisher.publish(content, upload)
        return CreateNoteResponse(
            message="Note created successfully!",
            note=NoteResponse.from_note(note) if note else None,
        )

    @app.post("/api/v1/notes/refresh", response_model=MessageResponse, tags=["Notes"])
    async def refresh_notes(store: NoteStore = Depends(get_note_store)):
        await store.refresh()
        return MessageResponse(message=f"Loaded {store.total_notes} notes")

    @app.post("/api/v1/notes/more", response_model=MessageResponse, tags=["Notes"])
    async def load_more_notes(store: NoteStore = Depends(get_note_store)):
        await store.load_more()
        return MessageResponse(message=f"Holding {store.total_notes} notes")

    @app.get("/api/v1/notes/{note_id}", response_model=NoteResponse, tags=["Notes"])
    async def get_note(note_id: int, store: NoteStore = Depends(get_note_store)):
        return NoteResponse.from_note(await store.get_note(note_id))

    @app.get(
        "/api/v1/notes/{note_id}/content",
        response_model=NoteContentResponse,
        tags=["Notes"],
    )
    async def get_note_content(
        note_id: int,
        store: NoteStore = Depends(get_note_store),
        publisher: NotePublisher = Depends(get_publisher),
    ):
        """Note text from the content store plus media URLs"""
        note = await store.get_note(note_id)
        return NoteContentResponse.from_content(await publisher.load_content(note))

    @app.post("/api/v1/notes/{note_id}/read", response_model=MessageResponse, tags=["Notes"])
    async def read_note(note_id: int, store: NoteStore = Depends(get_note_store)):
        """Count one read of a note"""
        await store.read_note(note_id)
        return MessageResponse(message=f"Note {note_id} read")

    return app


configure_logging(default_settings)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "notes_board.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
    )

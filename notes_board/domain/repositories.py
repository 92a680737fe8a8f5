"""
Collaborator interfaces - Define contracts for ledger, content store and wallet
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from .models import TxRef, WalletAccount


class IWalletProvider(ABC):
    """Wallet provider interface"""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Whether an account is connected"""
        pass

    @property
    @abstractmethod
    def current_account(self) -> Optional[WalletAccount]:
        """Connected account, or None"""
        pass

    @abstractmethod
    async def sign_and_submit(self, payload: Dict[str, Any]) -> TxRef:
        """Sign a transaction payload and submit it to the ledger"""
        pass


class ILedgerClient(ABC):
    """Ledger client interface"""

    @property
    @abstractmethod
    def can_submit(self) -> bool:
        """Whether transactions can be signed right now"""
        pass

    @abstractmethod
    async def submit_create_note(self, content: str, content_hash: str) -> TxRef:
        """Submit a note-creation transaction"""
        pass

    @abstractmethod
    async def submit_create_note_with_media(
        self,
        content: str,
        content_hash: str,
        media_hash: str,
        media_mime: str,
        media_size: int,
        thumbnail_hash: str
    ) -> TxRef:
        """Submit a note-creation transaction carrying media fields"""
        pass

    @abstractmethod
    async def submit_read_note(self, note_id: int) -> TxRef:
        """Submit a read transaction for a note"""
        pass

    @abstractmethod
    async def wait_for_confirmation(self, tx: TxRef) -> None:
        """Wait until the transaction is committed; raise if it failed"""
        pass

    @abstractmethod
    async def fetch_recent_notes(self, limit: int, offset: int) -> List[Dict[str, Any]]:
        """Fetch raw note records, most recent first"""
        pass

    @abstractmethod
    async def fetch_notes_by_ids(self, ids: Sequence[int]) -> List[Dict[str, Any]]:
        """Fetch raw note records by id"""
        pass


class IContentStore(ABC):
    """Content store interface"""

    @abstractmethod
    async def put_text(self, content: str) -> str:
        """Store note text, return its content hash"""
        pass

    @abstractmethod
    async def put_blob(self, data: bytes, mime_type: str, filename: str = "media") -> str:
        """Store a binary blob, return its content hash"""
        pass

    @abstractmethod
    async def get_text(self, content_hash: str) -> str:
        """Load note text by content hash"""
        pass

    @abstractmethod
    def resolve_url(self, content_hash: str) -> str:
        """Public download locator for a blob"""
        pass

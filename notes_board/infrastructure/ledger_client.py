"""
Ledger client - note transactions and view queries against a ledger node
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..domain.models import TxRef
from ..domain.repositories import ILedgerClient, IWalletProvider
from ..exceptions import ConnectivityError, StateError
from .http import HTTPClientBase

logger = logging.getLogger(__name__)


class LedgerClient(HTTPClientBase, ILedgerClient):
    """REST client for the notes contract on the ledger node"""

    name = "Ledger"

    def __init__(
        self,
        wallet: IWalletProvider,
        node_url: str,
        contract_address: str,
        module_name: str = "notes",
        timeout: float = 10.0,
        confirmation_timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(node_url, timeout=timeout, transport=transport)
        self.wallet = wallet
        self.contract_address = contract_address
        self.module_name = module_name
        self.confirmation_timeout = confirmation_timeout

    @property
    def can_submit(self) -> bool:
        return self.wallet.is_connected

    def _function(self, name: str) -> str:
        return f"{self.contract_address}::{self.module_name}::{name}"

    async def _submit(self, function: str, arguments: List[Any]) -> TxRef:
        if not self.can_submit:
            raise StateError("Wallet not connected")

        payload = {
            "type": "entry_function_payload",
            "function": self._function(function),
            "arguments": arguments,
            "type_arguments": [],
        }
        tx = await self.wallet.sign_and_submit(payload)
        logger.info(f"Submitted {function} as transaction {tx.hash}")
        return tx

    async def _view(self, function: str, arguments: List[Any]) -> List[Any]:
        result = await self._make_request(
            "POST",
            "/v1/view",
            json={
                "function": self._function(function),
                "type_arguments": [],
                "arguments": arguments,
            },
        )
        if not isinstance(result, list):
            raise ConnectivityError(f"Unexpected response from view {function}")
        return result

    async def submit_create_note(self, content: str, content_hash: str) -> TxRef:
        return await self._submit("create_note", [content, content_hash])

    async def submit_create_note_with_media(
        self,
        content: str,
        content_hash: str,
        media_hash: str,
        media_mime: str,
        media_size: int,
        thumbnail_hash: str
    ) -> TxRef:
        return await self._submit(
            "create_note_with_media",
            [content, content_hash, media_hash, media_mime, media_size, thumbnail_hash],
        )

    async def submit_read_note(self, note_id: int) -> TxRef:
        return await self._submit("read_note", [note_id])

    async def wait_for_confirmation(self, tx: TxRef) -> None:
        result = await self._make_request(
            "GET",
            f"/v1/transactions/wait_by_hash/{tx.hash}",
            timeout=self.confirmation_timeout,
        )
        if not isinstance(result, dict) or result.get("type") == "pending_transaction":
            raise ConnectivityError(f"Transaction {tx.hash} was not confirmed")
        if not result.get("success", False):
            raise ConnectivityError(result.get("vm_status") or f"Transaction {tx.hash} failed")
        logger.info(f"Transaction {tx.hash} confirmed")

    async def fetch_notes_by_ids(self, ids: Sequence[int]) -> List[Dict[str, Any]]:
        if not ids:
            return []
        result = await self._view("get_notes_by_ids", [[str(i) for i in ids]])
        return list(result[0] or []) if result else []

    async def fetch_recent_notes(self, limit: int, offset: int) -> List[Dict[str, Any]]:
        result = await self._view("get_recent_note_ids", [str(limit), str(offset)])
        ids = list(result[0] or []) if result else []
        if not ids:
            return []
        return await self.fetch_notes_by_ids(ids)

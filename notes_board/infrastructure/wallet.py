"""
Wallet provider backed by a remote signing service
"""
import logging
from typing import Any, Dict, Optional

import httpx

from ..domain.models import TxRef, WalletAccount
from ..domain.repositories import IWalletProvider
from ..exceptions import ConnectivityError, StateError
from .http import HTTPClientBase

logger = logging.getLogger(__name__)


class RemoteWallet(HTTPClientBase, IWalletProvider):
    """Signs and submits transactions through a signer service holding the key"""

    name = "Wallet signer"

    def __init__(
        self,
        signer_url: str,
        address: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(signer_url, timeout=timeout, transport=transport)
        self.address = address
        self._account: Optional[WalletAccount] = None

    @property
    def is_connected(self) -> bool:
        return self._account is not None

    @property
    def current_account(self) -> Optional[WalletAccount]:
        return self._account

    async def connect(self) -> WalletAccount:
        """Ask the signer for its account"""
        params = {"address": self.address} if self.address else None
        data = await self._make_request("GET", "/v1/account", params=params)
        if not isinstance(data, dict) or not data.get("address"):
            raise ConnectivityError("Wallet signer returned no account")

        self._account = WalletAccount(
            address=str(data["address"]),
            public_key=str(data.get("public_key", "")),
        )
        logger.info(f"Wallet connected: {self._account.address}")
        return self._account

    def disconnect(self) -> None:
        self._account = None
        logger.info("Wallet disconnected")

    async def sign_and_submit(self, payload: Dict[str, Any]) -> TxRef:
        if not self._account:
            raise StateError("Wallet not connected")

        data = await self._make_request(
            "POST",
            "/v1/sign_and_submit",
            json={"sender": self._account.address, "payload": payload},
        )
        if not isinstance(data, dict) or not data.get("hash"):
            raise ConnectivityError("Transaction failed")
        return TxRef(hash=str(data["hash"]), sender=self._account.address)

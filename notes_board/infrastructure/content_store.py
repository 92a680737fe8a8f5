"""
Content store client - hash-addressed blob storage for note text and media
"""
import logging
from typing import Optional
from urllib.parse import quote

import httpx

from ..domain.repositories import IContentStore
from ..exceptions import ConnectivityError
from .http import HTTPClientBase

logger = logging.getLogger(__name__)


class ContentStoreClient(HTTPClientBase, IContentStore):
    """HTTP client for the content store"""

    name = "Content store"

    def __init__(
        self,
        base_url: str,
        download_base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        super().__init__(base_url, timeout=timeout, headers=headers, transport=transport)
        self.download_base_url = download_base_url.rstrip("/")

    @staticmethod
    def _field(data, key: str) -> str:
        if not isinstance(data, dict) or not data.get(key):
            raise ConnectivityError(f"Content store response missing '{key}'")
        return str(data[key])

    async def put_text(self, content: str) -> str:
        data = await self._make_request("POST", "/blobs/text", json={"content": content})
        content_hash = self._field(data, "hash")
        logger.info(f"Stored note text as {content_hash}")
        return content_hash

    async def put_blob(self, data: bytes, mime_type: str, filename: str = "media") -> str:
        result = await self._make_request(
            "POST",
            "/blobs",
            files={"file": (filename, data, mime_type)},
        )
        blob_hash = self._field(result, "hash")
        logger.info(f"Stored {len(data)} byte blob as {blob_hash}")
        return blob_hash

    async def get_text(self, content_hash: str) -> str:
        data = await self._make_request("GET", f"/blobs/{quote(content_hash, safe='')}/text")
        if not isinstance(data, dict) or "content" not in data:
            raise ConnectivityError("Content store response missing 'content'")
        return str(data["content"])

    def resolve_url(self, content_hash: str) -> str:
        return f"{self.download_base_url}/{quote(content_hash, safe='')}"

"""
Shared async HTTP plumbing for collaborator clients
"""
import logging
from typing import Any, Dict, Optional

import httpx

from ..exceptions import ConnectivityError

logger = logging.getLogger(__name__)


class HTTPClientBase:
    """Owns an httpx.AsyncClient and converts transport failures"""

    name = "service"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout, connect=5.0)
        self.headers = headers or {}
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def start(self):
        """Initialize HTTP client"""
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self.headers,
            transport=self.transport,
        )
        logger.info(f"{self.name} client initialized for {self.base_url}")

    async def stop(self):
        """Close HTTP client"""
        if self.client:
            await self.client.aclose()
            self.client = None
            logger.info(f"{self.name} client closed")

    async def _make_request(
        self,
        method: str,
        path: str,
        timeout: Optional[float] = None,
        **kwargs
    ) -> Any:
        """Make HTTP request and return the decoded JSON body"""
        if not self.client:
            raise ConnectivityError(f"{self.name} client not initialized")

        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            response = await self.client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code} for {path}: {e}")
            raise ConnectivityError(
                f"{self.name} request failed: {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Request failed for {path}: {e}")
            raise ConnectivityError(f"{self.name} request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from {path}: {e}")
            raise ConnectivityError(f"{self.name} returned an invalid response") from e

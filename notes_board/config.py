"""
Configuration settings for Notes Board
"""
from enum import Enum
from typing import List, Literal

from pydantic_settings import BaseSettings


class StoreMode(str, Enum):
    """Note store operating mode, chosen once at startup"""
    OPTIMISTIC_LOCAL = "optimistic-local"
    LEDGER_BACKED = "ledger-backed"


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Notes Board"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8010

    # Mode selection
    STORE_MODE: Literal["optimistic-local", "ledger-backed"] = "ledger-backed"
    USE_MOCK: bool = False  # Legacy switch, forces optimistic-local
    SEED_SAMPLE_NOTES: bool = True

    # Pagination
    PAGE_SIZE: int = 10

    # Trending
    TRENDING_LIMIT: int = 10
    TRENDING_WINDOW_MS: int = 24 * 60 * 60 * 1000
    TRENDING_RECENCY_BOOST: float = 0.5

    # Note validation
    MAX_CONTENT_LENGTH: int = 500
    ALLOWED_MEDIA_TYPES: List[str] = ["video/mp4", "video/webm"]
    MAX_MEDIA_SIZE: int = 50 * 1024 * 1024  # 50MB

    # Ledger node
    LEDGER_NODE_URL: str = "https://fullnode.devnet.aptoslabs.com"
    CONTRACT_ADDRESS: str = "0x05bdead0d29dde8e07f2d859341ed05badd00aa62a1364f521f80864b133b09a"
    MODULE_NAME: str = "notes"
    LEDGER_TIMEOUT: float = 10.0
    CONFIRMATION_TIMEOUT: float = 30.0

    # Content store
    CONTENT_STORE_URL: str = "https://api.shelby.example/shelby/account"
    CONTENT_DOWNLOAD_URL: str = "https://cdn.shelby.example/shelby/account/blobs"
    CONTENT_STORE_API_KEY: str = ""

    # Wallet signer
    WALLET_SIGNER_URL: str = "http://localhost:8011"
    WALLET_ADDRESS: str = ""

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    @property
    def store_mode(self) -> StoreMode:
        """Resolve the operating mode from STORE_MODE and the USE_MOCK switch"""
        if self.USE_MOCK:
            return StoreMode.OPTIMISTIC_LOCAL
        return StoreMode(self.STORE_MODE)

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

"""
Ledger record normalization
"""
import logging
from typing import Any, Mapping, Optional

from .models import Note

logger = logging.getLogger(__name__)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    try:
        return str(value)
    except Exception:
        return ""


def _as_bool(value: Any) -> bool:
    # Ledger view results may encode booleans as strings
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1")
    try:
        return bool(value)
    except Exception:
        return False


def _optional_str(value: Any) -> Optional[str]:
    if not value:
        return None
    return _as_str(value) or None


def _optional_int(value: Any) -> Optional[int]:
    if not value:
        return None
    return _as_int(value) or None


def normalize_record(record: Any) -> Note:
    """
    Map a raw ledger record to a Note

    Missing or uncoercible fields fall back to defaults instead of failing
    the whole record. Ledger timestamps are in seconds and are converted
    to milliseconds. Media fields are only set when their source value is
    non-empty.
    """
    if not isinstance(record, Mapping):
        logger.warning(f"Normalizing non-mapping record of type {type(record).__name__}")
        record = {}

    return Note(
        id=_as_int(record.get("id")),
        content=_as_str(record.get("content")),
        author=_as_str(record.get("author")),
        created_at=_as_int(record.get("created_at")) * 1000,
        read_count=max(0, _as_int(record.get("read_count"))),
        content_hash=_as_str(record.get("shelby_hash", record.get("content_hash"))),
        has_media=_as_bool(record.get("has_media", False)),
        media_hash=_optional_str(record.get("media_hash")),
        media_mime=_optional_str(record.get("media_mime")),
        media_size=_optional_int(record.get("media_size")),
        thumbnail_hash=_optional_str(record.get("thumbnail_hash")),
    )

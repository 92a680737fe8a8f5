"""
Note input validation
"""
from typing import Iterable, Optional

from ..exceptions import ValidationError


def validate_content(content: str, max_length: int = 500) -> None:
    """Reject empty or over-long note text"""
    if not content or not content.strip():
        raise ValidationError("Note content cannot be empty")
    if len(content) > max_length:
        raise ValidationError(f"Note content exceeds {max_length} characters")


def validate_media(
    mime_type: Optional[str],
    size: int,
    allowed_types: Iterable[str],
    max_size: int
) -> None:
    """Reject unsupported or oversized media"""
    if mime_type not in set(allowed_types):
        raise ValidationError("Unsupported video format")
    if size > max_size:
        raise ValidationError(f"Max video size is {max_size // (1024 * 1024)}MB")

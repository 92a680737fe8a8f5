"""
Sample notes used to seed optimistic-local mode
"""
from typing import List, Optional

from .models import Note, now_ms

_SAMPLES = [
    # (id, content, author, age in ms, read count, content hash)
    (1, "Decentralized storage is truly revolutionary! The future is here 🚀",
     "0x123...abc", 3_600_000, 42, "blob_1234567890_abc123"),
    (2, "Anonymous note sharing is such a creative concept. Everyone can share their thoughts freely 💭",
     "0x456...def", 7_200_000, 28, "blob_1234567891_def456"),
    (3, "Data ownership is finally real! We control our own data 🔐",
     "0x789...ghi", 1_800_000, 15, "blob_1234567892_ghi789"),
    (4, "The glow effect is mesmerizing! Notes literally shine brighter with popularity ✨",
     "0xabc...123", 900_000, 8, "blob_1234567893_abc123"),
    (5, "Micro rewards for content creators - this is how it should work! 💰",
     "0xdef...456", 10_800_000, 35, "blob_1234567894_def456"),
]


def sample_notes(now: Optional[int] = None) -> List[Note]:
    """Build the sample note set relative to `now`"""
    if now is None:
        now = now_ms()
    return [
        Note(
            id=note_id,
            content=content,
            author=author,
            created_at=now - age,
            read_count=read_count,
            content_hash=content_hash,
        )
        for note_id, content, author, age, read_count, content_hash in _SAMPLES
    ]

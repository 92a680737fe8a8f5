"""
Trending ranking - read-driven popularity with linear recency decay
"""
from typing import Iterable, List, Optional

from .models import Note, TrendingNote, now_ms

ONE_DAY_MS = 24 * 60 * 60 * 1000
TRENDING_LIMIT = 10
RECENCY_BOOST = 0.5


def age_factor(created_at: int, now: int, window_ms: int = ONE_DAY_MS) -> float:
    """Linear decay from 1 for a brand new note to 0 at the end of the window"""
    age = max(0, now - created_at)  # clock skew: future notes count as new
    return max(0.0, 1 - age / window_ms)


def trend_score(
    note: Note,
    now: int,
    window_ms: int = ONE_DAY_MS,
    recency_boost: float = RECENCY_BOOST
) -> float:
    return note.read_count * (1 + age_factor(note.created_at, now, window_ms) * recency_boost)


def rank_trending(
    notes: Iterable[Note],
    now: Optional[int] = None,
    limit: int = TRENDING_LIMIT,
    window_ms: int = ONE_DAY_MS,
    recency_boost: float = RECENCY_BOOST
) -> List[TrendingNote]:
    """
    Rank notes by trend score

    Pure and deterministic for a given `now`. Ties keep the input order
    (sorted() is stable). Returns at most `limit` entries with ranks 1..n.
    """
    if now is None:
        now = now_ms()

    scored = [
        TrendingNote.from_note(note, trend_score(note, now, window_ms, recency_boost))
        for note in notes
    ]
    scored = sorted(scored, key=lambda n: n.trend_score, reverse=True)[:limit]

    for index, note in enumerate(scored):
        note.rank = index + 1
    return scored

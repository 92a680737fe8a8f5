"""
Shared pytest fixtures for notes_board tests.

Provides in-memory collaborators so no ledger node or content store is needed.
"""

import pytest

from notes_board.domain.models import Note, TxRef
from notes_board.domain.repositories import IContentStore, ILedgerClient
from notes_board.exceptions import ConnectivityError

NOW = 1_700_000_000_000
HOUR = 60 * 60 * 1000


def make_note(note_id, read_count=0, created_at=NOW, **kwargs):
    return Note(
        id=note_id,
        content=kwargs.pop("content", f"note {note_id}"),
        author=kwargs.pop("author", "0xabc"),
        created_at=created_at,
        read_count=read_count,
        content_hash=kwargs.pop("content_hash", f"hash_{note_id}"),
        **kwargs,
    )


def make_record(note_id, read_count=0, created_at_sec=NOW // 1000, **extra):
    record = {
        "id": str(note_id),
        "content": f"note {note_id}",
        "author": "0xabc",
        "created_at": str(created_at_sec),
        "read_count": str(read_count),
        "shelby_hash": f"hash_{note_id}",
        "has_media": False,
    }
    record.update(extra)
    return record


class FakeLedger(ILedgerClient):
    """Ledger holding raw records newest first."""

    def __init__(self, count=0):
        self.records = [make_record(i) for i in range(count, 0, -1)]
        self.fetch_calls = []
        self.submitted = []
        self.fail_fetch = False
        self.fail_confirmation = False
        self.before_fetch = None
        self.wallet_connected = True

    @property
    def can_submit(self):
        return self.wallet_connected

    def _next_id(self):
        return max([int(r["id"]) for r in self.records] + [0]) + 1

    async def submit_create_note(self, content, content_hash):
        self.submitted.append(("create_note", content, content_hash))
        return TxRef(hash=f"0xtx{len(self.submitted)}")

    async def submit_create_note_with_media(
        self, content, content_hash, media_hash, media_mime, media_size, thumbnail_hash
    ):
        self.submitted.append((
            "create_note_with_media", content, content_hash,
            media_hash, media_mime, media_size, thumbnail_hash,
        ))
        return TxRef(hash=f"0xtx{len(self.submitted)}")

    async def submit_read_note(self, note_id):
        self.submitted.append(("read_note", note_id))
        return TxRef(hash=f"0xtx{len(self.submitted)}")

    async def wait_for_confirmation(self, tx):
        if self.fail_confirmation:
            raise ConnectivityError("Move abort: EINVALID")
        kind = self.submitted[-1]
        if kind[0].startswith("create_note"):
            record = make_record(self._next_id(), content=kind[1], shelby_hash=kind[2])
            if kind[0] == "create_note_with_media":
                record.update(
                    has_media=True, media_hash=kind[3], media_mime=kind[4],
                    media_size=str(kind[5]), thumbnail_hash=kind[6],
                )
            self.records.insert(0, record)
        elif kind[0] == "read_note":
            for record in self.records:
                if int(record["id"]) == kind[1]:
                    record["read_count"] = str(int(record["read_count"]) + 1)

    async def fetch_recent_notes(self, limit, offset):
        self.fetch_calls.append((limit, offset))
        if self.before_fetch:
            self.before_fetch()
        if self.fail_fetch:
            raise ConnectivityError("Ledger request failed: 503")
        return [dict(r) for r in self.records[offset:offset + limit]]

    async def fetch_notes_by_ids(self, ids):
        wanted = {int(i) for i in ids}
        return [dict(r) for r in self.records if int(r["id"]) in wanted]


class FakeContentStore(IContentStore):
    def __init__(self):
        self.blobs = {}
        self.fail = False

    async def put_text(self, content):
        if self.fail:
            raise ConnectivityError("Content store request failed: 500")
        key = f"text_{len(self.blobs) + 1}"
        self.blobs[key] = content
        return key

    async def put_blob(self, data, mime_type, filename="media"):
        if self.fail:
            raise ConnectivityError("Content store request failed: 500")
        key = f"blob_{len(self.blobs) + 1}"
        self.blobs[key] = data
        return key

    async def get_text(self, content_hash):
        if content_hash not in self.blobs:
            raise ConnectivityError("Content store request failed: 404")
        return self.blobs[content_hash]

    def resolve_url(self, content_hash):
        return f"https://cdn.test/blobs/{content_hash}"


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def content_store():
    return FakeContentStore()

"""Tests for the HTTP collaborator clients using httpx.MockTransport."""

import json

import httpx
import pytest

from notes_board.domain.models import TxRef
from notes_board.exceptions import ConnectivityError, StateError
from notes_board.infrastructure.content_store import ContentStoreClient
from notes_board.infrastructure.ledger_client import LedgerClient
from notes_board.infrastructure.wallet import RemoteWallet

CONTRACT = "0xc0ffee"


class Recorder:
    """Routes requests to a handler and keeps them for assertions."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.handler(request)

    def transport(self):
        return httpx.MockTransport(self)


def body(request):
    return json.loads(request.content.decode())


class FakeWallet:
    is_connected = True
    current_account = None

    def __init__(self):
        self.payloads = []

    async def sign_and_submit(self, payload):
        self.payloads.append(payload)
        return TxRef(hash="0xabc")


async def started(client):
    await client.start()
    return client


class TestContentStoreClient:
    @pytest.mark.asyncio
    async def test_put_text(self):
        recorder = Recorder(lambda r: httpx.Response(200, json={"hash": "h1"}))
        client = await started(ContentStoreClient(
            "https://store.test/api", "https://cdn.test/blobs",
            api_key="secret", transport=recorder.transport(),
        ))

        assert await client.put_text("hello") == "h1"

        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/blobs/text"
        assert request.headers["Authorization"] == "Bearer secret"
        assert body(request) == {"content": "hello"}
        await client.stop()

    @pytest.mark.asyncio
    async def test_put_blob_is_multipart(self):
        recorder = Recorder(lambda r: httpx.Response(200, json={"hash": "b1"}))
        client = await started(ContentStoreClient(
            "https://store.test", "https://cdn.test", transport=recorder.transport(),
        ))

        assert await client.put_blob(b"data", "video/mp4", "clip.mp4") == "b1"
        request = recorder.requests[0]
        assert request.url.path == "/blobs"
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b"clip.mp4" in request.content

    @pytest.mark.asyncio
    async def test_get_text_quotes_hash(self):
        recorder = Recorder(lambda r: httpx.Response(200, json={"content": "stored"}))
        client = await started(ContentStoreClient(
            "https://store.test", "https://cdn.test", transport=recorder.transport(),
        ))

        assert await client.get_text("a/b") == "stored"
        assert recorder.requests[0].url.raw_path == b"/blobs/a%2Fb/text"

    def test_resolve_url(self):
        client = ContentStoreClient("https://store.test", "https://cdn.test/blobs/")
        assert client.resolve_url("x y") == "https://cdn.test/blobs/x%20y"

    @pytest.mark.asyncio
    async def test_http_error_becomes_connectivity_error(self):
        recorder = Recorder(lambda r: httpx.Response(500))
        client = await started(ContentStoreClient(
            "https://store.test", "https://cdn.test", transport=recorder.transport(),
        ))

        with pytest.raises(ConnectivityError, match="500"):
            await client.put_text("hello")

    @pytest.mark.asyncio
    async def test_missing_hash(self):
        recorder = Recorder(lambda r: httpx.Response(200, json={}))
        client = await started(ContentStoreClient(
            "https://store.test", "https://cdn.test", transport=recorder.transport(),
        ))
        with pytest.raises(ConnectivityError):
            await client.put_text("hello")

    @pytest.mark.asyncio
    async def test_not_started(self):
        client = ContentStoreClient("https://store.test", "https://cdn.test")
        with pytest.raises(ConnectivityError, match="not initialized"):
            await client.put_text("hello")


def ledger_handler(request):
    if request.url.path == "/v1/view":
        payload = body(request)
        if payload["function"].endswith("::get_recent_note_ids"):
            return httpx.Response(200, json=[["3", "2"]])
        if payload["function"].endswith("::get_notes_by_ids"):
            return httpx.Response(200, json=[[
                {"id": i, "content": f"n{i}", "created_at": "1"} for i in payload["arguments"][0]
            ]])
    if request.url.path.startswith("/v1/transactions/wait_by_hash/"):
        return httpx.Response(200, json={"type": "user_transaction", "success": True})
    return httpx.Response(404)


class TestLedgerClient:
    async def make_client(self, handler=ledger_handler, wallet=None):
        recorder = Recorder(handler)
        client = LedgerClient(
            wallet or FakeWallet(), "https://node.test", CONTRACT,
            transport=recorder.transport(),
        )
        await client.start()
        return client, recorder

    @pytest.mark.asyncio
    async def test_fetch_recent_notes(self):
        client, recorder = await self.make_client()

        records = await client.fetch_recent_notes(10, 20)

        assert [r["id"] for r in records] == ["3", "2"]
        first = body(recorder.requests[0])
        assert first == {
            "function": f"{CONTRACT}::notes::get_recent_note_ids",
            "type_arguments": [],
            "arguments": ["10", "20"],
        }
        assert body(recorder.requests[1])["arguments"] == [["3", "2"]]

    @pytest.mark.asyncio
    async def test_fetch_recent_notes_empty(self):
        client, recorder = await self.make_client(lambda r: httpx.Response(200, json=[[]]))
        assert await client.fetch_recent_notes(10, 0) == []
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_fetch_by_ids_skips_empty(self):
        client, recorder = await self.make_client()
        assert await client.fetch_notes_by_ids([]) == []
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_submit_payloads(self):
        wallet = FakeWallet()
        client, _ = await self.make_client(wallet=wallet)

        await client.submit_create_note("hi", "h")
        await client.submit_create_note_with_media("hi", "h", "m", "video/mp4", 9, "")
        tx = await client.submit_read_note(4)

        assert tx.hash == "0xabc"
        assert [p["function"] for p in wallet.payloads] == [
            f"{CONTRACT}::notes::create_note",
            f"{CONTRACT}::notes::create_note_with_media",
            f"{CONTRACT}::notes::read_note",
        ]
        assert wallet.payloads[1]["arguments"] == ["hi", "h", "m", "video/mp4", 9, ""]
        assert wallet.payloads[2]["type"] == "entry_function_payload"

    @pytest.mark.asyncio
    async def test_submit_requires_connected_wallet(self):
        wallet = FakeWallet()
        wallet.is_connected = False
        client, _ = await self.make_client(wallet=wallet)

        with pytest.raises(StateError, match="Wallet not connected"):
            await client.submit_read_note(1)
        assert wallet.payloads == []

    @pytest.mark.asyncio
    async def test_wait_for_confirmation(self):
        client, recorder = await self.make_client()
        await client.wait_for_confirmation(TxRef(hash="0x1"))
        assert recorder.requests[0].url.path == "/v1/transactions/wait_by_hash/0x1"

    @pytest.mark.asyncio
    async def test_failed_transaction(self):
        client, _ = await self.make_client(lambda r: httpx.Response(
            200, json={"type": "user_transaction", "success": False, "vm_status": "Move abort"}
        ))
        with pytest.raises(ConnectivityError, match="Move abort"):
            await client.wait_for_confirmation(TxRef(hash="0x1"))

    @pytest.mark.asyncio
    async def test_pending_transaction(self):
        client, _ = await self.make_client(lambda r: httpx.Response(
            200, json={"type": "pending_transaction", "hash": "0x1"}
        ))
        with pytest.raises(ConnectivityError, match="not confirmed"):
            await client.wait_for_confirmation(TxRef(hash="0x1"))

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client, _ = await self.make_client(handler)
        with pytest.raises(ConnectivityError, match="refused"):
            await client.fetch_recent_notes(10, 0)


class TestRemoteWallet:
    @pytest.mark.asyncio
    async def test_connect_and_submit(self):
        def handler(request):
            if request.url.path == "/v1/account":
                return httpx.Response(200, json={"address": "0x9", "public_key": "pk"})
            return httpx.Response(200, json={"hash": "0xtx"})

        recorder = Recorder(handler)
        wallet = RemoteWallet("https://signer.test", transport=recorder.transport())
        await wallet.start()

        assert wallet.is_connected is False
        account = await wallet.connect()
        assert account.address == "0x9"
        assert wallet.is_connected is True

        tx = await wallet.sign_and_submit({"function": "f"})
        assert tx == TxRef(hash="0xtx", sender="0x9")
        assert body(recorder.requests[1]) == {"sender": "0x9", "payload": {"function": "f"}}

        wallet.disconnect()
        assert wallet.current_account is None

    @pytest.mark.asyncio
    async def test_submit_without_account(self):
        wallet = RemoteWallet("https://signer.test")
        with pytest.raises(StateError):
            await wallet.sign_and_submit({})


class TestLedgerReadiness:
    def test_can_submit_follows_wallet(self):
        wallet = FakeWallet()
        client = LedgerClient(wallet, "https://node.test", CONTRACT)
        assert client.can_submit is True

        wallet.is_connected = False
        assert client.can_submit is False

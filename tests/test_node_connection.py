# tests/test_node_connection.py
import pytest
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock
from zenon_wallet_api.blockchain.account_block import ChainHead
from zenon_wallet_api.blockchain.primitives import Address, ZNN, TokenStandard
from zenon_wallet_api.exceptions import (
    ChainHeadConflict, InvalidArgument, NodeError, NodeUnavailable, NotFound
)
from zenon_wallet_api.network import (
    ConnectionStatus, InMemoryLedger, InMemoryTransport, NodeConnection, RpcError,
    create_transport_factory
)
from zenon_wallet_api.network.transport import WebSocketTransport

class TestNodeConnection:
    @pytest.fixture
    def ledger(self):
        return InMemoryLedger()

    @pytest.fixture
    def transports(self):
        return []

    @pytest.fixture
    def connection(self, ledger, transports):
        def factory():
            transport = InMemoryTransport(ledger)
            transports.append(transport)
            return transport
        return NodeConnection(factory)

    @pytest.fixture
    def address(self):
        return Address.from_public_key(b"account")

    @pytest.mark.asyncio
    async def test_concurrent_connects_dial_once(self, connection, transports):
        assert connection.status == ConnectionStatus.DISCONNECTED
        await asyncio.gather(connection.ensure_connected(), connection.ensure_connected())

        assert connection.status == ConnectionStatus.CONNECTED
        assert connection.connect_attempts == 1
        assert len(transports) == 1
        assert transports[0].connect_calls == 1

    @pytest.mark.asyncio
    async def test_connected_is_reused(self, connection, transports):
        await connection.ensure_connected()
        await connection.ensure_connected()
        assert len(transports) == 1

    @pytest.mark.asyncio
    async def test_connect_failure(self, ledger):
        connection = NodeConnection(lambda: InMemoryTransport(ledger, fail_connect=True))
        with pytest.raises(NodeUnavailable):
            await connection.ensure_connected()
        assert connection.status == ConnectionStatus.FAILED

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_failed_attempt(self, ledger):
        transports = []

        def factory():
            transport = InMemoryTransport(ledger, fail_connect=True)
            transports.append(transport)
            return transport

        connection = NodeConnection(factory)
        results = await asyncio.gather(
            *[connection.ensure_connected() for _ in range(3)], return_exceptions=True
        )

        assert all(isinstance(result, NodeUnavailable) for result in results)
        assert connection.connect_attempts == 1
        assert len(transports) == 1
        assert connection.status == ConnectionStatus.FAILED

        with pytest.raises(NodeUnavailable):
            await connection.ensure_connected()
        assert connection.connect_attempts == 2

    @pytest.mark.asyncio
    async def test_close_waits_for_attempt_in_flight(self, connection, transports):
        pending = asyncio.create_task(connection.ensure_connected())
        await asyncio.sleep(0)
        await connection.close()
        await pending

        assert connection.status == ConnectionStatus.DISCONNECTED
        assert not transports[0].connected

    @pytest.mark.asyncio
    async def test_reconnect_after_failure(self, ledger):
        attempts = []

        def factory():
            attempts.append(1)
            return InMemoryTransport(ledger, fail_connect=len(attempts) == 1)

        connection = NodeConnection(factory)
        with pytest.raises(NodeUnavailable):
            await connection.ensure_connected()
        await connection.ensure_connected()
        assert connection.is_connected
        assert connection.connect_attempts == 2

    @pytest.mark.asyncio
    async def test_query_requires_connection(self, connection, address):
        with pytest.raises(NodeUnavailable):
            await connection.get_chain_head(address)

    @pytest.mark.asyncio
    async def test_chain_head(self, connection, ledger, address):
        await connection.ensure_connected()
        assert await connection.get_chain_head(address) == ChainHead.empty()

        block = ledger.advance_frontier(str(address))
        head = await connection.get_chain_head(address)
        assert head.height == 1
        assert str(head.hash) == block["hash"]

    @pytest.mark.asyncio
    async def test_token_lookup(self, connection):
        await connection.ensure_connected()
        assert (await connection.get_token(ZNN))["decimals"] == 8
        with pytest.raises(NotFound):
            await connection.get_token(TokenStandard(bytes(10)))

    @pytest.mark.asyncio
    async def test_transport_failure_marks_failed(self, connection, transports, address):
        await connection.ensure_connected()
        transports[0].request = AsyncMock(side_effect=ConnectionError("reset"))

        with pytest.raises(NodeUnavailable):
            await connection.get_chain_head(address)
        assert connection.status == ConnectionStatus.FAILED

        await connection.ensure_connected()
        assert len(transports) == 2
        assert await connection.get_chain_head(address) == ChainHead.empty()

    @pytest.mark.asyncio
    async def test_rpc_errors(self, connection, transports, address):
        await connection.ensure_connected()
        transports[0].request = AsyncMock(side_effect=RpcError(-32000, "internal error"))
        with pytest.raises(NodeError):
            await connection.get_chain_head(address)
        assert connection.is_connected

    @pytest.mark.asyncio
    async def test_close(self, connection, transports):
        await connection.ensure_connected()
        await connection.close()
        assert connection.status == ConnectionStatus.DISCONNECTED
        assert not transports[0].connected

    def test_transport_factory(self):
        assert isinstance(create_transport_factory("memory://")(), InMemoryTransport)
        assert isinstance(create_transport_factory("ws://127.0.0.1:35998")(), WebSocketTransport)
        with pytest.raises(ValueError):
            create_transport_factory("http://127.0.0.1:35997")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", [
        "account-block previous hash does not match the frontier",
        "account-block height is not the next one, expected 3",
    ])
    async def test_stale_head_rejection(self, connection, transports, message):
        await connection.ensure_connected()
        transports[0].request = AsyncMock(side_effect=RpcError(-32000, message))
        block = MagicMock(is_signed=True, height=2)

        with pytest.raises(ChainHeadConflict):
            await connection.submit(block)

    @pytest.mark.asyncio
    async def test_other_rejection(self, connection, transports):
        await connection.ensure_connected()
        transports[0].request = AsyncMock(side_effect=RpcError(-32000, "account-block signature is invalid"))

        with pytest.raises(NodeError) as exc:
            await connection.submit(MagicMock(is_signed=True, height=2))
        assert not isinstance(exc.value, ChainHeadConflict)

    @pytest.mark.asyncio
    async def test_submit_requires_signature(self, connection):
        await connection.ensure_connected()
        with pytest.raises(InvalidArgument):
            await connection.submit(MagicMock(is_signed=False))

class TestWebSocketTransport:
    @pytest.fixture
    def transport(self):
        return WebSocketTransport("ws://127.0.0.1:35998")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", [
        "[1, 2]",
        '"text"',
        '{"id": [1], "result": null}',
        "not json",
        b"\xff\xfe",
    ])
    async def test_unexpected_messages_are_ignored(self, transport, message):
        future = asyncio.get_running_loop().create_future()
        transport._pending[1] = future

        transport._dispatch(message)
        assert not future.done()
        assert transport._pending == {1: future}

    @pytest.mark.asyncio
    async def test_result_resolves_request(self, transport):
        future = asyncio.get_running_loop().create_future()
        transport._pending[1] = future

        transport._dispatch('{"jsonrpc": "2.0", "id": 1, "result": {"height": 3}}')
        assert future.result() == {"height": 3}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error, code, text", [
        ({"code": -32601, "message": "method not found"}, -32601, "method not found"),
        ("internal failure", -32000, "internal failure"),
    ])
    async def test_error_fails_request(self, transport, error, code, text):
        future = asyncio.get_running_loop().create_future()
        transport._pending[1] = future

        transport._dispatch(json.dumps({"jsonrpc": "2.0", "id": 1, "error": error}))
        with pytest.raises(RpcError) as exc:
            future.result()
        assert exc.value.code == code
        assert exc.value.message == text

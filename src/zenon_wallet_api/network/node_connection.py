# src/zenon_wallet_api/network/node_connection.py

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from ..blockchain.account_block import AccountBlockTemplate, ChainHead, HashHeight
from ..blockchain.primitives import Address, TokenStandard
from ..exceptions import ChainHeadConflict, InvalidArgument, NodeError, NodeUnavailable, NotFound
from ..monitoring.metrics import MetricsCollector
from .transport import NodeTransport, RpcError, TransportFactory

logger = logging.getLogger(__name__)

# Fragments of node errors caused by a block built on an outdated frontier
STALE_HEAD_MARKERS = ("previous hash", "height is not", "frontier")

class ConnectionStatus(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"

class NodeConnection:
    """Lazily established, shared connection to a node.

    At most one dial is in flight: callers of ``ensure_connected`` that
    arrive during an attempt await that attempt and share its outcome,
    failure included. Only a call made after it settled dials again.
    """

    def __init__(self, transport_factory: TransportFactory, metrics: Optional[MetricsCollector] = None):
        self.transport_factory = transport_factory
        self.metrics = metrics
        self.status = ConnectionStatus.DISCONNECTED
        self.connect_attempts = 0
        self._transport: Optional[NodeTransport] = None
        self._connecting: Optional[asyncio.Task] = None

    @property
    def is_connected(self) -> bool:
        return self.status == ConnectionStatus.CONNECTED

    async def ensure_connected(self):
        if self.is_connected:
            return

        if self._connecting is None:
            self._connecting = asyncio.create_task(self._connect())
        # a cancelled caller must not cancel the attempt others await
        await asyncio.shield(self._connecting)

    async def _connect(self):
        try:
            stale, self._transport = self._transport, None
            if stale is not None:
                await stale.close()

            self.status = ConnectionStatus.CONNECTING
            self.connect_attempts += 1
            transport = self.transport_factory()
            try:
                await transport.connect()
            except (ConnectionError, OSError, asyncio.TimeoutError) as e:
                self.status = ConnectionStatus.FAILED
                self._record_connect("failed")
                logger.error(f"Failed to connect to node: {str(e)}")
                raise NodeUnavailable(f"Node unavailable: {str(e)}")

            self._transport = transport
            self.status = ConnectionStatus.CONNECTED
            self._record_connect("ok")
            logger.info("Connected to node")
        finally:
            self._connecting = None

    def _record_connect(self, outcome: str):
        if self.metrics:
            self.metrics.record_connect(outcome)

    async def close(self):
        attempt = self._connecting
        if attempt is not None:
            await asyncio.wait([attempt])

        transport, self._transport = self._transport, None
        self.status = ConnectionStatus.DISCONNECTED
        if transport is not None:
            await transport.close()
            logger.info("Disconnected from node")

    async def _request(self, method: str, params: List[Any]) -> Any:
        if not self.is_connected or self._transport is None:
            raise NodeUnavailable("Not connected to node")

        try:
            return await self._transport.request(method, params)
        except (ConnectionError, OSError, asyncio.TimeoutError) as e:
            # next ensure_connected re-dials
            self.status = ConnectionStatus.FAILED
            logger.error(f"Node transport failed during {method}: {str(e)}")
            raise NodeUnavailable(f"Node unavailable: {str(e)}")

    async def _call(self, method: str, params: List[Any]) -> Any:
        try:
            return await self._request(method, params)
        except RpcError as e:
            raise NodeError(f"Node failed {method}: {e.message}")

    async def get_chain_head(self, address: Address) -> ChainHead:
        """Height and hash of the latest block on ``address``'s chain"""
        frontier = await self._call("ledger.getFrontierAccountBlock", [str(address)])
        if not frontier:
            return ChainHead.empty()
        return HashHeight.from_json(frontier)

    async def get_frontier_momentum(self) -> HashHeight:
        return HashHeight.from_json(await self._call("ledger.getFrontierMomentum", []))

    async def get_token(self, token_standard: TokenStandard) -> Dict[str, Any]:
        token = await self._call("embedded.token.getByZts", [str(token_standard)])
        if not token:
            raise NotFound(f"Token {token_standard} does not exist")
        return token

    async def get_unreceived_blocks(self, address: Address, page_index: int, page_size: int) -> Dict[str, Any]:
        return await self._call(
            "ledger.getUnreceivedBlocksByAddress", [str(address), page_index, page_size]
        )

    async def submit(self, block: AccountBlockTemplate) -> AccountBlockTemplate:
        """Publish a signed block and return it as accepted by the node"""
        if not block.is_signed:
            raise InvalidArgument("Only signed account blocks can be published")

        try:
            await self._request("ledger.publishRawTransaction", [block.to_json()])
        except RpcError as e:
            message = e.message.lower()
            if any(marker in message for marker in STALE_HEAD_MARKERS):
                raise ChainHeadConflict(f"Node rejected block at height {block.height}: {e.message}")
            raise NodeError(f"Node rejected block: {e.message}")

        logger.info(f"Published block {block.hash} for {block.address} at height {block.height}")
        return block

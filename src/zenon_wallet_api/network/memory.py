# src/zenon_wallet_api/network/memory.py

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional

from ..blockchain.account_block import AccountBlockTemplate
from ..crypto.hash import Hash
from ..crypto.keys import KeyPair
from ..blockchain.primitives import QSR, ZNN
from ..utils.config import Config
from .transport import RpcError

logger = logging.getLogger(__name__)

class InMemoryLedger:
    """In-process stand-in for a node's ledger.

    Tracks the frontier block of every account chain and accepts a
    published block only if it extends that frontier.
    """

    def __init__(self, chain_identifier: int = Config.CHAIN_IDENTIFIER):
        self.chain_identifier = chain_identifier
        self.frontiers: Dict[str, Dict[str, Any]] = {}
        self.unreceived: Dict[str, List[Dict[str, Any]]] = {}
        self.published: List[Dict[str, Any]] = []
        self.momentum_height = 1
        self.momentum_hash = Hash.digest(b"genesis")
        self.tokens = {
            str(ZNN): {"name": "Zenon", "symbol": "ZNN", "decimals": Config.COIN_DECIMALS, "tokenStandard": str(ZNN)},
            str(QSR): {"name": "QuasarCoin", "symbol": "QSR", "decimals": Config.COIN_DECIMALS, "tokenStandard": str(QSR)},
        }

    def _next_momentum(self):
        self.momentum_height += 1
        self.momentum_hash = Hash.digest(bytes(self.momentum_hash) + self.momentum_height.to_bytes(8, "big"))

    def frontier_momentum(self) -> Dict[str, Any]:
        return {"hash": str(self.momentum_hash), "height": self.momentum_height}

    def frontier_block(self, address: str) -> Optional[Dict[str, Any]]:
        return self.frontiers.get(address)

    def advance_frontier(self, address: str) -> Dict[str, Any]:
        """Append a block to ``address``'s chain that this service did not build"""
        frontier = self.frontiers.get(address)
        height = frontier["height"] + 1 if frontier else 1
        block = {"hash": str(Hash.digest(os.urandom(32))), "height": height, "address": address}
        self.frontiers[address] = block
        self._next_momentum()
        return block

    def publish(self, data: Dict[str, Any]):
        block = AccountBlockTemplate.from_json(data)
        if not block.is_signed or block.hash is None:
            raise RpcError(-32000, "account-block is not signed")
        if block.chain_identifier != self.chain_identifier:
            raise RpcError(-32000, "account-block chain identifier mismatch")
        if block.calculate_hash() != block.hash:
            raise RpcError(-32000, "account-block hash mismatch")
        if not KeyPair.verify(block.public_key, bytes(block.hash), block.signature):
            raise RpcError(-32000, "account-block signature is invalid")

        address = str(block.address)
        frontier = self.frontiers.get(address)
        expected_height = frontier["height"] + 1 if frontier else 1
        expected_previous = frontier["hash"] if frontier else str(Hash.empty())
        if block.height != expected_height:
            raise RpcError(-32000, f"account-block height is not the next one, expected {expected_height}")
        if str(block.previous_hash) != expected_previous:
            raise RpcError(-32000, "account-block previous hash does not match the frontier")

        self.frontiers[address] = data
        self.published.append(data)
        self.unreceived.setdefault(str(block.to_address), []).append(data)
        self._next_momentum()
        logger.debug(f"Ledger accepted block {block.hash} for {address}")

class InMemoryTransport:
    """NodeTransport backed by an InMemoryLedger"""

    def __init__(self, ledger: Optional[InMemoryLedger] = None, fail_connect: bool = False):
        self.ledger = ledger or InMemoryLedger()
        self.fail_connect = fail_connect
        self.connected = False
        self.connect_calls = 0

    async def connect(self) -> None:
        self.connect_calls += 1
        # yield so concurrent callers can overlap a dial
        await asyncio.sleep(0)
        if self.fail_connect:
            raise ConnectionError("Connection refused")
        self.connected = True

    async def request(self, method: str, params: List[Any]) -> Any:
        if not self.connected:
            raise ConnectionError("Not connected to node")
        await asyncio.sleep(0)

        if method == "ledger.getFrontierAccountBlock":
            return self.ledger.frontier_block(params[0])
        if method == "ledger.getFrontierMomentum":
            return self.ledger.frontier_momentum()
        if method == "ledger.publishRawTransaction":
            self.ledger.publish(params[0])
            return None
        if method == "embedded.token.getByZts":
            return self.ledger.tokens.get(params[0])
        if method == "ledger.getUnreceivedBlocksByAddress":
            address, page_index, page_size = params
            blocks = self.ledger.unreceived.get(address, [])
            start = page_index * page_size
            page = blocks[start:start + page_size]
            return {"list": page, "count": len(blocks), "more": start + page_size < len(blocks)}
        raise RpcError(-32601, f"the method {method} does not exist/is not available")

    async def close(self) -> None:
        self.connected = False

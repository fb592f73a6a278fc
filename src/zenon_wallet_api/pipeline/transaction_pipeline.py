# src/zenon_wallet_api/pipeline/transaction_pipeline.py
from typing import Dict, Optional, Union
from dataclasses import dataclass, replace
from enum import Enum
import asyncio
from contextlib import asynccontextmanager
import logging

from ..blockchain.account_block import AccountBlockTemplate
from ..blockchain.amount import AmountInput, extract_decimals
from ..blockchain.embedded import Plasma, send
from ..blockchain.primitives import Address, TokenStandard, QSR, ZNN
from ..exceptions import ChainHeadConflict, InvalidArgument, NodeUnavailable
from ..monitoring.metrics import MetricsCollector
from ..network.node_connection import NodeConnection
from ..utils.config import Config
from ..wallet.account import Account, AccountResolver

logger = logging.getLogger(__name__)

class OperationKind(Enum):
    FUSE = "fuse"
    SEND = "send"

@dataclass(frozen=True)
class FuseParams:
    """Fuse ``amount`` QSR to generate plasma for ``address``"""
    address: str
    amount: AmountInput

@dataclass(frozen=True)
class SendParams:
    address: str
    token_standard: str
    amount: AmountInput

OperationParams = Union[FuseParams, SendParams]

class TransactionPipeline:
    """Builds, signs and publishes account blocks for wallet accounts.

    Blocks of one account are positioned and submitted one at a time so
    each submission sees the chain head left by the previous one. A
    submission rejected for a stale head or lost to a transport failure
    is retried once against a refreshed head.
    """

    MAX_ATTEMPTS = 2

    def __init__(
        self,
        resolver: AccountResolver,
        node: NodeConnection,
        chain_identifier: int = Config.CHAIN_IDENTIFIER,
        metrics: Optional[MetricsCollector] = None
    ):
        self.resolver = resolver
        self.node = node
        self.chain_identifier = chain_identifier
        self.metrics = metrics
        self._account_locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    @asynccontextmanager
    async def _account_lock(self, address: Address):
        """Hold the submission lock of ``address``; dropped once unused"""
        key = str(address)
        lock = self._account_locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._account_locks[key]

    async def _token_decimals(self, token_standard: TokenStandard) -> int:
        if token_standard in (ZNN, QSR):
            return Config.COIN_DECIMALS
        token = await self.node.get_token(token_standard)
        return int(token["decimals"])

    async def build(self, kind: OperationKind, account: Account, params: OperationParams) -> AccountBlockTemplate:
        """Unsigned, unpositioned template for an operation"""
        if kind == OperationKind.FUSE and isinstance(params, FuseParams):
            amount = extract_decimals(params.amount, Config.COIN_DECIMALS)
            template = Plasma.fuse(account.address, Address.parse(params.address), amount)
        elif kind == OperationKind.SEND and isinstance(params, SendParams):
            token_standard = TokenStandard.parse(params.token_standard)
            amount = extract_decimals(params.amount, await self._token_decimals(token_standard))
            template = send(account.address, Address.parse(params.address), token_standard, amount)
        else:
            raise InvalidArgument(f"Parameters do not match operation '{kind.value}'")
        return replace(template, chain_identifier=self.chain_identifier)

    async def build_and_submit(
        self,
        account_index: int,
        kind: OperationKind,
        params: OperationParams
    ) -> AccountBlockTemplate:
        await self.node.ensure_connected()
        account = self.resolver.get_account(account_index)
        template = await self.build(kind, account, params)

        async with self._account_lock(account.address):
            accepted = await self._submit_with_retry(account, template)

        if self.metrics:
            self.metrics.record_submission(kind.value)
        logger.info(f"Account {account.index} {kind.value}: {accepted.describe()}")
        return accepted

    async def _submit_with_retry(self, account: Account, template: AccountBlockTemplate) -> AccountBlockTemplate:
        signed: Optional[AccountBlockTemplate] = None
        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            try:
                if attempt > 1:
                    await self.node.ensure_connected()
                head = await self.node.get_chain_head(account.address)
                if signed is not None and head.hash == signed.hash:
                    # the previous attempt reached the node before the transport failed
                    return signed
                momentum = await self.node.get_frontier_momentum()
                signed = template.with_chain_head(head, momentum).sign(account)
                return await self.node.submit(signed)
            except ChainHeadConflict as e:
                if self.metrics:
                    self.metrics.record_conflict()
                if attempt == self.MAX_ATTEMPTS:
                    raise
                logger.warning(f"Retrying with a refreshed chain head: {e.message}")
            except NodeUnavailable as e:
                if attempt == self.MAX_ATTEMPTS:
                    raise
                logger.warning(f"Retrying after node failure: {e.message}")

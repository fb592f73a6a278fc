# src/zenon_wallet_api/wallet/wallet_state.py
from typing import Optional, Dict, Any
from enum import Enum
import asyncio
import logging

from ..crypto.keys import KeyPair, generate_mnemonic, mnemonic_to_seed
from ..exceptions import Conflict, KeyStoreCorrupted, WalletApiError, WalletLocked
from ..monitoring.metrics import MetricsCollector
from ..utils.config import Config
from .key_vault import KeyVault, wipe_buffer
from .keystore import KeyStoreFile, KeyStoreRepository

logger = logging.getLogger(__name__)

class WalletStatus(Enum):
    UNINITIALIZED = "uninitialized"
    LOCKED = "locked"
    UNLOCKED = "unlocked"

class WalletState:
    """Lifecycle of the wallet: Uninitialized, Locked or Unlocked.

    Key material in the vault is only present while Unlocked. All
    transitions run under a single lock, so at most one is in flight.
    """

    def __init__(
        self,
        repository: KeyStoreRepository,
        vault: Optional[KeyVault] = None,
        kdf_iterations: int = Config.KDF_ITERATIONS,
        metrics: Optional[MetricsCollector] = None
    ):
        self.repository = repository
        self.vault = vault or KeyVault()
        self.kdf_iterations = kdf_iterations
        self.metrics = metrics
        self.status = WalletStatus.UNINITIALIZED
        self.fatal_error: Optional[KeyStoreCorrupted] = None
        self._keystore: Optional[KeyStoreFile] = None
        self._lock = asyncio.Lock()

    @property
    def is_unlocked(self) -> bool:
        return self.status == WalletStatus.UNLOCKED

    @property
    def generation(self) -> int:
        return self.vault.generation

    async def load(self):
        """Read the persisted key store at startup"""
        async with self._lock:
            try:
                self._keystore = await self.repository.load()
            except KeyStoreCorrupted as e:
                self.fatal_error = e
                logger.critical(f"Refusing wallet operations, key store is unusable: {e.message}")
                return
            self.status = WalletStatus.LOCKED if self._keystore else WalletStatus.UNINITIALIZED
            logger.info(f"Wallet loaded in state {self.status.value}")

    def _ensure_usable(self):
        if self.fatal_error is not None:
            raise self.fatal_error

    def _record(self, transition: str, outcome: str):
        if self.metrics:
            self.metrics.record_transition(transition, outcome, self.is_unlocked)

    async def _install(self, mnemonic: str, password: str):
        # the vault takes ownership of this buffer; zeroed on failure
        seed = bytearray(mnemonic_to_seed(mnemonic))
        try:
            base_address = KeyPair.from_seed(seed, 0).get_address()
            keystore = await asyncio.to_thread(
                KeyStoreFile.encrypt, seed, password, str(base_address), self.kdf_iterations
            )
            await self.repository.save(keystore)
        except BaseException:
            wipe_buffer(seed)
            raise
        self._keystore = keystore
        self.vault.install(seed)
        self.status = WalletStatus.UNLOCKED

    async def restore(self, password: str, mnemonic: str):
        """Replace the key store with one derived from ``mnemonic`` and unlock"""
        async with self._lock:
            try:
                self._ensure_usable()
                if self.status == WalletStatus.UNLOCKED:
                    raise Conflict("Wallet is unlocked, lock it before restoring")
                await self._install(mnemonic, password)
            except WalletApiError:
                self._record("restore", "rejected")
                raise
            self._record("restore", "ok")
            logger.info("Wallet restored and unlocked")

    async def init(self, password: str) -> str:
        """Create a wallet from a fresh mnemonic and return the mnemonic"""
        async with self._lock:
            try:
                self._ensure_usable()
                if self.status != WalletStatus.UNINITIALIZED:
                    raise Conflict("Wallet is already initialized")
                mnemonic = generate_mnemonic()
                await self._install(mnemonic, password)
            except WalletApiError:
                self._record("init", "rejected")
                raise
            self._record("init", "ok")
            logger.info("Wallet initialized and unlocked")
            return mnemonic

    async def unlock(self, password: str):
        async with self._lock:
            try:
                self._ensure_usable()
                if self.status == WalletStatus.UNINITIALIZED:
                    raise Conflict("Wallet is not initialized")
                if self.status == WalletStatus.UNLOCKED:
                    raise Conflict("Wallet is already unlocked")
                seed = await asyncio.to_thread(self._keystore.decrypt, password)
                self.vault.install(seed)
                self.status = WalletStatus.UNLOCKED
            except WalletApiError:
                self._record("unlock", "rejected")
                raise
            self._record("unlock", "ok")
            logger.info("Wallet unlocked")

    async def lock(self):
        """Wipe key material; a no-op unless the wallet is unlocked"""
        async with self._lock:
            self.vault.wipe()
            if self.status == WalletStatus.UNLOCKED:
                self.status = WalletStatus.LOCKED
                self._record("lock", "ok")
                logger.info("Wallet locked")

    async def close(self):
        await self.lock()

    def require_unlocked(self):
        if self.status != WalletStatus.UNLOCKED:
            raise WalletLocked()

    def info(self) -> Dict[str, Any]:
        return {
            "isInitialized": self.status != WalletStatus.UNINITIALIZED,
            "isUnlocked": self.is_unlocked,
            "baseAddress": self._keystore.base_address if self._keystore else None
        }

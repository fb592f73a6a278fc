# src/zenon_wallet_api/wallet/key_vault.py
from typing import Optional
from dataclasses import dataclass

from ..blockchain.primitives import Address
from ..crypto.keys import KeyPair
from ..exceptions import InvalidArgument, NotFound, StaleSession, WalletLocked
from ..utils.config import Config

def wipe_buffer(buffer: bytearray):
    for i in range(len(buffer)):
        buffer[i] = 0

@dataclass(frozen=True)
class DerivedAccount:
    index: int
    address: Address
    public_key: bytes

class KeyVault:
    """Holds the decrypted wallet seed for one unlocked session.

    Every install of new seed material starts a new session generation.
    The seed lives in a mutable buffer so it can be zeroed on wipe.
    """

    def __init__(self):
        self._seed: Optional[bytearray] = None
        self.generation = 0

    @property
    def is_loaded(self) -> bool:
        return self._seed is not None

    def install(self, seed: bytearray) -> int:
        """Take ownership of ``seed`` and start a new session generation"""
        self.wipe()
        self._seed = seed
        self.generation += 1
        return self.generation

    def wipe(self):
        if self._seed is not None:
            wipe_buffer(self._seed)
            self._seed = None

    @staticmethod
    def check_index(index: int):
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidArgument(f"Account index must be an integer, got {index!r}")
        if index < 0:
            raise InvalidArgument(f"Account index must not be negative, got {index}")
        if index > Config.MAX_ACCOUNT_INDEX:
            raise NotFound(f"Account index {index} is out of range")

    def _keypair(self, index: int) -> KeyPair:
        if self._seed is None:
            raise WalletLocked()
        return KeyPair.from_seed(bytes(self._seed), index)

    def derive_account(self, index: int) -> DerivedAccount:
        """Deterministic address and public key of an account index"""
        self.check_index(index)
        keypair = self._keypair(index)
        return DerivedAccount(
            index=index,
            address=keypair.get_address(),
            public_key=keypair.get_public_key()
        )

    def sign(self, index: int, generation: int, message: bytes) -> bytes:
        """Sign with an account key issued during session ``generation``"""
        if generation != self.generation:
            raise StaleSession()
        return self._keypair(index).sign(message)

# src/zenon_wallet_api/wallet/account.py
from typing import List, Dict, Any
import logging

from ..blockchain.primitives import Address
from ..exceptions import InvalidArgument
from ..utils.config import Config
from .key_vault import KeyVault
from .wallet_state import WalletState

logger = logging.getLogger(__name__)

class Account:
    """Handle on a wallet account for the session that resolved it.

    The handle never holds key material; signing goes back to the vault,
    which rejects handles from an earlier session.
    """

    def __init__(self, index: int, address: Address, public_key: bytes, vault: KeyVault, generation: int):
        self.index = index
        self.address = address
        self.public_key = public_key
        self._vault = vault
        self._generation = generation

    @property
    def generation(self) -> int:
        return self._generation

    def sign(self, message: bytes) -> bytes:
        return self._vault.sign(self.index, self._generation, message)

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "address": str(self.address)}

    def __repr__(self) -> str:
        return f"Account(index={self.index}, address={self.address})"

class AccountResolver:
    def __init__(self, wallet: WalletState):
        self.wallet = wallet

    def get_account(self, index: int) -> Account:
        """Resolve the account at ``index`` of the unlocked wallet"""
        self.wallet.require_unlocked()
        vault = self.wallet.vault
        derived = vault.derive_account(index)
        return Account(
            index=derived.index,
            address=derived.address,
            public_key=derived.public_key,
            vault=vault,
            generation=vault.generation
        )

    def list_accounts(self, page_index: int = 0, page_size: int = Config.RPC_MAX_PAGE_SIZE) -> List[Account]:
        if page_index < 0:
            raise InvalidArgument("pageIndex must not be negative")
        if not 1 <= page_size <= Config.RPC_MAX_PAGE_SIZE:
            raise InvalidArgument(f"pageSize must be between 1 and {Config.RPC_MAX_PAGE_SIZE}")

        start = page_index * page_size
        end = min(start + page_size, Config.MAX_ACCOUNT_INDEX + 1)
        return [self.get_account(index) for index in range(start, end)]

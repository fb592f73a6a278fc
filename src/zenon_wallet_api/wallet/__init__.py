# src/zenon_wallet_api/wallet/__init__.py
from .account import Account, AccountResolver
from .key_vault import KeyVault
from .keystore import KeyStoreFile, KeyStoreRepository
from .wallet_state import WalletState, WalletStatus

__all__ = [
    'Account',
    'AccountResolver',
    'KeyVault',
    'KeyStoreFile',
    'KeyStoreRepository',
    'WalletState',
    'WalletStatus',
]

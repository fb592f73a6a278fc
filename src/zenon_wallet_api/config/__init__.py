from .settings import WalletApiConfig

__all__ = ['WalletApiConfig']

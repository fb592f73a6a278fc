from .plasma import router as plasma_router
from .transfer import router as transfer_router
from .wallet import router as wallet_router

__all__ = ['plasma_router', 'transfer_router', 'wallet_router']

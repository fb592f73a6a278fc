# src/zenon_wallet_api/utils/__init__.py
from .config import Config

__all__ = ['Config']

# src/zenon_wallet_api/network/__init__.py
from ..utils.config import Config
from .memory import InMemoryLedger, InMemoryTransport
from .node_connection import ConnectionStatus, NodeConnection
from .transport import NodeTransport, RpcError, TransportFactory, WebSocketTransport

def create_transport_factory(
    url: str,
    timeout: float = Config.NODE_TIMEOUT,
    chain_identifier: int = Config.CHAIN_IDENTIFIER
) -> TransportFactory:
    """Build the transport factory for a node url (ws://, wss:// or memory://)"""
    if url.startswith("memory://"):
        ledger = InMemoryLedger(chain_identifier)
        return lambda: InMemoryTransport(ledger)
    if url.startswith(("ws://", "wss://")):
        return lambda: WebSocketTransport(url, timeout)
    raise ValueError(f"Unsupported node url '{url}'")

__all__ = [
    'ConnectionStatus',
    'InMemoryLedger',
    'InMemoryTransport',
    'NodeConnection',
    'NodeTransport',
    'RpcError',
    'TransportFactory',
    'WebSocketTransport',
    'create_transport_factory',
]

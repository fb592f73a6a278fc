# src/zenon_wallet_api/network/transport.py

import asyncio
import itertools
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..utils.config import Config

logger = logging.getLogger(__name__)

class RpcError(Exception):
    """Error object returned by the node for a JSON-RPC request"""

    def __init__(self, code: int, message: str):
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message

class NodeTransport(Protocol):
    """Capability to exchange JSON-RPC requests with a node.

    Transport failures surface as ConnectionError, node-side errors as
    RpcError.
    """

    async def connect(self) -> None: ...

    async def request(self, method: str, params: List[Any]) -> Any: ...

    async def close(self) -> None: ...

TransportFactory = Callable[[], NodeTransport]

class WebSocketTransport:
    """JSON-RPC 2.0 over a single websocket to a node"""

    def __init__(self, url: str, timeout: float = Config.NODE_TIMEOUT):
        self.url = url
        self.timeout = timeout
        self._websocket = None
        self._reader: Optional[asyncio.Task] = None
        self._pending: Dict[int, asyncio.Future] = {}
        self._ids = itertools.count(1)

    @property
    def is_open(self) -> bool:
        return self._websocket is not None and self._reader is not None and not self._reader.done()

    async def connect(self) -> None:
        logger.debug(f"Dialing node at {self.url}")
        try:
            self._websocket = await asyncio.wait_for(
                websockets.connect(self.url, max_size=None),
                timeout=self.timeout
            )
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            raise ConnectionError(f"Failed to connect to {self.url}: {str(e)}") from e
        self._reader = asyncio.create_task(self._read_loop())

    async def _read_loop(self):
        try:
            async for message in self._websocket:
                self._dispatch(message)
        except ConnectionClosed as e:
            logger.warning(f"Node connection closed: {str(e)}")
        finally:
            pending, self._pending = self._pending, {}
            for future in pending.values():
                if not future.done():
                    future.set_exception(ConnectionError("Connection to node closed"))

    def _dispatch(self, message):
        try:
            data = json.loads(message)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Ignoring malformed message from node")
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring non-object message from node")
            return

        # subscription notifications carry no id
        request_id = data.get("id")
        if not isinstance(request_id, int):
            return
        future = self._pending.pop(request_id, None)
        if future is None or future.done():
            return

        error = data.get("error")
        if isinstance(error, dict):
            future.set_exception(RpcError(error.get("code", -32000), str(error.get("message", ""))))
        elif error:
            future.set_exception(RpcError(-32000, str(error)))
        else:
            future.set_result(data.get("result"))

    async def request(self, method: str, params: List[Any]) -> Any:
        if not self.is_open:
            raise ConnectionError("Not connected to node")

        request_id = next(self._ids)
        future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        payload = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params}
        try:
            await self._websocket.send(json.dumps(payload))
            return await asyncio.wait_for(future, timeout=self.timeout)
        except ConnectionClosed as e:
            raise ConnectionError(f"Connection to node closed: {str(e)}") from e
        except asyncio.TimeoutError as e:
            raise ConnectionError(f"Node did not answer {method} within {self.timeout}s") from e
        finally:
            self._pending.pop(request_id, None)

    async def close(self) -> None:
        if self._websocket is not None:
            await self._websocket.close()
        if self._reader is not None:
            await asyncio.gather(self._reader, return_exceptions=True)
        self._websocket = None
        self._reader = None

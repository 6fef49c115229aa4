"""
JSON-RPC client for the Ansible language server.

The language server performs the playbook explanation; this adapter starts it
over stdio, completes the LSP handshake and forwards custom requests.
"""

import logging
import os
import shlex
from typing import Any, Dict, List, Optional, Union

from pygls.client import JsonRPCClient

logger = logging.getLogger(__name__)


def _to_plain(value: Any) -> Any:
    """Convert a deserialized JSON-RPC result back to plain dicts/lists."""
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if hasattr(value, "_asdict"):
        return {k: _to_plain(v) for k, v in value._asdict().items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    if hasattr(value, "__dict__") and not isinstance(value, type):
        return {k: _to_plain(v) for k, v in vars(value).items()}
    return value


class LanguageServiceClient:
    """
    Client for a long-lived language server process.
    """

    def __init__(
        self,
        command: Union[str, List[str]],
        root_uri: Optional[str] = None,
    ):
        self.command = shlex.split(command) if isinstance(command, str) else command
        self.root_uri = root_uri
        self._client: Optional[JsonRPCClient] = None

    @property
    def is_running(self) -> bool:
        return self._client is not None

    async def start(self):
        """
        Launch the server and perform the initialize/initialized handshake.
        """
        if not self.command:
            raise ValueError("Language server command is empty")

        logger.info(f"Starting language server: {' '.join(self.command)}")
        self._client = JsonRPCClient()
        try:
            await self._client.start_io(self.command[0], *self.command[1:])
        except OSError:
            self._client = None
            raise

        await self._client.protocol.send_request_async(
            "initialize",
            {
                "processId": os.getpid(),
                "rootUri": self.root_uri,
                "capabilities": {},
                "clientInfo": {"name": "lightspeed-client"},
            },
        )
        self._client.protocol.notify("initialized", {})
        logger.info("Language server initialized")

    async def send_request(self, method: str, params: Dict[str, Any]) -> Any:
        if self._client is None:
            raise RuntimeError("Language server is not running")
        result = await self._client.protocol.send_request_async(method, params)
        return _to_plain(result)

    async def stop(self):
        if self._client is None:
            return
        try:
            await self._client.protocol.send_request_async("shutdown", None)
            self._client.protocol.notify("exit", None)
        except Exception as e:
            logger.warning(f"Error during language server shutdown: {e}")
        finally:
            await self._client.stop()
            self._client = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()

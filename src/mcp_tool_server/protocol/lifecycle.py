"""MCP lifecycle management.

Handles the initialize/initialized handshake and tracks session state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from mcp_tool_server.protocol.jsonrpc import INVALID_PARAMS, INVALID_REQUEST, JsonRpcError

logger = logging.getLogger(__name__)

# The single protocol version this server speaks. Negotiation is exact match.
MCP_PROTOCOL_VERSION = "2025-11-25"


class LifecycleState(Enum):
    """MCP session lifecycle states."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


@dataclass
class LifecycleManager:
    """Manages the MCP session lifecycle.

    A session starts UNINITIALIZED and moves to INITIALIZED on the first
    successful ``initialize`` request. INITIALIZED is terminal.
    """

    server_info: dict[str, str] = field(
        default_factory=lambda: {"name": "mcp-tool-server", "version": "0.1.0"}
    )
    protocol_version: str = MCP_PROTOCOL_VERSION
    capabilities: dict[str, Any] = field(default_factory=lambda: {"tools": {}})
    instructions: str | None = None
    state: LifecycleState = LifecycleState.UNINITIALIZED
    negotiated_version: str | None = None
    client_info: dict[str, Any] | None = None

    @property
    def is_initialized(self) -> bool:
        """Check if the handshake has completed."""
        return self.state == LifecycleState.INITIALIZED

    def require_initialized(self) -> None:
        """Assert that the handshake has completed.

        Raises:
            JsonRpcError: INVALID_REQUEST while the session is uninitialized.
        """
        if not self.is_initialized:
            raise JsonRpcError(INVALID_REQUEST, "Server not initialized")

    def handle_initialize(self, params: Any) -> dict[str, Any]:
        """Handle initialize request.

        Args:
            params: Initialize request parameters.

        Returns:
            Initialize response result.

        Raises:
            JsonRpcError: If already initialized, params are malformed, or the
                requested protocol version is not supported.
        """
        if self.is_initialized:
            raise JsonRpcError(INVALID_REQUEST, "Server already initialized")

        if not isinstance(params, dict):
            raise JsonRpcError(INVALID_PARAMS, "Invalid params: expected an object")

        requested_version = params.get("protocolVersion")
        if not isinstance(requested_version, str):
            raise JsonRpcError(INVALID_PARAMS, "Invalid params: protocolVersion must be a string")

        client_info = params.get("clientInfo")
        client_name = client_info.get("name") if isinstance(client_info, dict) else None
        logger.info("Received initialization request from %s", client_name)

        if requested_version != self.protocol_version:
            raise JsonRpcError(
                INVALID_PARAMS,
                "Unsupported protocol version",
                data={
                    "supported": [self.protocol_version],
                    "requested": requested_version,
                },
            )

        self.client_info = client_info if isinstance(client_info, dict) else None
        self.negotiated_version = requested_version
        self.state = LifecycleState.INITIALIZED

        result: dict[str, Any] = {
            "protocolVersion": self.negotiated_version,
            "capabilities": self.capabilities,
            "serverInfo": self.server_info,
        }
        if self.instructions:
            result["instructions"] = self.instructions
        return result

    def handle_initialized(self) -> None:
        """Handle the initialized notification.

        Accepted silently in any state; the session has no third state to enter.
        """
        if not self.is_initialized:
            logger.debug("initialized notification received before initialize")

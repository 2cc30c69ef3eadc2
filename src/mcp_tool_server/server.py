"""MCP Server - wires the protocol layer to the tool registry.

Integrates all components into a complete MCP server.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from mcp_tool_server.audit import AuditLog
from mcp_tool_server.config import ServerConfig
from mcp_tool_server.protocol.dispatcher import MethodDispatcher
from mcp_tool_server.protocol.jsonrpc import (
    INTERNAL_ERROR,
    JsonRpcError,
    JsonRpcNotification,
    Response,
    format_error,
    parse_message,
)
from mcp_tool_server.protocol.lifecycle import LifecycleManager
from mcp_tool_server.protocol.tools import ToolsHandler
from mcp_tool_server.protocol.transport import StdioTransport
from mcp_tool_server.tools.base import ToolBase
from mcp_tool_server.tools.registry import ToolRegistry
from mcp_tool_server.tools.validator import InputValidator

logger = logging.getLogger(__name__)


class MCPServer:
    """MCP Server implementation.

    Owns all session state and provides a complete MCP server that handles:
    - Lifecycle management (initialize/initialized)
    - Tool listing and execution
    - ping

    Tools are registered before ``serve()``; the method and tool tables are
    read-only once the server is serving.
    """

    def __init__(self, config: ServerConfig | None = None) -> None:
        """Initialize the server.

        Args:
            config: Server configuration (defaults to ServerConfig()).
        """
        self._config = config or ServerConfig()

        self._audit_log: AuditLog | None = None
        if self._config.audit_log_file:
            self._audit_log = AuditLog(Path(self._config.audit_log_file))

        self._lifecycle = LifecycleManager(
            server_info=self._config.server_info,
            protocol_version=self._config.protocol_version,
            instructions=self._config.instructions,
        )
        self._registry = ToolRegistry(
            InputValidator(max_string_length=self._config.max_string_length)
        )
        self._tools_handler = ToolsHandler(self._registry, self._audit_log)

        self._dispatcher = MethodDispatcher()
        self._dispatcher.register("initialize", self._lifecycle.handle_initialize)
        self._dispatcher.register("notifications/initialized", self._handle_initialized)
        self._dispatcher.register("ping", self._handle_ping)
        self._dispatcher.register("tools/list", self._handle_tools_list)
        self._dispatcher.register("tools/call", self._handle_tools_call)

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def lifecycle(self) -> LifecycleManager:
        return self._lifecycle

    def register_tool(self, tool: ToolBase) -> None:
        """Register a tool.

        Args:
            tool: Tool to register.

        Raises:
            RuntimeError: If the server is already serving.
            ValueError: If the tool name is taken or its schema is invalid.
        """
        if self._dispatcher.sealed:
            raise RuntimeError("Tools must be registered before the server starts serving")
        self._registry.register(tool)
        logger.debug("Registered tool: %s", tool.name)

    def list_tools(self) -> list[dict[str, Any]]:
        """List all registered tools.

        Returns:
            List of tool definitions.
        """
        return self._registry.list_tools()

    def handle_message(self, raw_message: str) -> str | None:
        """Handle an incoming JSON-RPC message.

        Args:
            raw_message: Raw JSON-RPC message string.

        Returns:
            Response string or None for notifications. Never raises, so one
            bad line cannot end the serve loop.
        """
        try:
            message = parse_message(raw_message, max_size=self._config.max_message_size)
        except JsonRpcError as e:
            logger.warning("Rejected message: %s", e.message)
            return format_error(e.msg_id, e.code, e.message)
        except Exception:
            logger.exception("Unexpected failure while parsing a message")
            return format_error(None, INTERNAL_ERROR, "Internal error")

        try:
            response = self._dispatcher.dispatch(message)
        except Exception:
            logger.exception("Unexpected failure while dispatching '%s'", message.method)
            if isinstance(message, JsonRpcNotification):
                return None
            return format_error(message.id, INTERNAL_ERROR, "Internal error")

        if response is None:
            return None
        return self._encode(response)

    def serve(self, transport: StdioTransport) -> None:
        """Serve requests from a transport until EOF.

        Args:
            transport: Transport to read requests from and write responses to.
        """
        self._dispatcher.seal()
        logger.info(
            "Serving %d tool(s) with protocol version %s",
            len(self._registry),
            self._config.protocol_version,
        )
        transport.serve(self.handle_message)

    def _encode(self, response: Response) -> str:
        """Encode a response, degrading to an internal error if that fails."""
        try:
            return response.to_json()
        except (TypeError, ValueError, RecursionError) as e:
            logger.error("Failed to encode response for request %r: %s", response.id, e)
            return format_error(response.id, INTERNAL_ERROR, "Internal error")

    def _handle_initialized(self, params: Any) -> None:
        self._lifecycle.handle_initialized()

    def _handle_ping(self, params: Any) -> dict[str, Any]:
        return {}

    def _handle_tools_list(self, params: Any) -> dict[str, Any]:
        self._lifecycle.require_initialized()
        return self._tools_handler.handle_list(params).to_dict()

    def _handle_tools_call(self, params: Any) -> dict[str, Any]:
        self._lifecycle.require_initialized()
        result = self._tools_handler.handle_call(params, self._dispatcher.current_request_id)
        return result.to_dict()

    def close(self) -> None:
        """Close the server and release resources."""
        if self._audit_log:
            self._audit_log.close()

    def __enter__(self) -> MCPServer:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()

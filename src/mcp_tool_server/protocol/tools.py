"""MCP tools/list and tools/call handlers.

Handles tool-related MCP requests, routing them through the tool registry.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

from mcp_tool_server.audit import AuditLog
from mcp_tool_server.protocol.jsonrpc import INVALID_PARAMS, JsonRpcError, MessageId
from mcp_tool_server.tools.base import ToolResult
from mcp_tool_server.tools.registry import ToolNotFoundError, ToolRegistry


@dataclass
class ToolsListResult:
    """Result of tools/list request."""

    tools: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/list result format.
        """
        return {"tools": self.tools}


@dataclass
class ToolsCallParams:
    """Parameters of a tools/call request."""

    name: str
    arguments: dict[str, Any]

    @classmethod
    def from_params(cls, params: Any) -> ToolsCallParams:
        """Parse raw request params.

        Raises:
            JsonRpcError: INVALID_PARAMS if the params are malformed.
        """
        if not isinstance(params, dict):
            raise JsonRpcError(INVALID_PARAMS, "Invalid params: expected an object")

        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise JsonRpcError(INVALID_PARAMS, "Invalid params: name must be a non-empty string")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise JsonRpcError(INVALID_PARAMS, "Invalid params: arguments must be an object")

        return cls(name=name, arguments=arguments)


class ToolsHandler:
    """Handles tools/list and tools/call MCP requests.

    Routes requests through the tool registry and formats results
    as MCP result objects.
    """

    def __init__(self, registry: ToolRegistry, audit_log: AuditLog | None = None) -> None:
        """Initialize the handler.

        Args:
            registry: Tool registry for routing calls.
            audit_log: Optional audit trail for tool invocations.
        """
        self._registry = registry
        self._audit_log = audit_log

    def handle_list(self, params: Any = None) -> ToolsListResult:
        """Handle tools/list request.

        Pagination is not supported, so a cursor in params is ignored.

        Returns:
            ToolsListResult with all available tools.
        """
        return ToolsListResult(tools=self._registry.list_tools())

    def handle_call(self, params: Any, request_id: MessageId = None) -> ToolResult:
        """Handle tools/call request.

        Args:
            params: Raw request params with ``name`` and ``arguments``.
            request_id: JSON-RPC id of the request, recorded in the audit trail.

        Returns:
            ToolResult with execution result. Tool failures are reported here
            with ``is_error`` set.

        Raises:
            JsonRpcError: INVALID_PARAMS for malformed params or unknown tools.
        """
        call = ToolsCallParams.from_params(params)

        start = time.monotonic()
        try:
            result = self._registry.call_tool(call.name, call.arguments)
        except ToolNotFoundError as e:
            raise JsonRpcError(
                INVALID_PARAMS, "tool not found", data={"name": e.tool_name}
            ) from e

        if self._audit_log:
            self._audit_log.record_call(
                request_id,
                call.name,
                call.arguments,
                is_error=result.is_error,
                duration_ms=(time.monotonic() - start) * 1000,
            )

        return result

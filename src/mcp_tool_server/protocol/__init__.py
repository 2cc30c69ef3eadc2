"""MCP Protocol layer for JSON-RPC communication."""

from mcp_tool_server.protocol.dispatcher import MethodDispatcher
from mcp_tool_server.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    JsonRpcErrorObject,
    JsonRpcNotification,
    JsonRpcRequest,
    Response,
    format_error,
    parse_message,
    parse_response,
)
from mcp_tool_server.protocol.lifecycle import (
    MCP_PROTOCOL_VERSION,
    LifecycleManager,
    LifecycleState,
)
from mcp_tool_server.protocol.tools import ToolsCallParams, ToolsHandler, ToolsListResult
from mcp_tool_server.protocol.transport import StdioTransport

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "JsonRpcError",
    "JsonRpcErrorObject",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "LifecycleManager",
    "LifecycleState",
    "MCP_PROTOCOL_VERSION",
    "METHOD_NOT_FOUND",
    "MethodDispatcher",
    "PARSE_ERROR",
    "Response",
    "StdioTransport",
    "ToolsCallParams",
    "ToolsHandler",
    "ToolsListResult",
    "format_error",
    "parse_message",
    "parse_response",
]

"""MCP tool server over a newline-delimited JSON-RPC stdio stream."""

from mcp_tool_server.config import ServerConfig, load_config
from mcp_tool_server.server import MCPServer

__version__ = "0.1.0"

__all__ = ["MCPServer", "ServerConfig", "load_config"]

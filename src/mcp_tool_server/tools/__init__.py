"""Tool system for MCP tools."""

from mcp_tool_server.tools.base import ToolBase, ToolDefinition, ToolResult
from mcp_tool_server.tools.calculator import CalculatorTool
from mcp_tool_server.tools.expression import ExpressionError, evaluate
from mcp_tool_server.tools.registry import ToolNotFoundError, ToolRegistry
from mcp_tool_server.tools.validator import InputValidator, ValidationError

__all__ = [
    "CalculatorTool",
    "ExpressionError",
    "InputValidator",
    "ToolBase",
    "ToolDefinition",
    "ToolNotFoundError",
    "ToolRegistry",
    "ToolResult",
    "ValidationError",
    "evaluate",
]

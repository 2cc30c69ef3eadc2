"""Tool registry - routes tool calls to the registered tool."""

from __future__ import annotations

import logging
from typing import Any

from mcp_tool_server.tools.base import ToolBase, ToolDefinition, ToolResult
from mcp_tool_server.tools.validator import InputValidator, ValidationError, check_schema

logger = logging.getLogger(__name__)


class ToolNotFoundError(Exception):
    """Raised when a tool is not found."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Tool not found: {tool_name}")
        self.tool_name = tool_name


class ToolRegistry:
    """Holds registered tools and invokes them.

    Tools are registered once at startup. A call validates arguments
    against the tool's input schema, runs the tool, and turns any failure
    into an error result so it never escapes as an exception.
    """

    def __init__(self, validator: InputValidator | None = None) -> None:
        """Initialize the registry.

        Args:
            validator: Argument validator (defaults to InputValidator()).
        """
        self._validator = validator or InputValidator()
        self._tools: dict[str, ToolBase] = {}
        self._definitions: dict[str, ToolDefinition] = {}

    def __len__(self) -> int:
        return len(self._tools)

    def register(self, tool: ToolBase) -> None:
        """Register a tool.

        Args:
            tool: Tool instance to register.

        Raises:
            ValueError: If the name is taken or the input schema is invalid.
        """
        definition = tool.definition()
        if definition.name in self._tools:
            raise ValueError(f"Tool already registered: {definition.name}")

        try:
            check_schema(definition.input_schema)
        except ValidationError as e:
            raise ValueError(f"Tool '{definition.name}' has an invalid input schema: {e}") from e

        self._tools[definition.name] = tool
        self._definitions[definition.name] = definition

    def list_tools(self) -> list[dict[str, Any]]:
        """List all available tools in MCP format.

        Returns:
            List of tool definitions in registration order.
        """
        return [definition.to_dict() for definition in self._definitions.values()]

    def call_tool(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        """Call a tool by name.

        Args:
            tool_name: Name of the tool to call.
            arguments: Arguments to pass to the tool.

        Returns:
            ToolResult from the tool, or an error result if validation or
            execution failed.

        Raises:
            ToolNotFoundError: If the tool is not registered.
        """
        tool = self._tools.get(tool_name)
        if tool is None:
            raise ToolNotFoundError(tool_name)

        schema = self._definitions[tool_name].input_schema
        try:
            arguments = self._validator.validate_tool_input(tool_name, schema, arguments)
        except ValidationError as e:
            logger.info("Rejected arguments for '%s': %s", tool_name, e)
            return tool.invalid_arguments(str(e))

        try:
            result = tool.execute(arguments)
        except Exception as e:
            logger.exception("Tool '%s' raised during execution", tool_name)
            return ToolResult.error(f"Tool execution failed: {e}")

        if not isinstance(result, ToolResult):
            logger.error("Tool '%s' returned %s", tool_name, type(result).__name__)
            return ToolResult.error("Tool execution failed: tool returned an invalid result")

        return result

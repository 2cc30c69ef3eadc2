"""Tool base class and data structures.

Defines the interface that all tools must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class ToolDefinition:
    """Definition of a tool, as advertised by tools/list."""

    name: str
    input_schema: dict[str, Any]
    title: str | None = None
    description: str | None = None
    output_schema: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP tool format.

        Returns:
            Dictionary in MCP tools/list format. Unset optional fields are omitted.
        """
        tool: dict[str, Any] = {"name": self.name}
        if self.title is not None:
            tool["title"] = self.title
        if self.description is not None:
            tool["description"] = self.description
        tool["inputSchema"] = self.input_schema
        if self.output_schema is not None:
            tool["outputSchema"] = self.output_schema
        return tool


@dataclass
class ToolResult:
    """Result of a tool execution (the MCP CallToolResult)."""

    content: list[dict[str, Any]]
    structured_content: Any | None = None
    is_error: bool = False

    @classmethod
    def text(cls, text: str, structured_content: Any | None = None) -> ToolResult:
        """Build a successful result with a single text block."""
        return cls(
            content=[{"type": "text", "text": text}],
            structured_content=structured_content,
        )

    @classmethod
    def error(cls, text: str) -> ToolResult:
        """Build a tool-level failure with a single text block."""
        return cls(content=[{"type": "text", "text": text}], is_error=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/call result format.
        """
        result: dict[str, Any] = {
            "content": self.content,
            "isError": self.is_error,
        }
        if self.structured_content is not None:
            result["structuredContent"] = self.structured_content
        return result


class ToolBase(ABC):
    """Abstract base class for all tools.

    A tool describes itself and executes with already-validated arguments.
    It never needs to know about the dispatcher or the session.
    """

    @abstractmethod
    def definition(self) -> ToolDefinition:
        """Return the tool's definition."""

    @abstractmethod
    def execute(self, arguments: dict[str, Any]) -> ToolResult:
        """Execute the tool.

        Args:
            arguments: Arguments that passed input schema validation.

        Returns:
            ToolResult with content and error status.
        """

    def invalid_arguments(self, message: str) -> ToolResult:
        """Report arguments that failed schema validation.

        Args:
            message: Description of the validation failure.

        Returns:
            ToolResult flagged as an error.
        """
        return ToolResult.error(f"Invalid arguments: {message}")

    @property
    def name(self) -> str:
        """Return the tool name."""
        return self.definition().name

"""Calculator tool - evaluates integer arithmetic expressions."""

from __future__ import annotations

from typing import Any

from mcp_tool_server.tools.base import ToolBase, ToolDefinition, ToolResult
from mcp_tool_server.tools.expression import ExpressionError, evaluate


class CalculatorTool(ToolBase):
    """Evaluates arithmetic expressions over integers.

    Supports ``+``, ``-``, ``*``, ``/`` (truncating) and parentheses.
    """

    def definition(self) -> ToolDefinition:
        """Return the calculator tool definition."""
        return ToolDefinition(
            name="calculator",
            title="Calculator",
            description="A simple calculator that can perform basic arithmetic operations.",
            input_schema={
                "type": "object",
                "properties": {
                    "expression": {
                        "type": "string",
                        "description": (
                            "The arithmetic expression to evaluate. "
                            "Supported operations: +, -, *, /, parentheses."
                        ),
                    },
                },
                "required": ["expression"],
                "additionalProperties": False,
            },
            output_schema={
                "type": "object",
                "properties": {"result": {"type": "integer"}},
                "required": ["result"],
            },
        )

    def execute(self, arguments: dict[str, Any]) -> ToolResult:
        """Evaluate the expression.

        Args:
            arguments: Must contain ``expression``.

        Returns:
            ToolResult with the integer result as text and structured content,
            or an error result if the expression cannot be evaluated.
        """
        try:
            value = evaluate(arguments["expression"])
        except ExpressionError as e:
            return ToolResult.error(f"Error evaluating expression: {e}")

        return ToolResult.text(str(value), structured_content={"result": value})

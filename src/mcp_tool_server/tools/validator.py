"""Input validation for tool arguments.

Validates tool arguments against the tool's declared JSON Schema before
the tool sees them.
"""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, best_match


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass


def check_schema(schema: dict[str, Any]) -> None:
    """Check that a schema is itself valid JSON Schema.

    Args:
        schema: Schema to check.

    Raises:
        ValidationError: If the schema is invalid.
    """
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as e:
        raise ValidationError(f"Invalid schema: {e.message}") from e


class InputValidator:
    """Validates tool inputs.

    Combines JSON Schema validation with a length limit on string values.
    """

    def __init__(self, max_string_length: int = 10000) -> None:
        """Initialize the validator.

        Args:
            max_string_length: Maximum allowed string length.
        """
        self._max_string_length = max_string_length

    def _validate_string_lengths(self, value: Any, field: str) -> None:
        """Validate string length, recursing into containers."""
        if isinstance(value, str):
            if len(value) > self._max_string_length:
                raise ValidationError(
                    f"Field '{field}' exceeds maximum length of {self._max_string_length}"
                )
        elif isinstance(value, dict):
            for key, item in value.items():
                self._validate_string_lengths(item, f"{field}.{key}")
        elif isinstance(value, list):
            for i, item in enumerate(value):
                self._validate_string_lengths(item, f"{field}[{i}]")

    def validate_tool_input(
        self, tool_name: str, schema: dict[str, Any], arguments: dict[str, Any]
    ) -> dict[str, Any]:
        """Validate tool input.

        Args:
            tool_name: Name of the tool (for error messages).
            schema: JSON Schema for the tool's input.
            arguments: Arguments to validate.

        Returns:
            The validated arguments.

        Raises:
            ValidationError: If validation fails.
        """
        try:
            validator = Draft202012Validator(schema)
            # Report the most relevant error
            error = best_match(validator.iter_errors(arguments))
        except SchemaError as e:
            raise ValidationError(f"Invalid schema for tool {tool_name}: {e.message}") from e

        if error is not None:
            path = ".".join(str(p) for p in error.path) if error.path else "root"
            raise ValidationError(f"Schema validation failed at '{path}': {error.message}")

        for key, value in arguments.items():
            self._validate_string_lengths(value, key)

        return arguments

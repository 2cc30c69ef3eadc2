"""Tests for tool input validation."""

import pytest

from mcp_tool_server.tools.validator import InputValidator, ValidationError, check_schema

SCHEMA = {
    "type": "object",
    "properties": {
        "query": {"type": "string"},
        "limit": {"type": "integer", "minimum": 1},
        "filters": {
            "type": "object",
            "properties": {"tags": {"type": "array", "items": {"type": "string"}}},
        },
    },
    "required": ["query"],
}


class TestCheckSchema:
    """Tests for schema checking at registration."""

    def test_accepts_valid_schema(self):
        check_schema(SCHEMA)

    def test_rejects_invalid_schema(self):
        """Should reject schemas that violate the metaschema."""
        with pytest.raises(ValidationError, match="Invalid schema"):
            check_schema({"type": 12})


class TestInputValidator:
    """Tests for InputValidator."""

    def test_returns_valid_arguments(self):
        """Valid arguments are returned unchanged."""
        arguments = {"query": "abc", "limit": 3}

        assert InputValidator().validate_tool_input("search", SCHEMA, arguments) == arguments

    def test_reports_missing_required_field(self):
        """Should name the missing property."""
        with pytest.raises(ValidationError, match="'query' is a required property"):
            InputValidator().validate_tool_input("search", SCHEMA, {})

    def test_reports_path_of_nested_error(self):
        """Should report where in the arguments the error is."""
        with pytest.raises(ValidationError, match="filters.tags.0"):
            InputValidator().validate_tool_input(
                "search", SCHEMA, {"query": "q", "filters": {"tags": [1]}}
            )

    def test_reports_root_path(self):
        """Errors on the arguments object itself are reported at root."""
        with pytest.raises(ValidationError, match="'root'"):
            InputValidator().validate_tool_input("search", {"type": "object"}, [])

    def test_enforces_string_length(self):
        """Should reject strings over the configured length."""
        validator = InputValidator(max_string_length=5)

        with pytest.raises(ValidationError, match="exceeds maximum length"):
            validator.validate_tool_input("search", SCHEMA, {"query": "too long"})

    def test_enforces_string_length_in_nested_values(self):
        """Length limits apply inside objects and arrays."""
        validator = InputValidator(max_string_length=5)

        with pytest.raises(ValidationError, match=r"filters\.tags\[0\]"):
            validator.validate_tool_input(
                "search", SCHEMA, {"query": "q", "filters": {"tags": ["abcdefgh"]}}
            )

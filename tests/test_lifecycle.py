"""Tests for STDIO transport and MCP lifecycle management."""

import io
import json
from unittest.mock import MagicMock

import pytest

from mcp_tool_server.protocol.jsonrpc import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    PARSE_ERROR,
    JsonRpcError,
)
from mcp_tool_server.protocol.lifecycle import (
    MCP_PROTOCOL_VERSION,
    LifecycleManager,
    LifecycleState,
)
from mcp_tool_server.protocol.transport import StdioTransport


def _init_params(version: str = MCP_PROTOCOL_VERSION) -> dict:
    return {
        "protocolVersion": version,
        "capabilities": {},
        "clientInfo": {"name": "test-client", "version": "1.0"},
    }


class TestStdioTransport:
    """Tests for STDIO transport layer."""

    def test_reads_line_from_stdin(self):
        """Should read a line from stdin."""
        mock_stdin = io.BytesIO(b'{"jsonrpc":"2.0","id":1,"method":"test"}\n')
        transport = StdioTransport(stdin=mock_stdin, stdout=io.BytesIO())

        line = transport.read_message()
        assert line == '{"jsonrpc":"2.0","id":1,"method":"test"}'

    def test_reads_utf8(self):
        """Should decode UTF-8 input."""
        mock_stdin = io.BytesIO('{"text": "héllo ✓"}\n'.encode())
        transport = StdioTransport(stdin=mock_stdin, stdout=io.BytesIO())

        assert transport.read_message() == '{"text": "héllo ✓"}'

    def test_writes_line_to_stdout(self):
        """Should write a line to stdout with newline."""
        mock_stdout = io.BytesIO()
        transport = StdioTransport(stdin=io.BytesIO(), stdout=mock_stdout)

        transport.write_message('{"jsonrpc":"2.0","id":1,"result":{}}')

        assert mock_stdout.getvalue() == b'{"jsonrpc":"2.0","id":1,"result":{}}\n'

    def test_returns_none_on_eof(self):
        """Should return None when stdin is exhausted."""
        transport = StdioTransport(stdin=io.BytesIO(b""), stdout=io.BytesIO())

        assert transport.read_message() is None

    def test_strips_whitespace(self):
        """Should strip leading/trailing whitespace from messages."""
        mock_stdin = io.BytesIO(b'  {"test": true}  \r\n')
        transport = StdioTransport(stdin=mock_stdin, stdout=io.BytesIO())

        assert transport.read_message() == '{"test": true}'

    def test_skips_empty_lines(self):
        """Should skip empty lines."""
        mock_stdin = io.BytesIO(b'\n\n{"valid": true}\n\n')
        transport = StdioTransport(stdin=mock_stdin, stdout=io.BytesIO())

        assert transport.read_message() == '{"valid": true}'

    def test_returns_none_on_read_exception(self):
        """Should return None when read raises an exception."""
        mock_stdin = MagicMock()
        mock_stdin.readline.side_effect = OSError("Pipe broken")

        transport = StdioTransport(stdin=mock_stdin, stdout=io.BytesIO())

        assert transport.read_message() is None

    def test_raises_parse_error_on_invalid_utf8(self):
        """Undecodable bytes are a parse error, not EOF."""
        transport = StdioTransport(stdin=io.BytesIO(b"\xff\xfe{}\n"), stdout=io.BytesIO())

        with pytest.raises(JsonRpcError) as exc_info:
            transport.read_message()
        assert exc_info.value.code == PARSE_ERROR

    def test_serve_writes_handler_responses(self):
        """Should write each non-None handler result on its own line."""
        stdin = io.BytesIO(b"first\nsecond\nthird\n")
        stdout = io.BytesIO()
        transport = StdioTransport(stdin=stdin, stdout=stdout)

        transport.serve(lambda msg: None if msg == "second" else msg.upper())

        assert stdout.getvalue() == b"FIRST\nTHIRD\n"

    def test_serve_survives_invalid_utf8(self):
        """An undecodable line gets a null-id parse error and the loop continues."""
        stdin = io.BytesIO(b"\xff\n" + b"next\n")
        stdout = io.BytesIO()
        transport = StdioTransport(stdin=stdin, stdout=stdout)

        transport.serve(lambda msg: '{"ok": true}')

        lines = stdout.getvalue().decode().splitlines()
        assert len(lines) == 2
        error = json.loads(lines[0])
        assert error["id"] is None
        assert error["error"]["code"] == PARSE_ERROR
        assert json.loads(lines[1]) == {"ok": True}

    def test_serve_stops_on_write_failure(self):
        """A broken output stream ends the loop instead of raising."""
        stdout = MagicMock()
        stdout.write.side_effect = BrokenPipeError("closed")
        transport = StdioTransport(stdin=io.BytesIO(b"a\nb\n"), stdout=stdout)

        transport.serve(lambda msg: msg)

        assert stdout.write.call_count == 1


class TestLifecycleManager:
    """Tests for MCP lifecycle management."""

    def test_starts_in_uninitialized_state(self):
        """Should start in UNINITIALIZED state."""
        manager = LifecycleManager()
        assert manager.state == LifecycleState.UNINITIALIZED
        assert not manager.is_initialized

    def test_handles_initialize_request(self):
        """Should handle initialize request correctly."""
        manager = LifecycleManager()

        result = manager.handle_initialize(_init_params())

        assert manager.state == LifecycleState.INITIALIZED
        assert manager.negotiated_version == MCP_PROTOCOL_VERSION
        assert result["protocolVersion"] == MCP_PROTOCOL_VERSION
        assert "tools" in result["capabilities"]
        assert result["serverInfo"] == {"name": "mcp-tool-server", "version": "0.1.0"}

    def test_records_client_info(self):
        """Should remember the connected client."""
        manager = LifecycleManager()
        manager.handle_initialize(_init_params())

        assert manager.client_info == {"name": "test-client", "version": "1.0"}

    def test_uses_configured_server_info(self):
        """Should advertise the configured server identity."""
        manager = LifecycleManager(server_info={"name": "calc", "version": "9.9"})

        result = manager.handle_initialize(_init_params())

        assert result["serverInfo"]["name"] == "calc"

    def test_includes_instructions_when_set(self):
        """Should add instructions to the result only when configured."""
        manager = LifecycleManager(instructions="Use the calculator.")

        result = manager.handle_initialize(_init_params())

        assert result["instructions"] == "Use the calculator."
        assert "instructions" not in LifecycleManager().handle_initialize(_init_params())

    def test_rejects_unsupported_version(self):
        """Version mismatch is INVALID_PARAMS with supported/requested data."""
        manager = LifecycleManager()

        with pytest.raises(JsonRpcError) as exc_info:
            manager.handle_initialize(_init_params("2024-11-05"))

        error = exc_info.value
        assert error.code == INVALID_PARAMS
        assert error.data == {"supported": [MCP_PROTOCOL_VERSION], "requested": "2024-11-05"}
        assert manager.state == LifecycleState.UNINITIALIZED

    def test_version_match_is_exact(self):
        """No prefix or whitespace tolerance in version matching."""
        manager = LifecycleManager()

        with pytest.raises(JsonRpcError):
            manager.handle_initialize(_init_params(MCP_PROTOCOL_VERSION + " "))

    @pytest.mark.parametrize("params", [None, [], {"clientInfo": {}}, {"protocolVersion": 1}])
    def test_rejects_malformed_params(self, params):
        """Should reject params without a string protocolVersion."""
        manager = LifecycleManager()

        with pytest.raises(JsonRpcError) as exc_info:
            manager.handle_initialize(params)
        assert exc_info.value.code == INVALID_PARAMS

    def test_rejects_initialize_when_already_initialized(self):
        """Should reject a second initialize."""
        manager = LifecycleManager()
        manager.handle_initialize(_init_params())

        with pytest.raises(JsonRpcError, match="already initialized") as exc_info:
            manager.handle_initialize(_init_params())
        assert exc_info.value.code == INVALID_REQUEST
        assert manager.state == LifecycleState.INITIALIZED

    def test_initialized_notification_is_accepted_in_any_state(self):
        """The initialized notification never fails."""
        manager = LifecycleManager()

        manager.handle_initialized()
        assert manager.state == LifecycleState.UNINITIALIZED

        manager.handle_initialize(_init_params())
        manager.handle_initialized()
        assert manager.state == LifecycleState.INITIALIZED

    def test_require_initialized(self):
        """Should guard operations until the handshake completes."""
        manager = LifecycleManager()

        with pytest.raises(JsonRpcError) as exc_info:
            manager.require_initialized()
        assert exc_info.value.code == INVALID_REQUEST

        manager.handle_initialize(_init_params())
        manager.require_initialized()

"""STDIO transport layer for MCP communication.

Reads and writes newline-delimited JSON-RPC messages over a pair of byte
streams. Log output never goes to the protocol stream.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import BinaryIO

from mcp_tool_server.protocol.jsonrpc import PARSE_ERROR, JsonRpcError, format_error

logger = logging.getLogger(__name__)

# Takes one decoded line, returns the encoded response or None
MessageHandler = Callable[[str], str | None]


class StdioTransport:
    """STDIO transport for MCP communication.

    Reads JSON-RPC messages from stdin and writes responses to stdout, one
    UTF-8 encoded message per line.
    """

    def __init__(
        self,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            stdin: Input byte stream (defaults to sys.stdin.buffer).
            stdout: Output byte stream (defaults to sys.stdout.buffer).
        """
        self._stdin = stdin or sys.stdin.buffer
        self._stdout = stdout or sys.stdout.buffer

    def read_message(self) -> str | None:
        """Read a message from stdin.

        Reads lines until a non-empty line is found.

        Returns:
            Message string (stripped), or None on EOF.

        Raises:
            JsonRpcError: PARSE_ERROR if the line is not valid UTF-8.
        """
        while True:
            try:
                line = self._stdin.readline()
            except (OSError, ValueError) as e:
                logger.error("Failed to read from input stream: %s", e)
                return None

            if not line:  # EOF
                return None

            try:
                text = line.decode("utf-8").strip()
            except UnicodeDecodeError as e:
                raise JsonRpcError(PARSE_ERROR, f"Parse error: invalid UTF-8: {e}") from e

            if text:  # Skip empty lines
                return text

    def write_message(self, message: str) -> None:
        """Write a message to stdout.

        Args:
            message: JSON string to write.
        """
        self._stdout.write(message.encode("utf-8") + b"\n")
        self._stdout.flush()

    def serve(self, handler: MessageHandler) -> None:
        """Run the read-dispatch-write loop until EOF.

        Each message is read, handled and answered before the next one is
        read. A line that cannot be decoded is answered with a parse error
        and the loop carries on.

        Args:
            handler: Called with each message; returns the encoded response,
                or None when nothing should be written.
        """
        while True:
            try:
                message = self.read_message()
            except JsonRpcError as e:
                logger.warning("Rejected undecodable message: %s", e.message)
                response: str | None = format_error(None, e.code, e.message)
            else:
                if message is None:
                    logger.info("EOF received, shutting down")
                    return
                response = handler(message)

            if response is None:
                continue

            try:
                self.write_message(response)
            except (OSError, ValueError) as e:
                logger.error("Failed to write to output stream: %s", e)
                return

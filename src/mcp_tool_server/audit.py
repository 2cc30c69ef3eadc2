"""Audit trail of tool invocations.

Each completed tools/call becomes one JSON Lines record keyed by the JSON-RPC
id the client sent, so the trail lines up with the wire transcript.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mcp_tool_server.protocol.jsonrpc import MessageId


class AuditLog:
    """Append-only JSON Lines log of tool calls, flushed per record."""

    def __init__(self, log_path: Path) -> None:
        self._log_path = log_path
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(log_path, "a", encoding="utf-8")  # noqa: SIM115

    @property
    def path(self) -> Path:
        return self._log_path

    def record_call(
        self,
        request_id: MessageId,
        tool_name: str,
        arguments: dict[str, Any],
        *,
        is_error: bool,
        duration_ms: float,
    ) -> None:
        """Append one record for a finished tool call.

        Args:
            request_id: JSON-RPC id of the tools/call request, as received.
            tool_name: Tool that ran.
            arguments: Arguments the tool was called with.
            is_error: Whether the tool reported a failure.
            duration_ms: Wall time spent in the registry, in milliseconds.
        """
        record = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "request_id": request_id,
            "tool": tool_name,
            "arguments": arguments,
            "is_error": is_error,
            "duration_ms": round(duration_ms, 3),
        }
        self._file.write(json.dumps(record, default=str) + "\n")
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> AuditLog:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

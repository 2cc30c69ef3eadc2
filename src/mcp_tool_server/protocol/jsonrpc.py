"""JSON-RPC 2.0 message parsing and formatting.

Implements the subset of JSON-RPC 2.0 used by the MCP tool protocol: single
(non-batch) requests and notifications in, responses out.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

JSONRPC_VERSION = "2.0"

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Reserved for implementation-defined server errors
SERVER_ERROR_MIN = -32099
SERVER_ERROR_MAX = -32000

# Maximum message size (1 MB)
MAX_MESSAGE_SIZE = 1_048_576

MessageId = int | float | str | None


def is_server_error(code: int) -> bool:
    """Check whether a code lies in the implementation-defined server range."""
    return SERVER_ERROR_MIN <= code <= SERVER_ERROR_MAX


def _is_valid_id(value: Any) -> bool:
    # bool is an int subclass but never a valid id
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    return value is None or isinstance(value, int | str)


class JsonRpcError(Exception):
    """JSON-RPC error with code and message."""

    def __init__(
        self,
        code: int,
        message: str,
        data: Any | None = None,
        msg_id: MessageId = None,
    ) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            data: Optional additional error data.
            msg_id: Id of the offending message, when it could be read.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data
        self.msg_id = msg_id

    def to_error_object(self) -> JsonRpcErrorObject:
        """Convert to the wire error member."""
        return JsonRpcErrorObject(code=self.code, message=self.message, data=self.data)


@dataclass
class JsonRpcRequest:
    """Represents a JSON-RPC request (has id)."""

    id: MessageId
    method: str
    params: Any | None = None


@dataclass
class JsonRpcNotification:
    """Represents a JSON-RPC notification (no id)."""

    method: str
    params: Any | None = None


@dataclass
class JsonRpcErrorObject:
    """The ``error`` member of a response."""

    code: int
    message: str
    data: Any | None = None

    def to_dict(self) -> dict[str, Any]:
        error_obj: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error_obj["data"] = self.data
        return error_obj


@dataclass
class Response:
    """A JSON-RPC response carrying exactly one of result or error."""

    id: MessageId
    result: Any | None = None
    error: JsonRpcErrorObject | None = None

    @classmethod
    def success(cls, msg_id: MessageId, result: Any) -> Response:
        return cls(id=msg_id, result=result)

    @classmethod
    def failure(cls, msg_id: MessageId, error: JsonRpcError) -> Response:
        return cls(id=msg_id, error=error.to_error_object())

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire format.

        Returns:
            Dictionary with ``jsonrpc``, ``id`` and one of ``result``/``error``.
        """
        response: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": self.id}
        if self.error is not None:
            response["error"] = self.error.to_dict()
        else:
            response["result"] = self.result
        return response

    def to_json(self) -> str:
        """Encode as a single line of strict JSON.

        Ids keep their JSON type. Numeric ids are written in Python's
        canonical spelling, so ``1E2`` comes back as ``100.0``.

        Raises:
            TypeError: If the payload holds values JSON cannot represent.
            ValueError: If the payload holds NaN/Infinity or circular references.
        """
        return json.dumps(self.to_dict(), allow_nan=False)


def _decode(raw: str) -> Any:
    """Decode one JSON value, mapping every decoder failure to PARSE_ERROR."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise JsonRpcError(PARSE_ERROR, f"Parse error: {e}") from e
    except ValueError as e:
        # Integer literals past the interpreter's digit limit
        raise JsonRpcError(PARSE_ERROR, f"Parse error: {e}") from e
    except RecursionError as e:
        raise JsonRpcError(PARSE_ERROR, "Parse error: message is nested too deeply") from e


def parse_message(
    raw: str, max_size: int = MAX_MESSAGE_SIZE
) -> JsonRpcRequest | JsonRpcNotification:
    """Parse a JSON-RPC message from a string.

    Args:
        raw: Raw JSON string.
        max_size: Largest accepted message, in UTF-8 bytes.

    Returns:
        Parsed request or notification.

    Raises:
        JsonRpcError: If the message is invalid. ``msg_id`` is set when the
            envelope was readable enough to recover the id.
    """
    # Check message size before parsing to prevent DoS
    size = len(raw.encode("utf-8", "surrogatepass"))
    if size > max_size:
        raise JsonRpcError(
            PARSE_ERROR, f"Message too large: {size} bytes exceeds {max_size} limit"
        )

    data = _decode(raw)

    # Must be an object
    if not isinstance(data, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: message must be an object")

    msg_id = data.get("id")
    if not _is_valid_id(msg_id):
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid Request: id must be a string or number"
        )

    # Protocol tag is checked before the method is looked at
    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid Request: jsonrpc must be '2.0'", msg_id=msg_id
        )

    method = data.get("method")
    if not isinstance(method, str):
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid Request: method must be a string", msg_id=msg_id
        )

    params = data.get("params")
    if params is not None and not isinstance(params, dict | list):
        raise JsonRpcError(
            INVALID_REQUEST,
            "Invalid Request: params must be an object or array",
            msg_id=msg_id,
        )

    # Check for id to distinguish request from notification
    if "id" in data:
        return JsonRpcRequest(id=msg_id, method=method, params=params)
    return JsonRpcNotification(method=method, params=params)


def parse_response(raw: str) -> Response:
    """Parse a JSON-RPC response line.

    Args:
        raw: Raw JSON string.

    Returns:
        Decoded response.

    Raises:
        JsonRpcError: If the line is not a well-formed response.
    """
    data = _decode(raw)

    if not isinstance(data, dict) or data.get("jsonrpc") != JSONRPC_VERSION:
        raise JsonRpcError(INVALID_REQUEST, "Invalid Response: not a JSON-RPC 2.0 object")
    if "id" not in data or not _is_valid_id(data["id"]):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Response: missing or invalid id")
    if ("result" in data) == ("error" in data):
        raise JsonRpcError(
            INVALID_REQUEST, "Invalid Response: exactly one of result or error required"
        )

    if "error" in data:
        error = data["error"]
        if (
            not isinstance(error, dict)
            or not isinstance(error.get("code"), int)
            or not isinstance(error.get("message"), str)
        ):
            raise JsonRpcError(INVALID_REQUEST, "Invalid Response: malformed error object")
        return Response(
            id=data["id"],
            error=JsonRpcErrorObject(
                code=error["code"], message=error["message"], data=error.get("data")
            ),
        )

    return Response(id=data["id"], result=data["result"])


def format_error(
    msg_id: MessageId,
    code: int,
    message: str,
    data: Any | None = None,
) -> str:
    """Format a JSON-RPC error response.

    Args:
        msg_id: Request ID (or None for parse errors).
        code: Error code.
        message: Error message.
        data: Optional error data.

    Returns:
        JSON string.
    """
    return Response(
        id=msg_id, error=JsonRpcErrorObject(code=code, message=message, data=data)
    ).to_json()

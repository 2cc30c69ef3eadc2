"""Method dispatcher - routes JSON-RPC messages to registered handlers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from mcp_tool_server.protocol.jsonrpc import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    MessageId,
    Response,
)

logger = logging.getLogger(__name__)

# Handlers take the raw params value and return a JSON-compatible result.
# Failures are signalled by raising JsonRpcError.
MethodHandler = Callable[[Any], Any]


class MethodDispatcher:
    """Routes requests to method handlers by name.

    The method table is filled during startup and sealed before the server
    starts reading messages. Handlers receive the request's params untouched,
    so the dispatcher never depends on any method's parameter shape.
    """

    def __init__(self) -> None:
        """Initialize an empty, unsealed dispatcher."""
        self._handlers: dict[str, MethodHandler] = {}
        self._sealed = False
        self._current_id: MessageId = None

    @property
    def methods(self) -> list[str]:
        """Registered method names, in registration order."""
        return list(self._handlers)

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def current_request_id(self) -> MessageId:
        """Id of the request whose handler is running, None otherwise.

        Requests are handled one at a time, so handlers can read this to tag
        work with the id the client sent.
        """
        return self._current_id

    def register(self, name: str, handler: MethodHandler) -> None:
        """Register a handler for a method.

        Args:
            name: JSON-RPC method name.
            handler: Callable invoked with the request params.

        Raises:
            ValueError: If the method is already registered.
            RuntimeError: If the dispatcher has been sealed.
        """
        if self._sealed:
            raise RuntimeError(f"Cannot register '{name}': dispatcher is sealed")
        if name in self._handlers:
            raise ValueError(f"Method already registered: {name}")
        self._handlers[name] = handler

    def seal(self) -> None:
        """Freeze the method table."""
        self._sealed = True

    def dispatch(self, message: JsonRpcRequest | JsonRpcNotification) -> Response | None:
        """Dispatch a message to its handler.

        Args:
            message: Parsed request or notification.

        Returns:
            Response for requests, None for notifications.
        """
        if isinstance(message, JsonRpcNotification):
            self._dispatch_notification(message)
            return None

        handler = self._handlers.get(message.method)
        if handler is None:
            return Response.failure(
                message.id,
                JsonRpcError(
                    METHOD_NOT_FOUND,
                    f"Method not found: {message.method}",
                    data={"method": message.method},
                ),
            )

        self._current_id = message.id
        try:
            result = handler(message.params)
        except JsonRpcError as e:
            return Response.failure(message.id, e)
        except Exception:
            logger.exception("Handler for '%s' failed", message.method)
            return Response.failure(message.id, JsonRpcError(INTERNAL_ERROR, "Internal error"))
        finally:
            self._current_id = None

        return Response.success(message.id, {} if result is None else result)

    def _dispatch_notification(self, notification: JsonRpcNotification) -> None:
        """Run a notification handler; notifications never produce responses."""
        handler = self._handlers.get(notification.method)
        if handler is None:
            logger.debug("Ignoring unknown notification: %s", notification.method)
            return

        try:
            handler(notification.params)
        except JsonRpcError as e:
            logger.warning("Notification '%s' rejected: %s", notification.method, e.message)
        except Exception:
            logger.exception("Notification handler for '%s' failed", notification.method)

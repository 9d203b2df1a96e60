"""A pair of engines for exchanging requests in both directions."""

from __future__ import annotations

from typing import Any

from rpcstack.config import EngineSettings
from rpcstack.engine.engine import JsonRpcEngine
from rpcstack.engine.types import JsonRpcRequest, JsonRpcResponse, Middleware, NotificationHandler


class DuplexJsonRpcEngine:
    """
    Two independent engines: ``receiver`` handles incoming messages and
    ``sender`` processes outgoing ones. Each has its own middleware stack and
    notification handler.
    """

    def __init__(
        self,
        *,
        receiver_notification_handler: NotificationHandler | None = None,
        sender_notification_handler: NotificationHandler | None = None,
        settings: EngineSettings | None = None,
    ):
        self._receiver = JsonRpcEngine(notification_handler=receiver_notification_handler, settings=settings)
        self._sender = JsonRpcEngine(notification_handler=sender_notification_handler, settings=settings)

    @property
    def receiver(self) -> JsonRpcEngine:
        return self._receiver

    @property
    def sender(self) -> JsonRpcEngine:
        return self._sender

    def add_receiver_middleware(self, middleware: Middleware) -> None:
        self._receiver.push(middleware)

    def add_sender_middleware(self, middleware: Middleware) -> None:
        self._sender.push(middleware)

    def receiver_as_middleware(self) -> Middleware:
        return self._receiver.as_middleware()

    def sender_as_middleware(self) -> Middleware:
        return self._sender.as_middleware()

    async def receive(self, message: JsonRpcRequest | list[JsonRpcRequest] | Any) -> JsonRpcResponse | list[JsonRpcResponse] | None:
        """Run an incoming request, notification or batch through the receiver."""
        return await self._receiver.handle(message)

    async def send(self, message: JsonRpcRequest | list[JsonRpcRequest] | Any) -> JsonRpcResponse | list[JsonRpcResponse] | None:
        """Run an outgoing request, notification or batch through the sender."""
        return await self._sender.handle(message)

    def destroy(self) -> None:
        self._receiver.destroy()
        self._sender.destroy()

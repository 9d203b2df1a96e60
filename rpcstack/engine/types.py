"""Shared type aliases for the middleware engine."""

from __future__ import annotations

from typing import Any, Awaitable, Callable

JsonRpcRequest = dict[str, Any]
PendingJsonRpcResponse = dict[str, Any]
JsonRpcResponse = dict[str, Any]

ReturnHandler = Callable[[], Awaitable[None] | None]
NextCallback = Callable[..., None]
EndCallback = Callable[..., None]
Middleware = Callable[[JsonRpcRequest, PendingJsonRpcResponse, NextCallback, EndCallback], Any]
ErrorSerializer = Callable[[Any], dict[str, Any]]
ResponseCallback = Callable[[Any, Any], Any]
NotificationHandler = Callable[[JsonRpcRequest], Awaitable[None] | None]


def is_notification(request: JsonRpcRequest) -> bool:
    """A request without an ``id`` member expects no response."""
    return "id" not in request


def has_result(response: PendingJsonRpcResponse) -> bool:
    return "result" in response


def has_error(response: PendingJsonRpcResponse) -> bool:
    return response.get("error") is not None

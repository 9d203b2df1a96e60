"""Request shape validation performed before any middleware runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rpcstack.engine.errors import JsonRpcError, invalid_request
from rpcstack.engine.types import ErrorSerializer, JsonRpcRequest, PendingJsonRpcResponse, is_notification


@dataclass(slots=True)
class RequestGuardResult:
    """Prepared per-call state after validation."""

    request: JsonRpcRequest | None
    response: PendingJsonRpcResponse
    is_notification: bool
    error: JsonRpcError | None


def prepare_request(
    caller_request: Any,
    *,
    jsonrpc_version: str,
    serialize: ErrorSerializer,
) -> RequestGuardResult:
    """Validate request shape and build the shallow copy plus response shell."""
    if not isinstance(caller_request, dict):
        error = invalid_request(
            f"Requests must be plain objects. Received: {type(caller_request).__name__}",
            {"request": caller_request},
        )
        return RequestGuardResult(
            request=None,
            response={"id": None, "jsonrpc": jsonrpc_version, "error": serialize(error)},
            is_notification=False,
            error=error,
        )

    method = caller_request.get("method")
    if not isinstance(method, str):
        error = invalid_request(
            f"Must specify a string method. Received: {type(method).__name__}",
            {"request": caller_request},
        )
        return RequestGuardResult(
            request=None,
            response={
                "id": caller_request.get("id"),
                "jsonrpc": caller_request.get("jsonrpc") or jsonrpc_version,
                "error": serialize(error),
            },
            is_notification=False,
            error=error,
        )

    request = dict(caller_request)
    return RequestGuardResult(
        request=request,
        response={"id": request.get("id"), "jsonrpc": request.get("jsonrpc") or jsonrpc_version},
        is_notification=is_notification(request),
        error=None,
    )

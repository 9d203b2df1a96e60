"""JSON-RPC middleware engine."""

from rpcstack.engine.engine import JsonRpcEngine
from rpcstack.engine.errors import (
    EngineInvariantError,
    ErrorCode,
    JsonRpcError,
    internal_error,
    invalid_params,
    invalid_request,
    method_not_found,
    serialize_error,
)
from rpcstack.engine.types import (
    EndCallback,
    JsonRpcRequest,
    JsonRpcResponse,
    Middleware,
    NextCallback,
    PendingJsonRpcResponse,
    ReturnHandler,
)

__all__ = [
    "JsonRpcEngine",
    "EngineInvariantError",
    "ErrorCode",
    "JsonRpcError",
    "internal_error",
    "invalid_params",
    "invalid_request",
    "method_not_found",
    "serialize_error",
    "EndCallback",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "Middleware",
    "NextCallback",
    "PendingJsonRpcResponse",
    "ReturnHandler",
]

"""In-process JSON-RPC middleware engine."""

from rpcstack.duplex import DuplexJsonRpcEngine
from rpcstack.engine import (
    EngineInvariantError,
    ErrorCode,
    JsonRpcEngine,
    JsonRpcError,
    serialize_error,
)
from rpcstack.middleware import (
    create_async_middleware,
    create_id_remap_middleware,
    create_scaffold_middleware,
    merge_middleware,
)
from rpcstack.utils.ids import get_unique_id

__version__ = "0.1.0"

__all__ = [
    "DuplexJsonRpcEngine",
    "EngineInvariantError",
    "ErrorCode",
    "JsonRpcEngine",
    "JsonRpcError",
    "serialize_error",
    "create_async_middleware",
    "create_id_remap_middleware",
    "create_scaffold_middleware",
    "merge_middleware",
    "get_unique_id",
]

"""Utility functions for rpcstack."""

from rpcstack.utils.exceptions import (
    RpcStackError,
    ConfigurationError,
    EngineDestroyedError,
    ErrorCategory,
    classify_exception,
    sanitize_error_message,
)
from rpcstack.utils.ids import get_unique_id

__all__ = [
    "RpcStackError",
    "ConfigurationError",
    "EngineDestroyedError",
    "ErrorCategory",
    "classify_exception",
    "sanitize_error_message",
    "get_unique_id",
]

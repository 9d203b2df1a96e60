"""JSON-RPC error objects and the error serialization boundary."""

from __future__ import annotations

import json
import traceback
from enum import IntEnum
from typing import Any, Mapping

from rpcstack.utils.exceptions import (
    ErrorCategory,
    RpcStackError,
    classify_exception,
    sanitize_error_message,
)


class ErrorCode(IntEnum):
    """Standard JSON-RPC 2.0 error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL = -32603


DEFAULT_MESSAGES: dict[int, str] = {
    ErrorCode.PARSE_ERROR: "Invalid JSON was received by the server.",
    ErrorCode.INVALID_REQUEST: "The JSON sent is not a valid Request object.",
    ErrorCode.METHOD_NOT_FOUND: "The method does not exist / is not available.",
    ErrorCode.INVALID_PARAMS: "Invalid method parameter(s).",
    ErrorCode.INTERNAL: "Internal JSON-RPC error.",
}

_CATEGORY_BY_CODE: dict[int, ErrorCategory] = {
    ErrorCode.PARSE_ERROR: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_REQUEST: ErrorCategory.VALIDATION,
    ErrorCode.METHOD_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.INVALID_PARAMS: ErrorCategory.VALIDATION,
    ErrorCode.INTERNAL: ErrorCategory.FATAL,
}

_MISSING = object()


class JsonRpcError(RpcStackError):
    """An error carrying a JSON-RPC ``code``, ``message`` and optional ``data``."""

    def __init__(self, code: int, message: str | None = None, data: Any = _MISSING):
        if not is_valid_code(code):
            raise ValueError(f'"code" must be an integer, got {code!r}')
        message = message or DEFAULT_MESSAGES.get(code, DEFAULT_MESSAGES[ErrorCode.INTERNAL])
        super().__init__(
            message,
            code=int(code),
            category=_CATEGORY_BY_CODE.get(code, ErrorCategory.FATAL),
            details={"data": data} if data is not _MISSING else {},
        )
        self.data = None if data is _MISSING else data
        self._has_data = data is not _MISSING

    def serialize(self) -> dict[str, Any]:
        serialized: dict[str, Any] = {"code": self.code, "message": self.message}
        if self._has_data:
            serialized["data"] = self.data
        return serialized


class EngineInvariantError(JsonRpcError):
    """Raised by the engine's own completion check, not by middleware."""

    def __init__(self, message: str, request: Any):
        super().__init__(ErrorCode.INTERNAL, f"JsonRpcEngine: {message}:\n{jsonify(request)}", {"request": request})


def internal_error(message: str | None = None, data: Any = _MISSING) -> JsonRpcError:
    return JsonRpcError(ErrorCode.INTERNAL, message, data)


def invalid_request(message: str | None = None, data: Any = _MISSING) -> JsonRpcError:
    return JsonRpcError(ErrorCode.INVALID_REQUEST, message, data)


def method_not_found(message: str | None = None, data: Any = _MISSING) -> JsonRpcError:
    return JsonRpcError(ErrorCode.METHOD_NOT_FOUND, message, data)


def invalid_params(message: str | None = None, data: Any = _MISSING) -> JsonRpcError:
    return JsonRpcError(ErrorCode.INVALID_PARAMS, message, data)


def is_valid_code(code: Any) -> bool:
    return isinstance(code, int) and not isinstance(code, bool)


def jsonify(value: Any) -> str:
    """JSON-encode a request for error messages, tolerating non-JSON members."""
    return json.dumps(value, indent=2, default=repr)


def serialize_error(
    error: Any,
    *,
    should_include_stack: bool = False,
    sanitize: bool = True,
) -> dict[str, Any]:
    """
    Normalize any raised or supplied value into a JSON-RPC error object.

    Structured errors (a ``JsonRpcError``, or a mapping/object with an integer
    ``code`` and a string ``message``) are copied. Everything else is wrapped
    into an internal error whose ``data.originalError`` preserves the original
    value. ``sanitize`` only applies to the top-level message of a wrapped
    exception; ``originalError.message`` keeps the exception text as raised.
    Never mutates ``error``; serializing an already serialized error returns
    an equal object.
    """
    if isinstance(error, JsonRpcError):
        serialized = error.serialize()
    elif _is_structured(error):
        serialized = _copy_structured(error)
    else:
        serialized = _wrap_unstructured(error, sanitize=sanitize)

    if should_include_stack:
        stack = _stack_of(error)
        if stack:
            serialized["stack"] = stack
    return serialized


def _is_structured(error: Any) -> bool:
    if isinstance(error, Mapping):
        return is_valid_code(error.get("code")) and isinstance(error.get("message"), str)
    return is_valid_code(getattr(error, "code", None)) and isinstance(getattr(error, "message", None), str)


def _copy_structured(error: Any) -> dict[str, Any]:
    if isinstance(error, Mapping):
        serialized = {"code": error["code"], "message": error["message"]}
        if "data" in error:
            serialized["data"] = error["data"]
        return serialized
    serialized = {"code": error.code, "message": error.message}
    if hasattr(error, "data"):
        serialized["data"] = error.data
    return serialized


def _wrap_unstructured(error: Any, *, sanitize: bool) -> dict[str, Any]:
    if isinstance(error, BaseException):
        text = str(error)
        message = sanitize_error_message(text) if sanitize else text
        return {
            "code": int(ErrorCode.INTERNAL),
            "message": message or DEFAULT_MESSAGES[ErrorCode.INTERNAL],
            "data": {"originalError": _describe_exception(error, text)},
        }
    return {
        "code": int(ErrorCode.INTERNAL),
        "message": DEFAULT_MESSAGES[ErrorCode.INTERNAL],
        "data": {"originalError": _describe_value(error)},
    }


def _describe_exception(exc: BaseException, message: str) -> dict[str, Any]:
    code, category, _ = classify_exception(exc)
    return {
        "type": type(exc).__name__,
        "message": message,
        "errorCode": code,
        "category": category.value,
    }


def _describe_value(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)
    return value


def _stack_of(error: Any) -> str | None:
    if isinstance(error, BaseException) and error.__traceback__ is not None:
        return "".join(traceback.format_exception(type(error), error, error.__traceback__))
    if isinstance(error, Mapping) and isinstance(error.get("stack"), str):
        return error["stack"]
    return None

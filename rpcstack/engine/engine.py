"""A JSON-RPC request and response processor built from a middleware stack."""

from __future__ import annotations

import asyncio
import functools
import inspect
from typing import Any, Iterable

from loguru import logger

from rpcstack.config import EngineSettings, get_settings
from rpcstack.engine.errors import serialize_error
from rpcstack.engine.middleware_runner import process_request, run_all_middleware, run_return_handlers
from rpcstack.engine.request_guard import prepare_request
from rpcstack.engine.types import (
    EndCallback,
    JsonRpcRequest,
    JsonRpcResponse,
    Middleware,
    NextCallback,
    NotificationHandler,
    PendingJsonRpcResponse,
    ResponseCallback,
    has_error,
)
from rpcstack.utils.exceptions import ConfigurationError, EngineDestroyedError


class JsonRpcEngine:
    """
    Give it a stack of middleware, pass it requests, and get back responses.

    Each middleware is called as ``middleware(request, response, next, end)``
    in push order until one of them ends the request; return handlers passed
    to ``next`` then run in reverse order.
    """

    def __init__(
        self,
        middleware: Iterable[Middleware] | None = None,
        *,
        notification_handler: NotificationHandler | None = None,
        settings: EngineSettings | None = None,
    ):
        self._middleware: list[Middleware] = []
        self._notification_handler = notification_handler
        self._settings = settings or get_settings()
        self._serialize_error = functools.partial(
            serialize_error,
            should_include_stack=self._settings.include_error_stack,
            sanitize=self._settings.sanitize_error_messages,
        )
        self._is_destroyed = False
        for item in middleware or ():
            self.push(item)

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def push(self, middleware: Middleware) -> None:
        """Append a middleware to the end of the stack."""
        self._assert_not_destroyed("push middleware")
        if not callable(middleware):
            raise ConfigurationError(
                f"Middleware must be callable, got {type(middleware).__name__}",
                argument="middleware",
            )
        self._middleware.append(middleware)

    async def handle(
        self,
        request: JsonRpcRequest | list[JsonRpcRequest] | Any,
        callback: ResponseCallback | None = None,
    ) -> JsonRpcResponse | list[JsonRpcResponse] | None:
        """
        Handle a request, a notification, or a batch of them.

        Without ``callback`` the response is returned: a response dict for a
        call, ``None`` for a notification, a list for a batch. Errors raised by
        middleware are reported inside the response, never raised; only a
        failure orchestrating a batch propagates.

        With ``callback`` the result is delivered as ``callback(error,
        response)`` instead and ``None`` is returned.
        """
        if callback is not None and not callable(callback):
            raise ConfigurationError('"callback" must be a function if provided.', argument="callback")
        self._assert_not_destroyed("handle requests")

        if isinstance(request, list):
            return await self._handle_batch(request, callback)

        error, response = await self._handle(request)
        if callback is not None:
            await _invoke(callback, error, response)
            return None
        return response

    def as_middleware(self) -> Middleware:
        """
        Return this engine as a single middleware for another engine.

        If this engine's stack ends the request, its return handlers run right
        away and the parent's ``end`` is called. Otherwise the parent's
        ``next`` is called with a return handler that runs this engine's
        return handlers during the parent's ascend phase.
        """
        self._assert_not_destroyed("create middleware")

        async def engine_as_middleware(
            request: JsonRpcRequest,
            response: PendingJsonRpcResponse,
            next_: NextCallback,
            end: EndCallback,
        ) -> None:
            try:
                error, is_complete, return_handlers = await run_all_middleware(
                    request, response, tuple(self._middleware), serialize=self._serialize_error
                )

                if is_complete:
                    handler_error = await run_return_handlers(return_handlers)
                    end(handler_error if handler_error is not None else error)
                    return

                async def run_embedded_return_handlers() -> None:
                    handler_error = await run_return_handlers(return_handlers)
                    if handler_error is not None:
                        raise handler_error

                next_(run_embedded_return_handlers)
            except Exception as exc:
                end(exc)

        engine_as_middleware.destroy = self.destroy  # type: ignore[attr-defined]
        return engine_as_middleware

    async def emit_notification(self, notification: JsonRpcRequest) -> None:
        """Deliver a notification to the handler registered at construction."""
        if self._notification_handler is None:
            logger.debug("Dropping notification method={}: no handler registered", notification.get("method"))
            return
        outcome = self._notification_handler(notification)
        if inspect.isawaitable(outcome):
            await outcome

    def destroy(self) -> None:
        """Destroy every middleware that supports it and empty the stack."""
        if self._is_destroyed:
            return
        self._is_destroyed = True
        middleware, self._middleware = self._middleware, []
        for item in middleware:
            destroy = getattr(item, "destroy", None)
            if callable(destroy):
                destroy()

    async def _handle_batch(
        self,
        requests: list[Any],
        callback: ResponseCallback | None = None,
    ) -> list[JsonRpcResponse] | None:
        try:
            # Every element starts immediately; gather keeps input order.
            responses = await asyncio.gather(*[self._promise_handle(request) for request in requests])
        except Exception as exc:
            logger.opt(exception=exc).error("RPC batch of {} requests failed: {}", len(requests), exc)
            if callback is None:
                raise
            await _invoke(callback, exc, None)
            return None

        batch = [response for response in responses if response is not None]
        if callback is not None:
            await _invoke(callback, None, batch)
            return None
        return batch

    async def _promise_handle(self, request: Any) -> JsonRpcResponse | None:
        _error, response = await self._handle(request)
        return response

    async def _handle(self, caller_request: Any) -> tuple[Any, JsonRpcResponse | None]:
        """Process one request; returns ``(error, response)`` and never raises."""
        guard = prepare_request(
            caller_request,
            jsonrpc_version=self._settings.jsonrpc_version,
            serialize=self._serialize_error,
        )
        if guard.error is not None:
            logger.debug("RPC rejected malformed request: {}", guard.error.message)
            return guard.error, guard.response

        request = guard.request
        response = guard.response
        logger.debug("RPC handle method={} id={}", request["method"], request.get("id"))

        try:
            error = await process_request(
                request, response, tuple(self._middleware), serialize=self._serialize_error
            )
        except Exception as exc:
            error = exc

        if error is None and has_error(response):
            error = response["error"]
        if error is not None:
            response.pop("result", None)
            response["error"] = self._serialize_error(error)
            logger.debug("RPC method={} failed: {}", request.get("method"), response["error"].get("message"))

        if guard.is_notification:
            return error, None
        return error, response

    def _assert_not_destroyed(self, operation: str) -> None:
        if self._is_destroyed:
            raise EngineDestroyedError(operation)


async def _invoke(callback: ResponseCallback, error: Any, response: Any) -> None:
    outcome = callback(error, response)
    if inspect.isawaitable(outcome):
        await outcome

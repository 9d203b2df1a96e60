"""Descend/ascend execution of a middleware stack for a single request."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Iterable

from loguru import logger

from rpcstack.engine.errors import EngineInvariantError, internal_error, jsonify, serialize_error
from rpcstack.engine.types import (
    ErrorSerializer,
    JsonRpcRequest,
    Middleware,
    PendingJsonRpcResponse,
    ReturnHandler,
    has_error,
    has_result,
)

MiddlewareOutcome = tuple[Any, bool]
DescentResult = tuple[Any, bool, list[ReturnHandler]]

# Middleware coroutines still running after they called next()/end().
_background_tasks: set[asyncio.Task[Any]] = set()


async def process_request(
    request: JsonRpcRequest,
    response: PendingJsonRpcResponse,
    middleware_stack: Iterable[Middleware],
    *,
    serialize: ErrorSerializer = serialize_error,
) -> Any:
    """
    Run the full descend/ascend cycle and return the error to report, if any.

    Return handlers always run, even when descent errored or never completed.
    Afterwards a framework invariant violation wins over a return-handler
    error, which in turn wins over the middleware error.
    """
    error, is_complete, return_handlers = await run_all_middleware(
        request, response, middleware_stack, serialize=serialize
    )
    handler_error = await run_return_handlers(return_handlers)

    try:
        check_for_completion(request, response, is_complete)
    except EngineInvariantError as exc:
        logger.warning("RPC invariant violated for method={}: {}", request.get("method"), exc.message.splitlines()[0])
        return exc

    if handler_error is not None:
        return handler_error
    return error


async def run_all_middleware(
    request: JsonRpcRequest,
    response: PendingJsonRpcResponse,
    middleware_stack: Iterable[Middleware],
    *,
    serialize: ErrorSerializer = serialize_error,
) -> DescentResult:
    """
    Run middleware in order until one of them ends the request.

    Returns the error that ended the request (if any), whether the request was
    ended at all, and the collected return handlers in the order they must run
    (last registered first).
    """
    return_handlers: list[ReturnHandler] = []
    error: Any = None
    is_complete = False

    for middleware in middleware_stack:
        error, is_complete = await run_middleware(
            request, response, middleware, return_handlers, serialize=serialize
        )
        if is_complete:
            break

    return error, is_complete, return_handlers[::-1]


async def run_middleware(
    request: JsonRpcRequest,
    response: PendingJsonRpcResponse,
    middleware: Middleware,
    return_handlers: list[ReturnHandler],
    *,
    serialize: ErrorSerializer = serialize_error,
) -> MiddlewareOutcome:
    """
    Invoke one middleware and wait for its decision.

    Returns ``(error, is_complete)``. A middleware that returns without calling
    ``next`` or ``end`` leaves the request undecided, reported as
    ``(None, False)``.
    """
    decision: asyncio.Future[MiddlewareOutcome] = asyncio.get_running_loop().create_future()

    def end(error: Any = None) -> None:
        if decision.done():
            logger.warning("Middleware {} called end() after deciding (method={})", _name(middleware), request.get("method"))
            return
        if error is None and has_error(response):
            error = response["error"]
        if error is not None:
            response.pop("result", None)
            response["error"] = serialize(error)
        decision.set_result((error, True))

    def next_(return_handler: ReturnHandler | None = None) -> None:
        if decision.done():
            logger.warning("Middleware {} called next() after deciding (method={})", _name(middleware), request.get("method"))
            return
        if return_handler is not None:
            if not callable(return_handler):
                end(_not_callable_error('"next" return handlers', return_handler, request))
                return
            # Kept even when the response already holds an error.
            return_handlers.append(return_handler)
        if has_error(response):
            end(response["error"])
            return
        decision.set_result((None, False))

    try:
        outcome = middleware(request, response, next_, end)
        if inspect.isawaitable(outcome):
            outcome = await _await_until_decided(outcome, decision, middleware)
    except Exception as exc:
        if decision.done():
            logger.opt(exception=exc).error("Middleware {} raised after deciding: {}", _name(middleware), exc)
        else:
            end(exc)
    else:
        if not decision.done() and outcome is not None:
            if callable(outcome):
                next_(outcome)
            else:
                end(_not_callable_error("return handlers", outcome, request))

    if decision.done():
        return decision.result()
    return None, False


async def run_return_handlers(handlers: Iterable[ReturnHandler]) -> Any:
    """
    Run return handlers serially in the given order.

    A failing handler does not stop the remaining ones; the most recent
    failure is returned (``None`` when every handler succeeded).
    """
    error: Any = None
    for handler in handlers:
        try:
            outcome = handler()
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as exc:
            logger.warning("Return handler {} failed: {}", _name(handler), exc)
            error = exc
    return error


def check_for_completion(
    request: JsonRpcRequest,
    response: PendingJsonRpcResponse,
    is_complete: bool,
) -> None:
    """Raise if nothing ended the request or the response is still empty."""
    if not is_complete:
        raise EngineInvariantError("Nothing ended request", request)
    if not has_result(response) and not has_error(response):
        raise EngineInvariantError("Response has no error or result for request", request)


async def _await_until_decided(
    awaitable: Awaitable[Any],
    decision: asyncio.Future[MiddlewareOutcome],
    middleware: Middleware,
) -> Any:
    task = asyncio.ensure_future(awaitable)
    await asyncio.wait({decision, task}, return_when=asyncio.FIRST_COMPLETED)
    if task.done():
        return task.result()

    _background_tasks.add(task)

    def _on_done(finished: asyncio.Task[Any]) -> None:
        _background_tasks.discard(finished)
        if finished.cancelled():
            return
        exc = finished.exception()
        if exc is not None:
            logger.opt(exception=exc).error("Middleware {} raised after deciding: {}", _name(middleware), exc)

    task.add_done_callback(_on_done)
    return None


def _not_callable_error(what: str, value: Any, request: JsonRpcRequest):
    return internal_error(
        f'JsonRpcEngine: {what} must be callable. Received "{type(value).__name__}" for request:\n{jsonify(request)}',
        {"request": request},
    )


def _name(func: Any) -> str:
    return getattr(func, "__qualname__", None) or getattr(func, "__name__", None) or repr(func)

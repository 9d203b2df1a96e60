"""Adapter for middleware written as ``async def fn(request, response, next)``."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from rpcstack.engine.types import (
    EndCallback,
    JsonRpcRequest,
    Middleware,
    NextCallback,
    PendingJsonRpcResponse,
    has_error,
)

AsyncNext = Callable[[], Awaitable[None]]
AsyncMiddleware = Callable[[JsonRpcRequest, PendingJsonRpcResponse, AsyncNext], Awaitable[None]]


def create_async_middleware(async_middleware: AsyncMiddleware) -> Middleware:
    """
    Wrap an ``async def (request, response, next)`` middleware.

    Awaiting ``next()`` suspends until every downstream middleware and its
    return handler has run, so code after it sees the final response.
    Returning without calling ``next`` ends the request. Raising ends the
    request with that error, or fails the ascend phase if ``next`` was
    already awaited.

    Plain ``async def`` middleware taking ``(request, response, next, end)``
    are supported by the engine directly; this adapter only exists for the
    await-``next`` style.
    """

    def middleware(
        request: JsonRpcRequest,
        response: PendingJsonRpcResponse,
        next_: NextCallback,
        end: EndCallback,
    ) -> Awaitable[None]:
        loop = asyncio.get_running_loop()
        # Resolved by the engine running our return handler.
        ascend_reached: asyncio.Future[None] = loop.create_future()
        # Resolved once the wrapped middleware has finished after next().
        finished: asyncio.Future[None] = loop.create_future()
        state = {"next_called": False, "ended": False}

        def end_once(error: Any = None) -> None:
            if not state["ended"]:
                state["ended"] = True
                end(error)

        async def return_handler() -> None:
            ascend_reached.set_result(None)
            await finished

        async def async_next() -> None:
            if has_error(response):
                # The engine would end the request instead of continuing.
                end_once()
                return
            state["next_called"] = True
            next_(return_handler)
            await ascend_reached

        async def run() -> None:
            try:
                await async_middleware(request, response, async_next)
                if state["next_called"]:
                    await ascend_reached
                    finished.set_result(None)
                else:
                    end_once()
            except Exception as exc:
                if ascend_reached.done():
                    finished.set_exception(exc)
                else:
                    end_once(exc)

        return run()

    return middleware

# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Sequence

from app.infra.ylogger import ylogger
from app.pipeline.context import PipelineContext

CallHandler = Callable[[], Awaitable[Any]]
Interceptor = Callable[[PipelineContext, CallHandler], Awaitable[Any]]


def build_chain(
    interceptors: Sequence[Interceptor],
    ctx: PipelineContext,
    handler: CallHandler,
) -> CallHandler:
    """把 interceptors 套在 handler 外层

    列表第一个是最外层：before 按注册顺序执行，after 逆序执行。
    """
    chain = handler
    for interceptor in reversed(interceptors):
        next_handler = chain

        async def _wrap(_ic: Interceptor = interceptor, _next: CallHandler = next_handler) -> Any:
            result = _ic(ctx, _next)
            if inspect.isawaitable(result):
                result = await result
            return result

        chain = _wrap
    return chain


def make_logger_interceptor(delay: float = 0.0, name: str = "logger") -> Interceptor:
    """handler 前后打日志并在 context 上记 marker；delay>0 时在 dispatch 前 sleep"""

    async def logger_interceptor(ctx: PipelineContext, call_handler: CallHandler) -> Any:
        ctx.mark(f"{name}:before")
        ylogger.info("interceptor %s, before handler: %s %s", name, ctx.request.method.value, ctx.request.path)
        if delay > 0:
            await asyncio.sleep(delay)

        result = await call_handler()

        ctx.mark(f"{name}:after")
        ylogger.info("interceptor %s, after handler: %s %s", name, ctx.request.method.value, ctx.request.path)
        return result

    logger_interceptor.__name__ = f"{name}_interceptor"
    return logger_interceptor


def envelope(data: Any) -> dict:
    if isinstance(data, str):
        return {"data": {"message": data}}
    return {"data": data}


async def transform_interceptor(ctx: PipelineContext, call_handler: CallHandler) -> Any:
    ctx.mark("transform:before")
    return envelope(await call_handler())

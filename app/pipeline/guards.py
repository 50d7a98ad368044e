# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Iterable, Union

from app.common.errors import UnauthorizedError
from app.infra.ylogger import ylogger
from app.pipeline.context import PipelineContext

Guard = Callable[[PipelineContext], Union[bool, Awaitable[bool]]]


async def run_guards(guards: Iterable[Guard], ctx: PipelineContext) -> None:
    """依次执行，全部为 True 才放行；第一个 False 直接中断"""
    for guard in guards:
        allowed: Any = guard(ctx)
        if inspect.isawaitable(allowed):
            allowed = await allowed
        if not allowed:
            ylogger.info(
                "guard rejected: guard=%s %s %s",
                getattr(guard, "__name__", repr(guard)),
                ctx.request.method.value,
                ctx.request.path,
            )
            raise UnauthorizedError()


def auth_guard(ctx: PipelineContext) -> bool:
    token = ctx.request.headers.get("authorization")
    return bool(token)


def logger_guard(ctx: PipelineContext) -> bool:
    ylogger.info("logger guard: %s %s", ctx.request.method.value, ctx.request.path)
    return True

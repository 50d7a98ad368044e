# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""路由前的 middleware 链

每个 middleware 形如 ``(request, advance) -> None``，必须显式 ``await advance()``
才会继续。不调用 advance 的 middleware 会让请求挂起，直到请求期限到达后转为
Timeout 失败；这属于调用方 bug，链本身不做补救。
"""

from __future__ import annotations

import inspect
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Tuple, Union

from app.common.errors import InternalError
from app.infra.ylogger import ylogger
from app.pipeline.request import HttpMethod, PipelineRequest
from app.pipeline.routing import Controller, RouteDescriptor, normalize_path

Advance = Callable[[], Awaitable[None]]
Middleware = Callable[[PipelineRequest, Advance], Any]


@dataclass(frozen=True)
class RouteTarget:
    path: str
    method: Optional[HttpMethod] = None


Target = Union[str, Controller, RouteTarget]


@dataclass(frozen=True)
class MiddlewareBinding:
    middleware: Middleware
    targets: Tuple[Target, ...] = ()

    @property
    def is_global(self) -> bool:
        return not self.targets

    def matches(self, request: PipelineRequest, route: Optional[RouteDescriptor]) -> bool:
        if self.is_global:
            return True
        path = normalize_path(request.path)
        for target in self.targets:
            if isinstance(target, Controller):
                if route is not None and route.controller is target:
                    return True
            elif isinstance(target, RouteTarget):
                if normalize_path(target.path) == path and target.method in (None, request.method):
                    return True
            elif normalize_path(target) == path:
                return True
        return False


class MiddlewareChain:
    def __init__(self) -> None:
        self._bindings: List[MiddlewareBinding] = []

    def use(self, middleware: Middleware) -> "MiddlewareChain":
        """全局 middleware：对所有请求生效（包括未匹配路由的请求）"""
        self._bindings.append(MiddlewareBinding(middleware))
        return self

    def apply(self, middleware: Middleware, *targets: Target) -> "MiddlewareChain":
        if not targets:
            raise ValueError("apply() needs at least one target; use use() for global middleware")
        for target in targets:
            if isinstance(target, str):
                continue
            if not isinstance(target, (Controller, RouteTarget)):
                raise TypeError(f"unsupported middleware target: {target!r}")
        self._bindings.append(MiddlewareBinding(middleware, tuple(targets)))
        return self

    def matching(self, request: PipelineRequest, route: Optional[RouteDescriptor]) -> List[Middleware]:
        return [b.middleware for b in self._bindings if b.matches(request, route)]

    async def run(
        self,
        request: PipelineRequest,
        route: Optional[RouteDescriptor],
        downstream: Callable[[], Awaitable[None]],
    ) -> None:
        """按注册顺序执行匹配的 middleware，最后一个 advance 进入 downstream"""
        chain = self.matching(request, route)

        async def step(index: int) -> None:
            if index == len(chain):
                request.state.freeze()
                await downstream()
                return

            called = False

            async def advance() -> None:
                nonlocal called
                if called:
                    raise InternalError("middleware called advance() more than once")
                called = True
                await step(index + 1)

            result = chain[index](request, advance)
            if inspect.isawaitable(result):
                await result

        await step(0)

    def __len__(self) -> int:
        return len(self._bindings)


# ---------- built-in middleware ----------

async def logger_function(request: PipelineRequest, advance: Advance) -> None:
    """全局函数式 middleware"""
    request.state["received_at"] = time.time()
    ylogger.info("functional middleware - %s: %s", request.method.value, request.path)
    await advance()


def make_logger_middleware(label: str = "class") -> Middleware:
    async def logger_middleware(request: PipelineRequest, advance: Advance) -> None:
        ylogger.info("%s middleware - %s: %s", label, request.method.value, request.path)
        await advance()

    return logger_middleware

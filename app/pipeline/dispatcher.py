# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""请求生命周期

ROUTING -> MIDDLEWARE -> GUARDING -> PIPING -> HANDLING -> RESPONDING，
任一阶段抛出即进入 FAILED，由 normalizer 生成错误响应后进入 RESPONDING。
每个请求恰好产出一个 PipelineResponse，dispatch() 本身不抛异常。
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Optional, Sequence

from app.common.errors import InternalError, RequestTimeoutError
from app.common.trace import ensure_trace_id, reset_trace_id
from app.infra.ylogger import ylogger
from app.pipeline.context import DispatchState, PipelineContext
from app.pipeline.guards import Guard, run_guards
from app.pipeline.interceptors import Interceptor, build_chain
from app.pipeline.middleware import MiddlewareChain
from app.pipeline.normalizer import normalize_exception
from app.pipeline.pipes import resolve_params
from app.pipeline.request import PipelineRequest, PipelineResponse
from app.pipeline.routing import RouteDescriptor, RouteTable

_UNSET = object()


class Dispatcher:
    def __init__(
        self,
        routes: RouteTable,
        *,
        middleware: Optional[MiddlewareChain] = None,
        guards: Sequence[Guard] = (),
        interceptors: Sequence[Interceptor] = (),
        normalizer=normalize_exception,
        timeout: Optional[float] = None,
    ) -> None:
        self.routes = routes
        self.middleware = middleware or MiddlewareChain()
        self.guards = tuple(guards)
        self.interceptors = tuple(interceptors)
        self.normalizer = normalizer
        self.timeout = timeout

    async def dispatch(self, request: PipelineRequest) -> PipelineResponse:
        trace_id, token = ensure_trace_id()
        try:
            return await self._dispatch(PipelineContext(request=request, trace_id=trace_id))
        finally:
            if token is not None:
                reset_trace_id(token)

    async def _dispatch(self, ctx: PipelineContext) -> PipelineResponse:
        request = ctx.request
        try:
            if self.timeout is None:
                body = await self._lifecycle(ctx)
            else:
                try:
                    body = await asyncio.wait_for(self._lifecycle(ctx), timeout=self.timeout)
                except asyncio.TimeoutError as e:
                    ylogger.warning(
                        "request deadline exceeded: %s %s state=%s timeout=%ss",
                        request.method.value, request.path, ctx.state.value, self.timeout,
                    )
                    raise RequestTimeoutError() from e
        except Exception as exc:  # noqa: BLE001
            self._transition(ctx, ctx.fail(exc))
            ctx.respond(self.normalizer(exc, request.url))
        else:
            self._transition(ctx, ctx.advance())
            ctx.respond(PipelineResponse(status_code=self._success_status(request), body=body))

        ylogger.debug("request done: %s %s status=%s", request.method.value, request.path, ctx.response.status_code)
        return ctx.response

    async def _lifecycle(self, ctx: PipelineContext) -> Any:
        request = ctx.request
        found = self.routes.resolve(request.method, request.path)
        route: Optional[RouteDescriptor] = None
        if found is not None:
            route, request.params = found
            ctx.route = route

        self._transition(ctx, ctx.advance())
        outcome: Any = _UNSET
        failure: Optional[Exception] = None
        reached = False

        async def downstream() -> None:
            nonlocal outcome, failure, reached
            reached = True
            try:
                outcome = await self._after_middleware(ctx)
            except Exception as e:
                failure = e
                raise

        await self.middleware.run(request, route, downstream)

        if not reached:
            # middleware 没有调用 advance：请求挂起，直到期限到达
            ylogger.warning("middleware did not advance: %s %s", request.method.value, request.path)
            await asyncio.Event().wait()
        if outcome is _UNSET:
            # middleware 吞掉了下游异常：仍按原异常响应
            if failure is not None:
                raise failure
            raise InternalError("pipeline finished without a result")
        return outcome

    async def _after_middleware(self, ctx: PipelineContext) -> Any:
        request = ctx.request
        if ctx.route is None:
            # 未匹配的请求在 middleware 之后才报 NotFound
            ctx.route, request.params = self.routes.lookup(request.method, request.path)
        route = ctx.route

        self._transition(ctx, ctx.advance())
        controller = route.controller
        guards = (controller.guards if controller else ()) + self.guards + route.guards
        await run_guards(guards, ctx)

        self._transition(ctx, ctx.advance())
        kwargs = await resolve_params(request, route.params)

        self._transition(ctx, ctx.advance())

        async def call_handler() -> Any:
            result = route.handler(**kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result

        interceptors = self.interceptors + (controller.interceptors if controller else ()) + route.interceptors
        return await build_chain(interceptors, ctx, call_handler)()

    @staticmethod
    def _success_status(request: PipelineRequest) -> int:
        return 201 if request.method.value == "POST" else 200

    @staticmethod
    def _transition(ctx: PipelineContext, state: DispatchState) -> None:
        ylogger.debug("dispatch %s %s -> %s", ctx.request.method.value, ctx.request.path, state.value)

# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""请求处理流水线

middleware -> 路由 -> guard -> pipe -> interceptor(before) -> handler -> interceptor(after)，
任何阶段的失败都由 normalizer 转为统一错误信封。
"""

from __future__ import annotations

from app.pipeline.context import DispatchState, PipelineContext
from app.pipeline.dispatcher import Dispatcher
from app.pipeline.middleware import MiddlewareChain, RouteTarget
from app.pipeline.pipes import ParamSource
from app.pipeline.request import HttpMethod, PipelineRequest, PipelineResponse
from app.pipeline.routing import Controller, RouteTable, route

__all__ = [
    "Controller",
    "DispatchState",
    "Dispatcher",
    "HttpMethod",
    "MiddlewareChain",
    "ParamSource",
    "PipelineContext",
    "PipelineRequest",
    "PipelineResponse",
    "RouteTable",
    "RouteTarget",
    "route",
]

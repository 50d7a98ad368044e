# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Any, Dict, Sequence

from app.common.errors import (
    AppError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    TooManyRequestsError,
    UnauthorizedError,
    ValidationFailure,
)
from app.pipeline.guards import Guard, auth_guard
from app.pipeline.interceptors import Interceptor
from app.pipeline.pipes import ParamSource, parse_int_pipe
from app.pipeline.routing import Controller, route

DEMO_USERS = [
    {"id": 1, "fullName": "saeed norouzi", "job": "developer"},
    {"id": 2, "fullName": "saeed norouzi", "job": "developer"},
]

_EXCEPTIONS = {
    400: lambda: ValidationFailure(),
    401: lambda: UnauthorizedError(),
    403: lambda: ForbiddenError("Access Blocked"),
    404: lambda: NotFoundError(),
    409: lambda: ConflictError(),
    429: lambda: TooManyRequestsError("to many requests"),
    500: lambda: InternalError(),
}


def get_hello() -> str:
    return "Hello Controller"


def get_data() -> Dict[str, Any]:
    return {"users": [dict(u) for u in DEMO_USERS]}


def check_auth() -> str:
    return "You are already logged in"


def raise_exception(code: int) -> None:
    """按 code 抛出对应失败；未映射的 code 一律 500"""
    factory = _EXCEPTIONS.get(code, _EXCEPTIONS[500])
    exc: AppError = factory()
    raise exc


def build_app_controller(
    guards: Sequence[Guard] = (),
    interceptors: Sequence[Interceptor] = (),
) -> Controller:
    controller = Controller("/", name="AppController", guards=guards, interceptors=interceptors)
    controller.add(
        route("GET", "/").handle(get_hello),
        route("GET", "/data").handle(get_data),
        route("GET", "/auth").with_guard(auth_guard).handle(check_auth),
        route("GET", "/exception/:code").with_pipe("code", ParamSource.PATH, parse_int_pipe).handle(raise_exception),
    )
    return controller

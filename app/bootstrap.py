# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""组合根：显式构造 Dispatcher 及其全部组件，不依赖全局注册表"""

from __future__ import annotations

from typing import Optional

from app.api.app_controller import build_app_controller
from app.api.user_controller import build_user_controller
from app.application.user.usecase import UserUsecase
from app.infra.config import Settings, settings as default_settings
from app.pipeline.dispatcher import Dispatcher
from app.pipeline.guards import logger_guard
from app.pipeline.interceptors import make_logger_interceptor, transform_interceptor
from app.pipeline.middleware import MiddlewareChain, RouteTarget, logger_function, make_logger_middleware
from app.pipeline.request import HttpMethod
from app.pipeline.routing import RouteTable


def build_dispatcher(
    settings: Optional[Settings] = None,
    user_usecase: Optional[UserUsecase] = None,
) -> Dispatcher:
    settings = settings or default_settings
    delay = settings.LOGGER_INTERCEPTOR_DELAY_MS / 1000.0

    app_controller = build_app_controller(
        guards=[logger_guard],
        interceptors=[make_logger_interceptor(delay, name="app")],
    )
    user_controller = build_user_controller(user_usecase or UserUsecase())
    routes = RouteTable().register(app_controller, user_controller)

    logger_middleware = make_logger_middleware()
    middleware = (
        MiddlewareChain()
        .use(logger_function)
        .apply(logger_middleware, "/user/email")
        .apply(logger_middleware, user_controller, app_controller)
        .apply(logger_middleware, RouteTarget("/user", HttpMethod.POST))
        .apply(
            logger_middleware,
            RouteTarget("/user", HttpMethod.GET),
            "/user/email",
            app_controller,
        )
    )

    return Dispatcher(
        routes,
        middleware=middleware,
        guards=[logger_guard],
        interceptors=[transform_interceptor, make_logger_interceptor(name="global")],
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
    )

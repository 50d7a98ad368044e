# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import json
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.bootstrap import build_dispatcher
from app.common.errors import AppError, ValidationFailure
from app.common.exception_handlers import app_error_handler, unhandled_error_handler
from app.common.logging import setup_logging
from app.common.middlewares import TraceIdMiddleware
from app.infra.config import settings
from app.pipeline.dispatcher import Dispatcher
from app.pipeline.request import HttpMethod, PipelineRequest

_BODY_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


def _reject_constant(token: str) -> Any:
    # NaN / Infinity 不是合法 JSON
    raise ValidationFailure(f"Unexpected token {token} in JSON body")


async def _read_body(request: Request) -> Any:
    if request.method not in _BODY_METHODS:
        return None
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise ValidationFailure("Unexpected token in JSON body") from e


async def to_pipeline_request(request: Request) -> PipelineRequest:
    return PipelineRequest.build(
        method=request.method,
        path=request.url.path,
        headers=dict(request.headers),
        body=await _read_body(request),
        query=dict(request.query_params),
        raw_query=request.url.query,
    )


def create_app(dispatcher: Optional[Dispatcher] = None) -> FastAPI:
    dispatcher = dispatcher or build_dispatcher(settings)

    app = FastAPI(
        title="request-pipeline-demo",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.dispatcher = dispatcher

    # ---------- middlewares / handlers ----------

    app.add_middleware(TraceIdMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # 所有请求交给 dispatcher，路由/守卫/管道/拦截器都在流水线内完成
    @app.api_route("/{full_path:path}", methods=[m.value for m in HttpMethod], include_in_schema=False)
    async def dispatch(request: Request) -> JSONResponse:
        response = await dispatcher.dispatch(await to_pipeline_request(request))
        return JSONResponse(status_code=response.status_code, content=response.body)

    return app


setup_logging(settings.LOG_LEVEL)

app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()

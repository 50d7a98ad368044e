# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""transport 层兜底：dispatcher 之外抛出的异常（如请求体不是合法 JSON）也用统一错误信封"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from app.common.errors import AppError
from app.pipeline.normalizer import GENERIC_MESSAGE, error_payload

logger = logging.getLogger(__name__)


def _request_path(request: Request) -> str:
    if request.url.query:
        return f"{request.url.path}?{request.url.query}"
    return request.url.path


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc.status_code, exc.message, _request_path(request)),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error")
    return JSONResponse(
        status_code=500,
        content=error_payload(500, GENERIC_MESSAGE, _request_path(request)),
    )

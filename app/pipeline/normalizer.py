# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.common.errors import AppError
from app.infra.ylogger import ylogger
from app.pipeline.request import PipelineResponse

GENERIC_MESSAGE = "Internal server error"


def iso_timestamp(at: Optional[datetime] = None) -> str:
    at = (at or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return at.strftime("%Y-%m-%dT%H:%M:%S.") + f"{at.microsecond // 1000:03d}Z"


def error_payload(status_code: int, message: str, path: str, at: Optional[datetime] = None) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "success": False,
        "message": message,
        "timestamp": iso_timestamp(at),
        "path": path,
    }


def normalize_exception(exc: BaseException, path: str) -> PipelineResponse:
    """唯一的终端捕获点：任何失败都转成统一错误信封"""
    now = datetime.now(timezone.utc)
    if isinstance(exc, AppError):
        status_code, message = exc.status_code, exc.message
        ylogger.info("request failed: kind=%s status=%s path=%s message=%s", exc.kind.value, status_code, path, message)
    else:
        status_code, message = 500, GENERIC_MESSAGE
        ylogger.error("unhandled error: path=%s", path, exc_info=exc)
    return PipelineResponse(
        status_code=status_code,
        body=error_payload(status_code, message, path, now),
        emitted_at=now,
    )

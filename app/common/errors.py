# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from dataclasses import FrozenInstanceError, dataclass
from enum import Enum
from typing import Any, Optional


class FailureKind(str, Enum):
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    VALIDATION_FAILURE = "ValidationFailure"
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    RATE_LIMITED = "RateLimited"
    INTERNAL = "Internal"
    TIMEOUT = "Timeout"


@dataclass(eq=False)
class AppError(Exception):
    """异常统一：流水线任一阶段抛出，由 normalizer 转成错误信封"""
    kind: FailureKind
    message: str
    status_code: int = 500
    detail: Optional[Any] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "_sealed", True)

    def __setattr__(self, name: str, value: Any) -> None:
        # 构造后只读；__traceback__ / __cause__ 等由解释器维护，不拦
        if getattr(self, "_sealed", False) and not name.startswith("__"):
            raise FrozenInstanceError(f"cannot assign to field {name!r}")
        super().__setattr__(name, value)

    def __str__(self) -> str:
        return f"{self.kind.value}({self.status_code}): {self.message}"


class ValidationFailure(AppError):
    def __init__(self, message: str = "Bad Request", detail: Any = None) -> None:
        super().__init__(kind=FailureKind.VALIDATION_FAILURE, message=message, status_code=400, detail=detail)


BadRequestError = ValidationFailure


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Unauthorized", detail: Any = None) -> None:
        super().__init__(kind=FailureKind.UNAUTHORIZED, message=message, status_code=401, detail=detail)


class ForbiddenError(AppError):
    def __init__(self, message: str = "Forbidden", detail: Any = None) -> None:
        super().__init__(kind=FailureKind.FORBIDDEN, message=message, status_code=403, detail=detail)


class NotFoundError(AppError):
    def __init__(self, message: str = "Not Found", detail: Any = None) -> None:
        super().__init__(kind=FailureKind.NOT_FOUND, message=message, status_code=404, detail=detail)


class RequestTimeoutError(AppError):
    def __init__(self, message: str = "Request Timeout", detail: Any = None) -> None:
        super().__init__(kind=FailureKind.TIMEOUT, message=message, status_code=408, detail=detail)


class ConflictError(AppError):
    def __init__(self, message: str = "Conflict", detail: Any = None) -> None:
        super().__init__(kind=FailureKind.CONFLICT, message=message, status_code=409, detail=detail)


class TooManyRequestsError(AppError):
    def __init__(self, message: str = "Too Many Requests", detail: Any = None) -> None:
        super().__init__(kind=FailureKind.RATE_LIMITED, message=message, status_code=429, detail=detail)


class InternalError(AppError):
    def __init__(self, message: str = "Internal Server Error", detail: Any = None) -> None:
        super().__init__(kind=FailureKind.INTERNAL, message=message, status_code=500, detail=detail)

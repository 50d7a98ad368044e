# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import inspect
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from app.common.errors import ValidationFailure
from app.pipeline.request import PipelineRequest

Pipe = Callable[[Any], Any]


class ParamSource(str, Enum):
    PATH = "path"
    BODY = "body"
    QUERY = "query"


@dataclass(frozen=True)
class ParamBinding:
    """handler 参数 <- 提取位置 + pipe 列表（按声明顺序执行）"""

    name: str
    source: ParamSource
    field: Optional[str] = None
    pipes: Tuple[Pipe, ...] = ()

    def extend(self, pipes: Iterable[Pipe]) -> "ParamBinding":
        return ParamBinding(self.name, self.source, self.field, self.pipes + tuple(pipes))

    def extract(self, request: PipelineRequest) -> Any:
        if self.source is ParamSource.PATH:
            return request.params.get(self.field or self.name)
        if self.source is ParamSource.QUERY:
            return request.query.get(self.field or self.name)
        if self.field is None:
            return request.body
        if isinstance(request.body, dict):
            return request.body.get(self.field)
        return None


async def apply_pipes(value: Any, pipes: Iterable[Pipe]) -> Any:
    for pipe in pipes:
        value = pipe(value)
        if inspect.isawaitable(value):
            value = await value
    return value


async def resolve_params(request: PipelineRequest, bindings: Iterable[ParamBinding]) -> Dict[str, Any]:
    """全部参数都通过才返回；任一 pipe 失败直接抛出，不产生部分参数"""
    resolved: Dict[str, Any] = {}
    for binding in bindings:
        resolved[binding.name] = await apply_pipes(binding.extract(request), binding.pipes)
    return resolved


# ---------- built-in pipes ----------

_INT_RE = re.compile(r"-?[0-9]+")


def parse_int_pipe(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _INT_RE.fullmatch(value):
        return int(value, 10)
    raise ValidationFailure("Validation failed (numeric string is expected)")


_EMAIL_ATOM = r"[a-zA-Z0-9!#$%&'*+\-/=?^_`{|}~]+"
_EMAIL_LABEL = r"[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?"
_EMAIL_RE = re.compile(
    rf"^(?=.{{1,256}}$){_EMAIL_ATOM}(?:\.{_EMAIL_ATOM})*(?!.*\.\.)(?!.*\.-)"
    rf"@{_EMAIL_LABEL}(?:\.{_EMAIL_LABEL})*\.[a-zA-Z]+$"
)


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and _EMAIL_RE.fullmatch(value) is not None


def email_pipe(value: Any) -> str:
    if is_valid_email(value):
        return value
    raise ValidationFailure("Invalid email format")


def validation_pipe(model: Type[BaseModel]) -> Pipe:
    """按 pydantic model 校验 body；通过后原样返回 dict"""

    def _validate(value: Any) -> Any:
        if not isinstance(value, dict):
            value = {}
        try:
            model.model_validate(value)
        except ValidationError as e:
            messages = [err["msg"] for err in e.errors()]
            raise ValidationFailure(", ".join(messages), detail=messages) from e
        return value

    _validate.__name__ = f"validate_{model.__name__}"
    return _validate

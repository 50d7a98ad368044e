# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional

from starlette.datastructures import Headers


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class RequestState(MutableMapping[str, Any]):
    """middleware 挂载的派生字段；middleware 阶段结束后冻结"""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}
        self._frozen = False

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_writable(self) -> None:
        if self._frozen:
            raise RuntimeError("request state is read-only after the middleware phase")

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._check_writable()
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        self._check_writable()
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


@dataclass
class PipelineRequest:
    method: HttpMethod
    path: str
    headers: Headers = field(default_factory=Headers)
    body: Any = None
    query: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)
    state: RequestState = field(default_factory=RequestState)
    raw_query: str = ""

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
        query: Optional[Mapping[str, str]] = None,
        raw_query: str = "",
    ) -> "PipelineRequest":
        return cls(
            method=HttpMethod(method.upper()),
            path=path or "/",
            headers=Headers(headers=dict(headers or {})),
            body=body,
            query=dict(query or {}),
            raw_query=raw_query or "",
        )

    @property
    def url(self) -> str:
        """path + query string，错误信封里的 path 字段用它；有原始 query 时原样保留"""
        if self.raw_query:
            return f"{self.path}?{self.raw_query}"
        if not self.query:
            return self.path
        qs = "&".join(f"{k}={v}" for k, v in self.query.items())
        return f"{self.path}?{qs}"


@dataclass(frozen=True)
class PipelineResponse:
    status_code: int
    body: Any
    emitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

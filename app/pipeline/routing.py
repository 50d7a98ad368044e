# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""路由表

启动时通过 builder 声明路由，注册完成后 RouteDescriptor 不再变化：

    users = Controller("/user")
    users.add(route("GET", "/:id").with_pipe("id", ParamSource.PATH, parse_int_pipe).handle(find_one))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from app.common.errors import NotFoundError
from app.pipeline.pipes import ParamBinding, ParamSource, Pipe
from app.pipeline.request import HttpMethod

Handler = Callable[..., Any]
Guard = Callable[..., Any]
Interceptor = Callable[..., Any]


def normalize_path(path: str) -> str:
    path = "/" + "/".join(seg for seg in path.split("/") if seg)
    return path


def _split(path: str) -> Tuple[str, ...]:
    return tuple(seg for seg in path.split("/") if seg)


@dataclass(frozen=True)
class RouteDescriptor:
    method: HttpMethod
    path: str
    handler: Handler
    controller: Optional["Controller"] = None
    guards: Tuple[Guard, ...] = ()
    interceptors: Tuple[Interceptor, ...] = ()
    params: Tuple[ParamBinding, ...] = ()
    name: str = ""

    @property
    def segments(self) -> Tuple[str, ...]:
        return _split(self.path)

    def match(self, method: HttpMethod, path: str) -> Optional[Dict[str, str]]:
        if method is not self.method:
            return None
        parts = _split(path)
        pattern = self.segments
        if len(parts) != len(pattern):
            return None
        params: Dict[str, str] = {}
        for pat, part in zip(pattern, parts):
            if pat.startswith(":"):
                params[pat[1:]] = part
            elif pat != part:
                return None
        return params

    @property
    def specificity(self) -> Tuple[int, ...]:
        # 字面量段优先于参数段
        return tuple(0 if seg.startswith(":") else 1 for seg in self.segments)


class RouteBuilder:
    """route(...).with_guard(...).with_pipe(...).handle(fn)"""

    def __init__(self, method: Union[str, HttpMethod], path: str = "/") -> None:
        self._method = HttpMethod(method.upper() if isinstance(method, str) else method)
        self._path = path
        self._guards: List[Guard] = []
        self._interceptors: List[Interceptor] = []
        self._params: Dict[str, ParamBinding] = {}
        self._handler: Optional[Handler] = None

    def with_guard(self, *guards: Guard) -> "RouteBuilder":
        self._guards.extend(guards)
        return self

    def with_interceptor(self, *interceptors: Interceptor) -> "RouteBuilder":
        self._interceptors.extend(interceptors)
        return self

    def with_param(self, name: str, source: ParamSource, field_name: Optional[str] = None) -> "RouteBuilder":
        """声明一个 handler 参数（无 pipe）"""
        if name not in self._params:
            if field_name is None and source is not ParamSource.BODY:
                field_name = name
            self._params[name] = ParamBinding(name=name, source=source, field=field_name)
        return self

    def with_pipe(
        self,
        name: str,
        source: ParamSource,
        *pipes: Pipe,
        field_name: Optional[str] = None,
    ) -> "RouteBuilder":
        binding = self._params.get(name)
        if binding is None:
            if field_name is None and source is not ParamSource.BODY:
                field_name = name
            binding = ParamBinding(name=name, source=source, field=field_name)
        elif binding.source is not source:
            raise ValueError(f"param {name!r} already bound to {binding.source.value}")
        self._params[name] = binding.extend(pipes)
        return self

    def handle(self, handler: Handler) -> "RouteBuilder":
        self._handler = handler
        return self

    def build(self, prefix: str = "", controller: Optional["Controller"] = None) -> RouteDescriptor:
        if self._handler is None:
            raise ValueError(f"route {self._method.value} {self._path} has no handler")
        return RouteDescriptor(
            method=self._method,
            path=normalize_path(f"{prefix}/{self._path}"),
            handler=self._handler,
            controller=controller,
            guards=tuple(self._guards),
            interceptors=tuple(self._interceptors),
            params=tuple(self._params.values()),
            name=getattr(self._handler, "__name__", ""),
        )


def route(method: Union[str, HttpMethod], path: str = "/") -> RouteBuilder:
    return RouteBuilder(method, path)


class Controller:
    """路由分组：prefix + controller 级 guard / interceptor"""

    def __init__(
        self,
        prefix: str = "/",
        *,
        name: str = "",
        guards: Sequence[Guard] = (),
        interceptors: Sequence[Interceptor] = (),
    ) -> None:
        self.prefix = normalize_path(prefix)
        self.name = name or self.prefix
        self.guards: Tuple[Guard, ...] = tuple(guards)
        self.interceptors: Tuple[Interceptor, ...] = tuple(interceptors)
        self._builders: List[RouteBuilder] = []

    def add(self, *builders: RouteBuilder) -> "Controller":
        self._builders.extend(builders)
        return self

    def routes(self) -> List[RouteDescriptor]:
        return [b.build(self.prefix, controller=self) for b in self._builders]

    def __repr__(self) -> str:
        return f"Controller({self.name!r})"


@dataclass
class RouteTable:
    _routes: List[RouteDescriptor] = field(default_factory=list)

    def register(self, *controllers: Controller) -> "RouteTable":
        for controller in controllers:
            for descriptor in controller.routes():
                self.add(descriptor)
        return self

    def add(self, descriptor: RouteDescriptor) -> None:
        for existing in self._routes:
            if existing.method is descriptor.method and existing.segments == descriptor.segments:
                raise ValueError(f"duplicate route {descriptor.method.value} {descriptor.path}")
        self._routes.append(descriptor)

    def resolve(self, method: HttpMethod, path: str) -> Optional[Tuple[RouteDescriptor, Dict[str, str]]]:
        candidates = []
        for index, descriptor in enumerate(self._routes):
            params = descriptor.match(method, path)
            if params is not None:
                candidates.append((descriptor.specificity, -index, descriptor, params))
        if not candidates:
            return None
        _, _, descriptor, params = max(candidates, key=lambda c: (c[0], c[1]))
        return descriptor, params

    def lookup(self, method: HttpMethod, path: str) -> Tuple[RouteDescriptor, Dict[str, str]]:
        found = self.resolve(method, path)
        if found is None:
            raise NotFoundError(f"Cannot {method.value} {normalize_path(path)}")
        return found

    def __iter__(self):
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

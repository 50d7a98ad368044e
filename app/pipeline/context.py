# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from app.pipeline.request import PipelineRequest, PipelineResponse

if TYPE_CHECKING:
    from app.pipeline.routing import RouteDescriptor


class DispatchState(str, Enum):
    ROUTING = "ROUTING"
    MIDDLEWARE = "MIDDLEWARE"
    GUARDING = "GUARDING"
    PIPING = "PIPING"
    HANDLING = "HANDLING"
    RESPONDING = "RESPONDING"
    FAILED = "FAILED"


_TRANSITIONS = {
    DispatchState.ROUTING: DispatchState.MIDDLEWARE,
    DispatchState.MIDDLEWARE: DispatchState.GUARDING,
    DispatchState.GUARDING: DispatchState.PIPING,
    DispatchState.PIPING: DispatchState.HANDLING,
    DispatchState.HANDLING: DispatchState.RESPONDING,
}


@dataclass
class Marker:
    name: str
    at: float


@dataclass
class PipelineContext:
    """单个请求的关联对象，仅属于一个 in-flight 请求，不跨请求共享"""

    request: PipelineRequest
    trace_id: str = "-"
    route: Optional["RouteDescriptor"] = None
    state: DispatchState = DispatchState.ROUTING
    markers: List[Marker] = field(default_factory=list)
    response: Optional[PipelineResponse] = None
    failure: Optional[BaseException] = None
    history: List[DispatchState] = field(default_factory=lambda: [DispatchState.ROUTING])

    def mark(self, name: str) -> None:
        self.markers.append(Marker(name=name, at=time.time()))

    def marker_names(self) -> Tuple[str, ...]:
        return tuple(m.name for m in self.markers)

    def advance(self) -> DispatchState:
        nxt = _TRANSITIONS.get(self.state)
        if nxt is None:
            raise RuntimeError(f"no transition out of {self.state.value}")
        return self._enter(nxt)

    def fail(self, exc: BaseException) -> DispatchState:
        if self.state in (DispatchState.RESPONDING, DispatchState.FAILED):
            raise RuntimeError(f"cannot fail from {self.state.value}")
        self.failure = exc
        return self._enter(DispatchState.FAILED)

    def respond(self, response: PipelineResponse) -> None:
        """终态：只允许写一次 response"""
        if self.response is not None:
            raise RuntimeError("response already emitted")
        if self.state is DispatchState.FAILED:
            self._enter(DispatchState.RESPONDING)
        if self.state is not DispatchState.RESPONDING:
            raise RuntimeError(f"cannot respond from {self.state.value}")
        self.response = response

    def _enter(self, state: DispatchState) -> DispatchState:
        self.state = state
        self.history.append(state)
        return state

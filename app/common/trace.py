# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from typing import Optional, Tuple


_trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="-")


def new_trace_id() -> str:
    return uuid.uuid4().hex


def set_trace_id(trace_id: str) -> Token:
    return _trace_id_ctx.set(trace_id or "-")


def reset_trace_id(token: Token) -> None:
    _trace_id_ctx.reset(token)


def get_trace_id() -> str:
    return _trace_id_ctx.get() or "-"


def ensure_trace_id() -> Tuple[str, Optional[Token]]:
    """当前上下文没有 trace_id 时生成一个（非 HTTP 入口直接调用 dispatcher 的场景）

    新生成时返回 token，调用方用完后 reset_trace_id(token)；已有 trace_id 时 token 为 None
    """
    trace_id = get_trace_id()
    if trace_id != "-":
        return trace_id, None
    trace_id = new_trace_id()
    return trace_id, set_trace_id(trace_id)

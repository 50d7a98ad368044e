# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""通用基础设施（错误/日志/trace 等）

约定：
- handler / guard / pipe 不返回错误值：失败统一通过 AppError 抛出，由 normalizer 转为标准错误信封
- trace_id 通过 middleware 注入，并写入日志，便于排障
"""

from __future__ import annotations

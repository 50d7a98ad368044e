# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""
领域层：

- schemas: Pydantic 请求模型（CreateUserDto）
"""
from . import schemas  # noqa: F401

__all__ = ["schemas"]

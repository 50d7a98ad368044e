# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

FULL_NAME_MIN = 3
FULL_NAME_MAX = 15


class CreateUserDto(BaseModel):
    """POST /user 请求体；校验失败的 msg 会直接作为错误信封里的 message"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Any = Field(None, validate_default=True)
    full_name: Any = Field(None, alias="fullName", validate_default=True)
    job: Any = Field(None, validate_default=True)

    @field_validator("id", mode="before")
    @classmethod
    def _check_id(cls, v: Any) -> Any:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise PydanticCustomError("is_number", "id should be a number")
        if isinstance(v, float) and not math.isfinite(v):
            raise PydanticCustomError("is_number", "id should be a number")
        return v

    @field_validator("full_name", mode="before")
    @classmethod
    def _check_full_name(cls, v: Any) -> Any:
        if not isinstance(v, str):
            raise PydanticCustomError("is_string", "full name should be a string")
        if not FULL_NAME_MIN <= len(v) <= FULL_NAME_MAX:
            raise PydanticCustomError(
                "length",
                "full name length should be {min} to {max} characters",
                {"min": FULL_NAME_MIN, "max": FULL_NAME_MAX},
            )
        return v

    @field_validator("job", mode="before")
    @classmethod
    def _check_job(cls, v: Any) -> Any:
        if not isinstance(v, str):
            raise PydanticCustomError("is_string", "job should be a string")
        return v

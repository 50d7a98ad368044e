# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """全局配置，从 .env / 环境变量读取"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 运行环境
    ENV: str = Field("dev", description="运行环境: dev / prod")

    # HTTP 监听
    HOST: str = Field(
        "0.0.0.0",
        description="监听地址",
        validation_alias=AliasChoices("HOST", "host"),
    )
    PORT: int = Field(
        3000,
        description="监听端口",
        validation_alias=AliasChoices("PORT", "port"),
    )

    # 日志
    LOG_LEVEL: str = Field(
        "INFO",
        description="日志级别: DEBUG / INFO / WARNING / ERROR",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )

    # 流水线
    REQUEST_TIMEOUT_SECONDS: float = Field(
        10.0,
        gt=0,
        description="单个请求的处理期限（秒），超时转为 Timeout 失败",
        validation_alias=AliasChoices("REQUEST_TIMEOUT_SECONDS", "request_timeout_seconds"),
    )
    LOGGER_INTERCEPTOR_DELAY_MS: int = Field(
        100,
        ge=0,
        description="logger interceptor 在调用 handler 前的演示延迟（毫秒）",
        validation_alias=AliasChoices("LOGGER_INTERCEPTOR_DELAY_MS", "logger_interceptor_delay_ms"),
    )


settings = Settings()

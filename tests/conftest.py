import os

import pytest

# Settings 在 import 时初始化，需要先设置环境变量
os.environ.setdefault("LOGGER_INTERCEPTOR_DELAY_MS", "0")
os.environ.setdefault("REQUEST_TIMEOUT_SECONDS", "5")

from fastapi.testclient import TestClient  # noqa: E402

from app.application.user.usecase import UserUsecase  # noqa: E402
from app.bootstrap import build_dispatcher  # noqa: E402
from app.infra.config import Settings  # noqa: E402
from app.main import create_app  # noqa: E402
from app.pipeline.context import PipelineContext  # noqa: E402
from app.pipeline.request import PipelineRequest  # noqa: E402


@pytest.fixture
def test_settings():
    return Settings(LOGGER_INTERCEPTOR_DELAY_MS=0, REQUEST_TIMEOUT_SECONDS=5)


@pytest.fixture
def user_usecase():
    return UserUsecase()


@pytest.fixture
def dispatcher(test_settings, user_usecase):
    return build_dispatcher(test_settings, user_usecase=user_usecase)


@pytest.fixture
def client(dispatcher):
    with TestClient(create_app(dispatcher)) as c:
        yield c


@pytest.fixture
def make_ctx():
    def _make(method="GET", path="/", headers=None, body=None):
        return PipelineContext(request=PipelineRequest.build(method, path, headers=headers, body=body))

    return _make

import pytest

from app.common.errors import NotFoundError
from app.pipeline.context import DispatchState
from app.pipeline.request import PipelineRequest, PipelineResponse


def test_advance_walks_the_happy_path(make_ctx):
    ctx = make_ctx()
    states = [ctx.advance() for _ in range(5)]
    assert states == [
        DispatchState.MIDDLEWARE,
        DispatchState.GUARDING,
        DispatchState.PIPING,
        DispatchState.HANDLING,
        DispatchState.RESPONDING,
    ]
    with pytest.raises(RuntimeError):
        ctx.advance()


def test_response_is_emitted_exactly_once(make_ctx):
    ctx = make_ctx()
    ctx.fail(NotFoundError())
    ctx.respond(PipelineResponse(status_code=404, body={}))

    assert ctx.state is DispatchState.RESPONDING
    with pytest.raises(RuntimeError):
        ctx.respond(PipelineResponse(status_code=200, body={}))


def test_cannot_respond_mid_pipeline(make_ctx):
    ctx = make_ctx()
    ctx.advance()
    with pytest.raises(RuntimeError):
        ctx.respond(PipelineResponse(status_code=200, body={}))


def test_cannot_fail_after_responding(make_ctx):
    ctx = make_ctx()
    ctx.fail(NotFoundError())
    ctx.respond(PipelineResponse(status_code=404, body={}))
    with pytest.raises(RuntimeError):
        ctx.fail(NotFoundError())


def test_headers_are_case_insensitive(make_ctx):
    ctx = make_ctx(headers={"X-Custom": "v"})
    assert ctx.request.headers["x-custom"] == "v"
    assert ctx.request.headers.get("X-CUSTOM") == "v"


def test_request_url_prefers_raw_query():
    request = PipelineRequest.build("GET", "/nope", query={"q": "c"}, raw_query="q=a%26b&q=c")
    assert request.url == "/nope?q=a%26b&q=c"

    assert PipelineRequest.build("GET", "/x", query={"y": "1"}).url == "/x?y=1"
    assert PipelineRequest.build("GET", "/x").url == "/x"

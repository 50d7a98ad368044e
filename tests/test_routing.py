import pytest

from app.common.errors import NotFoundError
from app.pipeline.pipes import ParamSource, parse_int_pipe
from app.pipeline.request import HttpMethod
from app.pipeline.routing import Controller, RouteTable, normalize_path, route


def _noop():
    return None


def test_normalize_path_strips_duplicate_and_trailing_slashes():
    assert normalize_path("") == "/"
    assert normalize_path("/") == "/"
    assert normalize_path("//user//") == "/user"
    assert normalize_path("user/:id/") == "/user/:id"


def test_controller_prefix_is_joined_to_route_path():
    controller = Controller("/user").add(route("GET", "/").handle(_noop), route("GET", ":id").handle(_noop))
    paths = [r.path for r in controller.routes()]
    assert paths == ["/user", "/user/:id"]
    assert all(r.controller is controller for r in controller.routes())


def test_resolve_extracts_path_params():
    table = RouteTable().register(Controller("/user").add(route("GET", "/:id").handle(_noop)))
    descriptor, params = table.resolve(HttpMethod.GET, "/user/42")
    assert descriptor.path == "/user/:id"
    assert params == {"id": "42"}


def test_resolve_ignores_trailing_slash():
    table = RouteTable().register(Controller("/").add(route("GET", "/data").handle(_noop)))
    assert table.resolve(HttpMethod.GET, "/data/") is not None


def test_method_mismatch_does_not_match():
    table = RouteTable().register(Controller("/user").add(route("POST", "/").handle(_noop)))
    assert table.resolve(HttpMethod.GET, "/user") is None


def test_literal_segment_wins_over_param_regardless_of_order():
    def by_id():
        return "id"

    def email():
        return "email"

    table = RouteTable().register(
        Controller("/user").add(
            route("GET", "/:id").handle(by_id),
            route("GET", "/email").handle(email),
        )
    )
    descriptor, params = table.resolve(HttpMethod.GET, "/user/email")
    assert descriptor.handler is email
    assert params == {}


def test_lookup_raises_not_found_with_method_and_path():
    table = RouteTable()
    with pytest.raises(NotFoundError) as exc_info:
        table.lookup(HttpMethod.GET, "/missing")
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Cannot GET /missing"


def test_duplicate_route_is_rejected():
    controller = Controller("/").add(route("GET", "/a").handle(_noop), route("GET", "/a/").handle(_noop))
    with pytest.raises(ValueError):
        RouteTable().register(controller)


def test_builder_requires_handler():
    with pytest.raises(ValueError):
        route("GET", "/x").build()


def test_builder_collects_guards_interceptors_and_pipes_in_order():
    def g1(ctx):
        return True

    def g2(ctx):
        return True

    async def i1(ctx, call):
        return await call()

    def strip(value):
        return value.strip()

    descriptor = (
        route("GET", "/items/:n")
        .with_guard(g1)
        .with_guard(g2)
        .with_interceptor(i1)
        .with_pipe("n", ParamSource.PATH, strip)
        .with_pipe("n", ParamSource.PATH, parse_int_pipe)
        .handle(_noop)
        .build()
    )
    assert descriptor.guards == (g1, g2)
    assert descriptor.interceptors == (i1,)
    assert len(descriptor.params) == 1
    assert descriptor.params[0].field == "n"
    assert descriptor.params[0].pipes == (strip, parse_int_pipe)


def test_param_rebound_to_other_source_is_rejected():
    builder = route("GET", "/:n").with_pipe("n", ParamSource.PATH, parse_int_pipe)
    with pytest.raises(ValueError):
        builder.with_pipe("n", ParamSource.QUERY, parse_int_pipe)


def test_descriptor_is_immutable():
    descriptor = route("GET", "/").handle(_noop).build()
    with pytest.raises(AttributeError):
        descriptor.path = "/other"

import pytest

from app.common.errors import FailureKind, ValidationFailure
from app.domain.schemas import CreateUserDto
from app.pipeline.pipes import (
    ParamBinding,
    ParamSource,
    email_pipe,
    is_valid_email,
    parse_int_pipe,
    resolve_params,
    validation_pipe,
)
from app.pipeline.request import PipelineRequest


@pytest.mark.parametrize("raw, expected", [("0", 0), ("42", 42), ("-7", -7), ("007", 7), (5, 5)])
def test_parse_int_accepts_base10_integers(raw, expected):
    assert parse_int_pipe(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "1.5", "", " 1", "1e3", "0x1A", "+1", "١٢", None, True])
def test_parse_int_rejects_non_integers(raw):
    with pytest.raises(ValidationFailure) as exc_info:
        parse_int_pipe(raw)
    assert exc_info.value.status_code == 400
    assert exc_info.value.kind is FailureKind.VALIDATION_FAILURE
    assert "numeric string is expected" in exc_info.value.message


@pytest.mark.parametrize(
    "value",
    ["a@b.co", "first.last@example.com", "user+tag@sub.domain.org", "x_y-z@my-host.io"],
)
def test_valid_emails(value):
    assert is_valid_email(value)
    assert email_pipe(value) == value


@pytest.mark.parametrize(
    "value",
    [
        "not-an-email",
        "a@@b.co",
        "a@b",
        "a@b.c0",
        ".a@b.co",
        "a..b@c.co",
        "a@-b.co",
        "a@b-.co",
        "a@b..co",
        "a b@c.co",
        "",
        None,
        "a" * 251 + "@b.com",
    ],
)
def test_invalid_emails(value):
    assert not is_valid_email(value)
    with pytest.raises(ValidationFailure) as exc_info:
        email_pipe(value)
    assert exc_info.value.message == "Invalid email format"


def test_validation_pipe_returns_body_unchanged():
    body = {"id": 1, "fullName": "Ada Lovelace", "job": "engineer"}
    assert validation_pipe(CreateUserDto)(body) == body


@pytest.mark.parametrize("name", ["abc", "a" * 15])
def test_validation_pipe_full_name_boundaries_pass(name):
    validation_pipe(CreateUserDto)({"id": 1, "fullName": name, "job": "dev"})


@pytest.mark.parametrize("name", ["ab", "a" * 16])
def test_validation_pipe_full_name_out_of_bounds(name):
    with pytest.raises(ValidationFailure) as exc_info:
        validation_pipe(CreateUserDto)({"id": 1, "fullName": name, "job": "dev"})
    assert exc_info.value.message == "full name length should be 3 to 15 characters"


def test_validation_pipe_collects_every_field_message():
    with pytest.raises(ValidationFailure) as exc_info:
        validation_pipe(CreateUserDto)({"id": "1", "fullName": 3})
    assert exc_info.value.detail == [
        "id should be a number",
        "full name should be a string",
        "job should be a string",
    ]
    assert exc_info.value.message == "id should be a number, full name should be a string, job should be a string"


@pytest.mark.parametrize("raw_id", [float("nan"), float("inf"), float("-inf")])
def test_validation_pipe_rejects_non_finite_id(raw_id):
    with pytest.raises(ValidationFailure) as exc_info:
        validation_pipe(CreateUserDto)({"id": raw_id, "fullName": "Ada", "job": "dev"})
    assert exc_info.value.message == "id should be a number"


def test_validation_pipe_accepts_float_and_large_int_ids():
    validation_pipe(CreateUserDto)({"id": 1.5, "fullName": "Ada", "job": "dev"})
    validation_pipe(CreateUserDto)({"id": 10 ** 400, "fullName": "Ada", "job": "dev"})


def test_validation_pipe_rejects_non_object_body():
    with pytest.raises(ValidationFailure):
        validation_pipe(CreateUserDto)(None)


@pytest.mark.asyncio
async def test_resolve_params_runs_pipes_in_declaration_order():
    calls = []

    def first(value):
        calls.append(("first", value))
        return value + "1"

    async def second(value):
        calls.append(("second", value))
        return value + "2"

    request = PipelineRequest.build("GET", "/x")
    request.params = {"n": "0"}
    binding = ParamBinding("n", ParamSource.PATH, "n", (first, second))

    resolved = await resolve_params(request, [binding])

    assert resolved == {"n": "012"}
    assert calls == [("first", "0"), ("second", "01")]


@pytest.mark.asyncio
async def test_resolve_params_stops_at_first_failure():
    seen = []

    def record(value):
        seen.append(value)
        return value

    request = PipelineRequest.build("POST", "/x", body={"email": "bad"}, query={"page": "2"})
    bindings = [
        ParamBinding("email", ParamSource.BODY, "email", (email_pipe,)),
        ParamBinding("page", ParamSource.QUERY, "page", (record,)),
    ]

    with pytest.raises(ValidationFailure):
        await resolve_params(request, bindings)
    assert seen == []


@pytest.mark.asyncio
async def test_extract_sources():
    request = PipelineRequest.build("POST", "/x", body={"a": 1}, query={"q": "s"})
    request.params = {"id": "9"}

    resolved = await resolve_params(
        request,
        [
            ParamBinding("id", ParamSource.PATH, "id"),
            ParamBinding("q", ParamSource.QUERY, "q"),
            ParamBinding("a", ParamSource.BODY, "a"),
            ParamBinding("body", ParamSource.BODY),
        ],
    )
    assert resolved == {"id": "9", "q": "s", "a": 1, "body": {"a": 1}}

import pytest

from app.api.decoding import MAX_BODY_BYTES, decode_json
from app.core.exceptions import DecodeError, DecodeErrorKind
from app.models.movie import MovieInput


def decode_error(body, **kwargs):
    with pytest.raises(DecodeError) as e:
        decode_json(body, MovieInput, **kwargs)
    return e.value


def test_decodes_valid_body():
    body = b'{"title": "Moana", "year": 2016, "runtime": "107 mins", "genres": ["animation"]}'
    result = decode_json(body, MovieInput)

    assert result.title == "Moana"
    assert result.year == 2016
    assert result.runtime == 107
    assert result.genres == ["animation"]


def test_surrounding_whitespace_is_fine():
    result = decode_json(b'\n  {"title": "Moana"}  \r\n', MovieInput)
    assert result.title == "Moana"


def test_null_means_not_supplied():
    result = decode_json(b'{"title": null, "year": 2016}', MovieInput)
    assert result.title is None
    assert result.year == 2016


@pytest.mark.parametrize("body", [b"", b"   ", b"\n\t"])
def test_empty_body(body):
    err = decode_error(body)
    assert err.kind == DecodeErrorKind.EMPTY_BODY
    assert err.message == "body must not be empty"


def test_malformed_syntax_reports_offset():
    err = decode_error(b'{"title": "Moana",, "year": 2016}')
    assert err.kind == DecodeErrorKind.MALFORMED_SYNTAX
    assert err.message == "body contains badly-formed JSON (at character 18)"


def test_malformed_literal():
    err = decode_error(b'<title>Moana</title>')
    assert err.kind == DecodeErrorKind.MALFORMED_SYNTAX
    assert "(at character 0)" in err.message


@pytest.mark.parametrize("body", [b'{"title": "Moana"', b'{"title": "Moa', b'{"genres": ["a",'])
def test_unexpected_termination(body):
    err = decode_error(body)
    assert err.kind == DecodeErrorKind.UNEXPECTED_TERMINATION
    assert err.message == "body contains badly-formed JSON"


@pytest.mark.parametrize("body, field", [
    (b'{"title": 123}', "title"),
    (b'{"year": "2016"}', "year"),
    (b'{"year": 2016.5}', "year"),
    (b'{"genres": "animation"}', "genres"),
])
def test_type_mismatch_names_field(body, field):
    err = decode_error(body)
    assert err.kind == DecodeErrorKind.TYPE_MISMATCH
    assert err.message == f'body contains incorrect JSON type for field "{field}"'


def test_type_mismatch_at_top_level_reports_offset():
    err = decode_error(b'["Moana"]')
    assert err.kind == DecodeErrorKind.TYPE_MISMATCH
    assert err.message.startswith("body contains incorrect JSON type (at character ")


def test_unknown_field():
    err = decode_error(b'{"title": "Moana", "rating": "PG"}')
    assert err.kind == DecodeErrorKind.UNKNOWN_FIELD
    assert err.message == 'body contains unknown key "rating"'


def test_too_large():
    body = b'{"title": "' + b"a" * 100 + b'"}'
    err = decode_error(body, max_bytes=50)
    assert err.kind == DecodeErrorKind.TOO_LARGE
    assert err.message == "body must not be larger than 50 bytes"


def test_default_limit_is_one_mebibyte():
    assert MAX_BODY_BYTES == 1_048_576
    body = b'{"title": "' + b"a" * MAX_BODY_BYTES + b'"}'
    assert decode_error(body).kind == DecodeErrorKind.TOO_LARGE


@pytest.mark.parametrize("body", [
    b'{"title": "Moana"}{"title": "Up"}',
    b'{"title": "Moana"} :~()',
    b'{"title": "Moana"}\n{',
])
def test_multiple_values(body):
    err = decode_error(body)
    assert err.kind == DecodeErrorKind.MULTIPLE_VALUES
    assert err.message == "body must contain a single JSON value"


def test_bad_runtime_is_passed_through():
    err = decode_error(b'{"runtime": "107 minutes"}')
    assert err.kind == DecodeErrorKind.OTHER
    assert err.message == "invalid runtime format"


def test_numeric_runtime_is_rejected():
    err = decode_error(b'{"runtime": 107}')
    assert err.message == "invalid runtime format"


def test_non_model_target_is_a_programming_error():
    with pytest.raises(TypeError):
        decode_json(b"{}", dict)

    with pytest.raises(TypeError):
        decode_json(b"{}", MovieInput())


@pytest.mark.parametrize("depth", [5000, 200000])
def test_deeply_nested_body_is_malformed(depth):
    body = b'{"genres": ' + b"[" * depth + b"]" * depth + b"}"
    err = decode_error(body)
    assert err.kind == DecodeErrorKind.MALFORMED_SYNTAX
    assert err.message == "body contains badly-formed JSON"

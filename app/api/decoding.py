import json
import re
from typing import Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from app.core.exceptions import DecodeError, DecodeErrorKind

MAX_BODY_BYTES = 1_048_576

T = TypeVar("T", bound=BaseModel)

_WHITESPACE = re.compile(r"[ \t\n\r]*")

# pydantic error types that mean "wrong JSON type for this field"
_TYPE_ERRORS = {"int_from_float", "model_attributes_type"}


def _reject_constant(name: str):
    raise ValueError(f"invalid JSON literal {name}")


_decoder = json.JSONDecoder(parse_constant=_reject_constant)


def max_body_bytes(request: Request) -> int:
    settings = getattr(request.app.state, "settings", None)
    return settings.max_body_bytes if settings is not None else MAX_BODY_BYTES


async def read_body(request: Request) -> bytes:
    """
    Read the request body, stopping one byte past the configured limit so
    decode_json can report an oversized body without buffering all of it.
    """
    limit = max_body_bytes(request)
    chunks = []
    size = 0
    async for chunk in request.stream():
        chunks.append(chunk)
        size += len(chunk)
        if size > limit:
            break
    return b"".join(chunks)[: limit + 1]


def _field_path(loc) -> str:
    return ".".join(str(part) for part in loc if isinstance(part, str))


def _translate(exc: ValidationError, offset: int) -> DecodeError:
    err = exc.errors()[0]
    err_type = err["type"]
    field = _field_path(err["loc"])

    if err_type == "json_invalid":
        return DecodeError(DecodeErrorKind.MALFORMED_SYNTAX, "body contains badly-formed JSON")

    if err_type == "extra_forbidden":
        return DecodeError(DecodeErrorKind.UNKNOWN_FIELD, f'body contains unknown key "{field}"')

    if err_type.endswith("_type") or err_type in _TYPE_ERRORS:
        if field:
            return DecodeError(
                DecodeErrorKind.TYPE_MISMATCH,
                f'body contains incorrect JSON type for field "{field}"',
            )
        return DecodeError(
            DecodeErrorKind.TYPE_MISMATCH,
            f"body contains incorrect JSON type (at character {offset})",
        )

    cause = (err.get("ctx") or {}).get("error")
    return DecodeError(DecodeErrorKind.OTHER, str(cause) if cause is not None else err["msg"])


def decode_json(body: bytes, target: Type[T], max_bytes: int = MAX_BODY_BYTES) -> T:
    """
    Decode a request body into an instance of ``target``.

    The body must hold exactly one JSON value. Every user-caused failure is
    raised as a DecodeError whose kind says what went wrong, passing
    something other than a pydantic model class is a programming error and
    raises TypeError.
    """
    if not (isinstance(target, type) and issubclass(target, BaseModel)):
        raise TypeError(f"decode target must be a pydantic model class, got {target!r}")

    if len(body) > max_bytes:
        raise DecodeError(DecodeErrorKind.TOO_LARGE, f"body must not be larger than {max_bytes} bytes")

    text = body.decode("utf-8", errors="replace")
    start = _WHITESPACE.match(text, 0).end()
    if start == len(text):
        raise DecodeError(DecodeErrorKind.EMPTY_BODY, "body must not be empty")

    try:
        _, end = _decoder.raw_decode(text, start)
    except json.JSONDecodeError as e:
        if e.pos >= len(text) or e.msg.startswith("Unterminated string"):
            raise DecodeError(DecodeErrorKind.UNEXPECTED_TERMINATION, "body contains badly-formed JSON") from e
        raise DecodeError(
            DecodeErrorKind.MALFORMED_SYNTAX,
            f"body contains badly-formed JSON (at character {e.pos})",
        ) from e
    except (ValueError, RecursionError) as e:
        # too deeply nested, or NaN/Infinity literals
        raise DecodeError(DecodeErrorKind.MALFORMED_SYNTAX, "body contains badly-formed JSON") from e

    try:
        value = target.model_validate_json(text[start:end])
    except ValidationError as e:
        raise _translate(e, end) from e

    # anything but trailing whitespace is a second value
    if _WHITESPACE.match(text, end).end() != len(text):
        raise DecodeError(DecodeErrorKind.MULTIPLE_VALUES, "body must contain a single JSON value")

    return value

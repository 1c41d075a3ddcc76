import re
from typing import Annotated, Any

from pydantic import PlainSerializer, PlainValidator, ValidationInfo

RUNTIME_SUFFIX = "mins"
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

_DIGITS = re.compile(r"[+-]?[0-9]+")


class InvalidRuntimeFormat(ValueError):
    def __init__(self, message: str = "invalid runtime format"):
        super().__init__(message)


def format_runtime(minutes: int) -> str:
    return f"{int(minutes)} {RUNTIME_SUFFIX}"


def parse_runtime(value: Any) -> int:
    """
    Parse the "<minutes> mins" wire form back into an int.

    Anything else (non-string input, extra spaces, other suffixes, a
    non-integer prefix, values outside int32) is an InvalidRuntimeFormat.
    """
    if not isinstance(value, str):
        raise InvalidRuntimeFormat()

    parts = value.split(" ")
    if len(parts) != 2 or parts[1] != RUNTIME_SUFFIX:
        raise InvalidRuntimeFormat()

    if not _DIGITS.fullmatch(parts[0]):
        raise InvalidRuntimeFormat()

    minutes = int(parts[0])
    if not INT32_MIN <= minutes <= INT32_MAX:
        raise InvalidRuntimeFormat()
    return minutes


def _validate_runtime(value: Any, info: ValidationInfo) -> int:
    # JSON input must use the string form, Python callers may pass plain ints
    if info.mode == "json":
        return parse_runtime(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return parse_runtime(value)


Runtime = Annotated[
    int,
    PlainValidator(_validate_runtime),
    PlainSerializer(format_runtime, return_type=str, when_used="json"),
]

from enum import Enum
from typing import Dict


class APIError(Exception):
    code = "SERVER_ERROR"
    message = "the server encountered a problem and could not process your request"
    status_code = 500

    def __init__(self, message: str | None = None, details=None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class RecordNotFoundError(APIError):
    code = "RECORD_NOT_FOUND"
    message = "the requested resource could not be found"
    status_code = 404


class EditConflictError(APIError):
    code = "EDIT_CONFLICT"
    message = "unable to update the record due to an edit conflict, please try again"
    status_code = 409


class StoreError(APIError):
    code = "STORE_ERROR"


class FailedValidationError(APIError):
    code = "FAILED_VALIDATION"
    message = "the submitted data failed validation"
    status_code = 422

    def __init__(self, errors: Dict[str, str]):
        super().__init__(details=dict(errors))


class BadRequestError(APIError):
    code = "BAD_REQUEST"
    message = "the request could not be understood"
    status_code = 400


class DecodeErrorKind(str, Enum):
    MALFORMED_SYNTAX = "malformed_syntax"
    UNEXPECTED_TERMINATION = "unexpected_termination"
    TYPE_MISMATCH = "type_mismatch"
    EMPTY_BODY = "empty_body"
    UNKNOWN_FIELD = "unknown_field"
    TOO_LARGE = "too_large"
    MULTIPLE_VALUES = "multiple_values"
    OTHER = "other"


class DecodeError(BadRequestError):
    code = "INVALID_BODY"

    def __init__(self, kind: DecodeErrorKind, message: str):
        self.kind = kind
        super().__init__(message)

"""
Status codes and exceptions for the operation API.

Handlers raise an ApiError subclass to stop processing a request; the
dispatcher turns it into a response carrying the matching status code.
"""

from enum import IntEnum
from typing import Optional


class Status(IntEnum):
    """Status code returned in every response."""

    SUCCESS = 0
    NO_OPERATION = 1
    UNKNOWN_OPERATION = 2
    MISSING_ARGUMENT = 3
    INVALID_ARGUMENT = 4
    INTERNAL_ERROR = 5
    ALREADY_EXISTS = 6
    NOT_FOUND = 7
    INVALID_REQUEST = 8
    FORBIDDEN = 9


INTERNAL_ERROR_MSG = "Internal error"


class ApiError(Exception):
    """Base class for errors reported to the client."""

    status = Status.INTERNAL_ERROR

    def __init__(self, msg: str, par: Optional[dict] = None):
        super().__init__(msg)
        self.msg = msg
        self.par = par


class MissingArgumentError(ApiError):
    status = Status.MISSING_ARGUMENT


class InvalidArgumentError(ApiError):
    status = Status.INVALID_ARGUMENT


class InternalError(ApiError):
    """Internal failure. The message is logged, the client only sees a generic one."""

    status = Status.INTERNAL_ERROR


class ContentionError(InternalError):
    """Another writer held the store or took the node id allocated for this request."""


class IdBandExhaustedError(InternalError):
    """Every id of the configured node id band is in use."""


class AlreadyExistsError(ApiError):
    status = Status.ALREADY_EXISTS


class NotFoundError(ApiError):
    status = Status.NOT_FOUND


class InvalidRequestError(ApiError):
    status = Status.INVALID_REQUEST


class ForbiddenOperationError(ApiError):
    status = Status.FORBIDDEN

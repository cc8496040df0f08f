import typing

from redis import exceptions as redis_exceptions

from lifecycle import _types


class StoreError(Exception):
    """Raised when the backing store fails to carry out a lifecycle command."""


class StoreUnavailable(StoreError):
    """Raised when the backing store cannot be reached or times out."""


class AuditFailure(Exception):
    """
    Raised when the audit sink rejects lifecycle events.

    The status write has already been committed to the store when this is
    raised and is not rolled back. The committed write result is available
    on the error so callers can decide how to proceed.
    """

    def __init__(self, message: str, result: "_types.WriteResult"):
        super().__init__(message)
        self.result = result


def to_store_error(error: Exception, action: str) -> StoreError:
    """Map redis client errors onto the lifecycle store error taxonomy."""
    message = f"Failed to {action}: {error}"
    if isinstance(
        error,
        (
            redis_exceptions.ConnectionError,
            redis_exceptions.TimeoutError,
            ConnectionError,
            TimeoutError,
        ),
    ):
        return StoreUnavailable(message)
    return StoreError(message)


#: Errors raised by store clients that are translated into StoreError.
STORE_ERRORS: typing.Tuple[typing.Type[Exception], ...] = (
    redis_exceptions.RedisError,
    ConnectionError,
    TimeoutError,
)

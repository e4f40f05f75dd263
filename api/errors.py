"""
Store error types raised at the repository boundary.

Driver exceptions are translated here so route handlers only ever see one of
these classes, each mapped to a single HTTP response in ``api.main``.
"""

from contextlib import contextmanager

import structlog
from bson.errors import InvalidId
from pymongo.errors import ConnectionFailure, PyMongoError

logger = structlog.get_logger(__name__)


class StoreError(Exception):
    """Unexpected failure while talking to the store."""

    def __init__(self, operation: str, message: str):
        super().__init__(message)
        self.operation = operation


class StoreUnavailableError(StoreError):
    """The store could not be reached while serving the request."""


class InvalidIdentifierError(StoreError):
    """A path identifier is not a valid ObjectId."""

    def __init__(self, operation: str, identifier: str):
        super().__init__(operation, f"'{identifier}' is not a valid identifier")
        self.identifier = identifier


@contextmanager
def translate_store_errors(operation: str, **context):
    """
    Re-raise driver exceptions from the wrapped block as store errors.

    Args:
        operation: Name of the repository operation, used in logs
        **context: Extra key-value pairs logged with the failure
    """
    try:
        yield
    except InvalidId as e:
        raise InvalidIdentifierError(operation, str(context.get("identifier", ""))) from e
    except ConnectionFailure as e:
        logger.error("Store unavailable", operation=operation, error=str(e), **context)
        raise StoreUnavailableError(operation, str(e)) from e
    except PyMongoError as e:
        logger.error("Store operation failed", operation=operation, error=str(e), **context)
        raise StoreError(operation, str(e)) from e

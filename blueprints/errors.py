import logging
from collections.abc import Generator
from contextlib import contextmanager
from enum import StrEnum

from google.api_core.exceptions import GoogleAPICallError, RetryError

logger = logging.getLogger(__name__)


class ErrorKind(StrEnum):
    NOT_FOUND = 'NotFound'
    VALIDATION = 'ValidationError'
    CONFLICT = 'Conflict'
    INTERNAL = 'Internal'


class ServiceError(Exception):
    kind = ErrorKind.INTERNAL
    status_code = 500

    def __init__(self, message: str, *, entity: str | None = None, operation: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.operation = operation


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class ValidationError(ServiceError):
    kind = ErrorKind.VALIDATION
    status_code = 422


class InvalidIdentifierError(ValidationError):
    status_code = 400


class ConflictError(ServiceError):
    kind = ErrorKind.CONFLICT
    status_code = 409

    def __init__(
        self,
        message: str,
        *,
        entity: str | None = None,
        operation: str | None = None,
        conflict_on: str | None = None,
    ) -> None:
        super().__init__(message, entity=entity, operation=operation)
        self.conflict_on = conflict_on


class InternalError(ServiceError):
    pass


@contextmanager
def store_operation(entity: str, operation: str, entity_id: str | None = None) -> Generator[None, None, None]:
    """Re-raise store failures as InternalError naming the entity and the operation."""
    try:
        yield
    except (GoogleAPICallError, RetryError) as err:
        target = entity if entity_id is None else f'{entity} {entity_id}'
        logger.error('Store operation "%s" on %s failed: %s', operation, target, err)
        raise InternalError(f'Failed to {operation} {target}', entity=entity, operation=operation) from err

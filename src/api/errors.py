"""Domain error → HTTPException mapping shared by route handlers."""

import logging

from fastapi import HTTPException, status

from domain.model.errors import (
    AlreadyExistsError,
    DeliveryError,
    DomainError,
    HashingError,
    InvalidCredentialsError,
    InvalidRoleError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    TokenError,
    UserMappingError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Order matters: first isinstance match wins
_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidRoleError, status.HTTP_400_BAD_REQUEST),
    (AlreadyExistsError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (TokenError, status.HTTP_401_UNAUTHORIZED),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (DeliveryError, status.HTTP_502_BAD_GATEWAY),
    (HashingError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (UserMappingError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]

# Collaborator failures are reported by kind only
_OPAQUE_DETAIL = {
    status.HTTP_503_SERVICE_UNAVAILABLE: "Storage unavailable",
    status.HTTP_502_BAD_GATEWAY: "Email delivery failed",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Internal server error",
}


def to_http_exception(error: DomainError) -> HTTPException:
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            status_code = code
            break

    if status_code >= 500:
        logger.error("Request failed", extra={"errorType": type(error).__name__, "error": str(error)})
        return HTTPException(status_code=status_code, detail=_OPAQUE_DETAIL[status_code])

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=status_code, detail=str(error), headers=headers)

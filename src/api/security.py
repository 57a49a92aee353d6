"""Bearer token authentication dependencies."""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies import get_user_service
from api.errors import to_http_exception
from domain.model.errors import DomainError, NotFoundError, PermissionDeniedError, TokenError
from domain.model.token import VerifiedToken
from domain.model.user import Role
from services.user_service import UserService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

_UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


def get_current_user_required(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    service: UserService = Depends(get_user_service),
) -> VerifiedToken:
    """Resolve the caller from the bearer token. Raises 401 if not authenticated."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers=_UNAUTHORIZED_HEADERS,
        )

    try:
        return service.verify_token(credentials.credentials)
    except (TokenError, NotFoundError) as e:
        logger.debug("Token verification failed", extra={"error": str(e)})
        # a deleted user's token is an authentication failure, not a missing resource
        detail = "User not found" if isinstance(e, NotFoundError) else str(e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers=_UNAUTHORIZED_HEADERS,
        ) from e
    except DomainError as e:
        raise to_http_exception(e) from e


def ensure_self_or_admin(current_user: VerifiedToken, user_id: str) -> None:
    """Raise PermissionDeniedError unless the caller is user_id or an admin."""
    if current_user.id != user_id and current_user.role != Role.ADMIN:
        raise PermissionDeniedError("You don't have permission to access this user")

"""User account routes.

Endpoints:
- POST /users: Create account (role 'user', unverified email)
- GET /users/{user_id}: Get account (self or admin)
- DELETE /users/{user_id}: Soft delete account (self or admin)
- POST /users/{user_id}/email-verification: Send a new verification code (self or admin)
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_user_service
from api.errors import to_http_exception
from api.models import CreateUserRequest, MessageResponse, UserResponse
from api.security import ensure_self_or_admin, get_current_user_required
from domain.model.errors import DomainError
from domain.model.token import VerifiedToken
from services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    request: CreateUserRequest,
    service: UserService = Depends(get_user_service),
):
    """Create a new account.

    Raises:
        HTTPException: 400 invalid input, 409 already exists
    """
    try:
        user = service.create(request.to_domain())
    except DomainError as e:
        raise to_http_exception(e) from e

    return UserResponse.from_domain(user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    current_user: VerifiedToken = Depends(get_current_user_required),
    service: UserService = Depends(get_user_service),
):
    try:
        ensure_self_or_admin(current_user, user_id)
        user = service.fetch_by_id(user_id)
    except DomainError as e:
        raise to_http_exception(e) from e

    return UserResponse.from_domain(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    current_user: VerifiedToken = Depends(get_current_user_required),
    service: UserService = Depends(get_user_service),
):
    try:
        ensure_self_or_admin(current_user, user_id)
        service.delete(user_id)
    except DomainError as e:
        raise to_http_exception(e) from e

    logger.info("User deleted via API", extra={"userId": user_id, "actorId": current_user.id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{user_id}/email-verification",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def send_email_verification(
    user_id: str,
    current_user: VerifiedToken = Depends(get_current_user_required),
    service: UserService = Depends(get_user_service),
):
    """Send a new verification code to the user's email address."""
    try:
        ensure_self_or_admin(current_user, user_id)
        user = service.fetch_by_id(user_id)
        service.send_email_verification(user.id, user.username, user.email)
    except DomainError as e:
        raise to_http_exception(e) from e

    return MessageResponse(message="Verification email sent")

"""Authentication routes (token issuance, current identity)."""

from fastapi import APIRouter, Depends

from api.dependencies import get_user_service
from api.errors import to_http_exception
from api.models import CurrentUserResponse, TokenRequest, TokenResponse
from api.security import get_current_user_required
from domain.model.errors import DomainError
from domain.model.token import VerifiedToken
from services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/token", response_model=TokenResponse)
def create_token(
    request: TokenRequest,
    service: UserService = Depends(get_user_service),
):
    """Exchange email and password for a bearer token.

    Raises:
        HTTPException: 400 malformed input, 401 invalid credentials
    """
    try:
        token = service.generate_token(request.email, request.password)
    except DomainError as e:
        raise to_http_exception(e) from e

    return TokenResponse(token=token)


@router.get("/me", response_model=CurrentUserResponse)
def get_me(current_user: VerifiedToken = Depends(get_current_user_required)):
    """Identity carried by the bearer token. Role is the one at issuance."""
    return CurrentUserResponse.from_domain(current_user)

"""Bearer token codec: signs and parses JWTs carrying user identity and role.

Only HS512 is accepted. Tokens whose header names any other algorithm,
including 'none', are rejected before the signature is looked at.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from jose import JWTError, jwt

from domain.model.errors import (
    InvalidIDError,
    InvalidRoleError,
    TokenClaimError,
    TokenEmptyError,
    TokenExpiredError,
    TokenInvalidError,
)
from domain.model.token import TokenClaims
from domain.model.user import Role
from utils.validate import validate_id

logger = logging.getLogger(__name__)

JWT_ALGORITHM = 'HS512'
TOKEN_TTL = timedelta(hours=24)
MIN_SECRET_LENGTH = 32

# Signature and algorithm are checked by jose; claim types and expiry are checked here
_DECODE_OPTIONS = {
    'verify_exp': False,
    'verify_iat': False,
    'verify_nbf': False,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    def __init__(
        self,
        secret_key: str,
        ttl: timedelta = TOKEN_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret_key:
            raise ValueError("JWT signing key is required")
        if len(secret_key) < MIN_SECRET_LENGTH:
            logger.warning(
                "JWT signing key is shorter than recommended",
                extra={"minLength": MIN_SECRET_LENGTH},
            )
        self._secret_key = secret_key
        self._ttl = ttl
        self._clock = clock

    def issue(self, user_id: str, role: Role | str) -> str:
        """Create a signed token for user_id valid for the configured TTL.

        Raises:
            InvalidIDError: user_id is not a valid ID
            InvalidRoleError: role is not one of the known roles
        """
        validate_id(user_id)
        try:
            role = Role(role)
        except ValueError:
            raise InvalidRoleError(f"Invalid role: {role}") from None

        now = self._clock().astimezone(timezone.utc)
        issued_at = int(now.timestamp())
        payload = {
            'user_id': user_id,
            'role': role.value,
            'iat': issued_at,
            'exp': issued_at + int(self._ttl.total_seconds()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=JWT_ALGORITHM)

    def decode(self, token: str) -> TokenClaims:
        """Verify token signature, algorithm, claims and expiry.

        Raises:
            TokenEmptyError: token is empty
            TokenInvalidError: malformed token, wrong algorithm or bad signature
            TokenClaimError: a claim is missing or has the wrong type
            TokenExpiredError: exp is at or before the current time
        """
        if not token:
            raise TokenEmptyError()

        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise TokenInvalidError(f"Could not parse token: {e}") from e
        if header.get('alg') != JWT_ALGORITHM:
            raise TokenInvalidError("Invalid token signing method")

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[JWT_ALGORITHM],
                options=_DECODE_OPTIONS,
            )
        except JWTError as e:
            raise TokenInvalidError(f"Could not parse token: {e}") from e

        claims = self._extract_claims(payload)
        if claims.expires_at <= self._clock():
            raise TokenExpiredError()
        return claims

    def _extract_claims(self, payload: dict[str, Any]) -> TokenClaims:
        user_id = payload.get('user_id')
        if not isinstance(user_id, str):
            raise TokenClaimError('user_id', _reason(user_id))
        try:
            validate_id(user_id)
        except InvalidIDError:
            raise TokenClaimError('user_id', 'malformed') from None

        raw_role = payload.get('role')
        if not isinstance(raw_role, str):
            raise TokenClaimError('role', _reason(raw_role))
        try:
            role = Role(raw_role)
        except ValueError:
            raise TokenClaimError('role', 'not a known role') from None

        return TokenClaims(
            user_id=user_id,
            role=role,
            issued_at=_timestamp_claim(payload, 'iat'),
            expires_at=_timestamp_claim(payload, 'exp'),
        )


def _timestamp_claim(payload: dict[str, Any], name: str) -> datetime:
    value = payload.get(name)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TokenClaimError(name, _reason(value))
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise TokenClaimError(name, 'out of range') from None


def _reason(value: Any) -> str:
    return 'missing' if value is None else 'of the wrong type'

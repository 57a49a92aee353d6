"""Domain models for bearer token claims."""

from dataclasses import dataclass
from datetime import datetime

from domain.model.user import Role


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried by a signed bearer token (Value Object).

    Attributes:
        user_id: ID of the user the token was issued to.
        role: Role at issuance time. Authoritative until the token expires.
        issued_at: Issuance instant (UTC, second precision).
        expires_at: Expiration instant (UTC, second precision).
    """
    user_id: str
    role: Role
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class VerifiedToken:
    """Identity resolved from a verified token."""
    id: str
    username: str
    role: Role

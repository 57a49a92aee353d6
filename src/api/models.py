"""Pydantic models for API request/response."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from domain.model.token import VerifiedToken
from domain.model.user import CreateUserInput, User


class CreateUserRequest(BaseModel):
    """Request model for account creation. Field rules are enforced by the service."""
    fullname: str
    username: str
    email: str
    birthdate: date
    password: str

    def to_domain(self) -> CreateUserInput:
        return CreateUserInput(
            fullname=self.fullname,
            username=self.username,
            email=self.email,
            birthdate=self.birthdate,
            password=self.password,
        )


class UserResponse(BaseModel):
    """Response model for a user. Never includes the password hash."""
    id: str = Field(..., description="User ID (UUID)")
    fullname: str
    username: str
    email: str
    birthdate: date
    email_verified: bool
    role: str = Field(..., description="Role: user or admin")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> 'UserResponse':
        return cls(
            id=user.id,
            fullname=user.fullname,
            username=user.username,
            email=user.email,
            birthdate=user.birthdate,
            email_verified=user.email_verified,
            role=user.role.value,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class TokenRequest(BaseModel):
    """Request model for login."""
    email: str
    password: str


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


class CurrentUserResponse(BaseModel):
    """Identity resolved from the bearer token."""
    id: str
    username: str
    role: str

    @classmethod
    def from_domain(cls, verified: VerifiedToken) -> 'CurrentUserResponse':
        return cls(id=verified.id, username=verified.username, role=verified.role.value)


class MessageResponse(BaseModel):
    message: str

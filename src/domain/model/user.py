from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from domain.model.errors import UserMappingError


class Role(str, Enum):
    """Fixed set of account roles."""
    USER = 'user'
    ADMIN = 'admin'


@dataclass(frozen=True)
class CreateUserInput:
    """Raw account creation input. Carries no role: new accounts are always 'user'."""
    fullname: str
    username: str
    email: str
    birthdate: date
    password: str


@dataclass
class UserRecord:
    """Storage representation of a user, as exchanged with UserRepository."""
    id: str
    fullname: str
    username: str
    email: str
    birthdate: date
    password_hash: str
    role: str
    created_at: datetime
    updated_at: datetime
    email_verified: bool = False
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass
class User:
    """Domain model representing a user. Never carries the password hash."""
    id: str
    fullname: str
    username: str
    email: str
    birthdate: date
    role: Role
    created_at: datetime
    updated_at: datetime
    email_verified: bool = False

    @staticmethod
    def from_record(record: UserRecord) -> 'User':
        """Map a storage record to the domain model.

        Raises:
            UserMappingError: stored role is not one of the known roles
        """
        try:
            role = Role(record.role)
        except ValueError:
            raise UserMappingError(f"Invalid role: {record.role}") from None

        return User(
            id=record.id,
            fullname=record.fullname,
            username=record.username,
            email=record.email,
            birthdate=record.birthdate,
            role=role,
            created_at=record.created_at,
            updated_at=record.updated_at,
            email_verified=record.email_verified,
        )

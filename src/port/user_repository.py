from typing import Protocol

from domain.model.email_verification import EmailVerification
from domain.model.user import UserRecord


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Lookups return None for missing or soft-deleted users. Failures raise
    StorageError; unique key collisions raise DuplicateRecordError.
    """
    def insert(self, record: UserRecord) -> UserRecord:
        """Insert a new user. Return the stored record."""
        ...

    def get_by_id(self, user_id: str) -> UserRecord | None:
        """Find a non-deleted user by ID. Return UserRecord or None if not found."""
        ...

    def get_by_email(self, email: str) -> UserRecord | None:
        """Find a non-deleted user by email. Return UserRecord or None if not found."""
        ...

    def delete(self, user_id: str) -> None:
        """Soft delete a user by ID."""
        ...

    def insert_email_verification(self, verification: EmailVerification) -> None:
        """Persist an email verification record."""
        ...

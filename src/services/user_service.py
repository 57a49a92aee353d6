"""User service: account lifecycle and token authentication.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable

from domain.model.email_verification import EmailVerification
from domain.model.errors import (
    AlreadyExistsError,
    DeliveryError,
    DuplicateRecordError,
    InvalidCredentialsError,
    NotFoundError,
    StorageError,
)
from domain.model.token import VerifiedToken
from domain.model.user import CreateUserInput, Role, User, UserRecord
from port.user_repository import UserRepository
from services.email_verification_service import EmailVerificationIssuer
from services.password_hasher import PasswordHasher
from services.token_service import TokenCodec
from utils.validate import (
    validate_create_user_input,
    validate_email,
    validate_id,
    validate_password,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserService:
    def __init__(
        self,
        repo: UserRepository,
        token_codec: TokenCodec,
        hasher: PasswordHasher,
        email_verification: EmailVerificationIssuer | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.repo = repo
        self.token_codec = token_codec
        self.hasher = hasher
        self.email_verification = email_verification
        self._clock = clock

    def create(self, data: CreateUserInput) -> User:
        """Create a new account with the 'user' role.

        A verification email is sent when an issuer is configured; failing
        to send it does not fail the creation, since a new code can be
        requested later.

        Raises:
            ValidationError: input failed validation
            AlreadyExistsError: a user with the same unique key exists
            HashingError: password could not be hashed
            StorageError: repository failure
        """
        data = validate_create_user_input(data)

        password_hash = self.hasher.hash(data.password)
        now = self._clock()

        try:
            record = self.repo.insert(UserRecord(
                id=str(uuid.uuid4()),
                fullname=data.fullname,
                username=data.username,
                email=data.email,
                birthdate=data.birthdate,
                password_hash=password_hash,
                role=Role.USER.value,
                created_at=now,
                updated_at=now,
                email_verified=False,
            ))
        except DuplicateRecordError:
            logger.warning("User creation failed: user already exists")
            raise AlreadyExistsError("User already exists") from None
        except StorageError as e:
            raise StorageError(f"Could not insert user: {e}") from e

        user = User.from_record(record)
        logger.info("User created", extra={"userId": user.id})

        if self.email_verification is not None:
            try:
                self.email_verification.send(user.id, user.username, user.email)
            except (StorageError, DeliveryError) as e:
                logger.error(
                    "Could not send email verification",
                    extra={"userId": user.id, "error": str(e)},
                )
        return user

    def fetch_by_id(self, user_id: str) -> User:
        """Fetch a non-deleted user.

        Raises:
            ValidationError: malformed id
            NotFoundError: no such user
            UserMappingError: stored record has an unknown role
        """
        validate_id(user_id)
        record = self._get_record(user_id)
        if record is None:
            raise NotFoundError("User not found")
        return User.from_record(record)

    def delete(self, user_id: str) -> None:
        """Soft delete a user."""
        validate_id(user_id)
        try:
            self.repo.delete(user_id)
        except StorageError as e:
            raise StorageError(f"Could not delete user by id: {e}") from e
        logger.info("User deleted", extra={"userId": user_id})

    def generate_token(self, email: str, password: str) -> str:
        """Authenticate by email and password and return a signed bearer token.

        Unknown email and wrong password raise the same error and cost one
        hash comparison each.

        Raises:
            ValidationError: malformed email or password
            InvalidCredentialsError: no match
        """
        email = validate_email(email)
        validate_password(password)

        try:
            record = self.repo.get_by_email(email)
        except StorageError as e:
            raise StorageError(f"Could not select user by email: {e}") from e

        if record is None:
            self.hasher.burn(password)
            raise InvalidCredentialsError()

        if not self.hasher.verify(record.password_hash, password):
            raise InvalidCredentialsError()

        token = self.token_codec.issue(record.id, record.role)
        logger.info("Token issued", extra={"userId": record.id})
        return token

    def verify_token(self, token: str) -> VerifiedToken:
        """Verify a bearer token and resolve the user it was issued to.

        The role comes from the token, not from the stored user: role
        changes take effect when a new token is issued.

        Raises:
            TokenError: empty, invalid, malformed or expired token
            NotFoundError: user was deleted after the token was issued
        """
        claims = self.token_codec.decode(token)

        record = self._get_record(claims.user_id)
        if record is None:
            raise NotFoundError("User not found")

        return VerifiedToken(id=record.id, username=record.username, role=claims.role)

    def send_email_verification(self, user_id: str, username: str, to: str) -> EmailVerification:
        """Send a fresh verification code. The user must already exist."""
        if self.email_verification is None:
            raise DeliveryError("Email verification is not configured")
        validate_id(user_id)
        to = validate_email(to)
        return self.email_verification.send(user_id, username, to)

    def _get_record(self, user_id: str) -> UserRecord | None:
        try:
            return self.repo.get_by_id(user_id)
        except StorageError as e:
            raise StorageError(f"Could not select user by id: {e}") from e

"""Input validators.

Each validator raises a field-specific ValidationError subclass on failure.
validate_email and validate_create_user_input return the normalized value.
"""

import re
import uuid
from dataclasses import replace
from datetime import date, datetime, timezone

import email_validator

from domain.model.errors import (
    InvalidBirthdateError,
    InvalidEmailError,
    InvalidFullnameError,
    InvalidIDError,
    InvalidPasswordError,
    InvalidUsernameError,
)
from domain.model.user import CreateUserInput

EMAIL_MAX_LENGTH = 254
PASSWORD_MIN_LENGTH = 8
# bcrypt ignores everything past 72 bytes
PASSWORD_MAX_BYTES = 72
USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9_.-]{3,32}$')
FULLNAME_MAX_LENGTH = 100


def validate_id(value: str) -> None:
    """Require a UUID in canonical string form."""
    if not isinstance(value, str) or not value:
        raise InvalidIDError("ID is required")
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        raise InvalidIDError("ID must be a valid UUID") from None
    if str(parsed) != value.lower():
        raise InvalidIDError("ID must be a valid UUID")


def validate_email(value: str) -> str:
    """Validate an address and return its normalized form (lower-cased domain).

    Callers store and look up the normalized form only, so case variants of
    the domain map to the same account.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidEmailError("Email is required")
    if len(value) > EMAIL_MAX_LENGTH:
        raise InvalidEmailError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
    try:
        result = email_validator.validate_email(value, check_deliverability=False)
    except email_validator.EmailNotValidError as e:
        raise InvalidEmailError(f"Email is invalid: {e}") from None
    return result.normalized


def validate_password(value: str) -> None:
    """Password strength rules.

    Length is checked in UTF-8 bytes on the upper end because that is
    what the hash function consumes.
    """
    if not isinstance(value, str) or not value:
        raise InvalidPasswordError("Password is required")
    if len(value) < PASSWORD_MIN_LENGTH:
        raise InvalidPasswordError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(value.encode('utf-8')) > PASSWORD_MAX_BYTES:
        raise InvalidPasswordError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    if not re.search(r'[A-Z]', value):
        raise InvalidPasswordError("Password must contain at least one uppercase letter")
    if not re.search(r'[a-z]', value):
        raise InvalidPasswordError("Password must contain at least one lowercase letter")
    if not re.search(r'[0-9]', value):
        raise InvalidPasswordError("Password must contain at least one number")


def validate_username(value: str) -> None:
    if not isinstance(value, str) or not USERNAME_PATTERN.match(value):
        raise InvalidUsernameError(
            "Username must be 3-32 characters of letters, digits, '_', '.' or '-'"
        )


def validate_fullname(value: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidFullnameError("Full name is required")
    if len(value) > FULLNAME_MAX_LENGTH:
        raise InvalidFullnameError(f"Full name must be at most {FULLNAME_MAX_LENGTH} characters")


def validate_birthdate(value: date, today: date | None = None) -> None:
    # datetime is a date subclass; a timestamp is not a birthdate
    if not isinstance(value, date) or isinstance(value, datetime):
        raise InvalidBirthdateError("Birthdate must be a date")
    today = today or datetime.now(timezone.utc).date()
    if value > today:
        raise InvalidBirthdateError("Birthdate cannot be in the future")


def validate_create_user_input(data: CreateUserInput) -> CreateUserInput:
    """Validate every field of an account creation request, in declaration order.

    Returns a copy of data carrying the normalized email.
    """
    validate_fullname(data.fullname)
    validate_username(data.username)
    email = validate_email(data.email)
    validate_birthdate(data.birthdate)
    validate_password(data.password)
    return replace(data, email=email)

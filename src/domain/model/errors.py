"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


# ── input validation ─────────────────────────────────────


class ValidationError(DomainError):
    """Input violates a business validation rule."""

    field: str = 'input'

    def __init__(self, message: str, field: str | None = None):
        if field is not None:
            self.field = field
        super().__init__(message)


class InvalidIDError(ValidationError):
    field = 'id'


class InvalidEmailError(ValidationError):
    field = 'email'


class InvalidPasswordError(ValidationError):
    field = 'password'


class InvalidUsernameError(ValidationError):
    field = 'username'


class InvalidFullnameError(ValidationError):
    field = 'fullname'


class InvalidBirthdateError(ValidationError):
    field = 'birthdate'


# ── records and credentials ──────────────────────────────


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class AlreadyExistsError(DomainError):
    """Entity with the same unique key already exists."""


class PermissionDeniedError(DomainError):
    """Caller lacks permission for the requested action."""


class InvalidCredentialsError(DomainError):
    """Email/password pair does not match a user."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InvalidRoleError(DomainError):
    """Role is outside the allowed set."""


class UserMappingError(DomainError):
    """Stored user record cannot be mapped to the domain model."""


class HashingError(DomainError):
    """Password hash function could not run."""


# ── tokens ───────────────────────────────────────────────


class TokenError(DomainError):
    """Base class for bearer token verification failures."""


class TokenEmptyError(TokenError):
    def __init__(self, message: str = "Token is empty"):
        super().__init__(message)


class TokenInvalidError(TokenError):
    def __init__(self, message: str = "Token is invalid"):
        super().__init__(message)


class TokenExpiredError(TokenError):
    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class TokenClaimError(TokenError):
    """A required claim is missing or has the wrong type."""

    def __init__(self, claim: str, reason: str = "missing"):
        self.claim = claim
        super().__init__(f"Token claim '{claim}' is {reason}")


# ── collaborators ────────────────────────────────────────


class StorageError(DomainError):
    """Repository operation failed."""


class DuplicateRecordError(StorageError):
    """Repository rejected a write because of a unique key collision."""


class DeliveryError(DomainError):
    """Mailer could not deliver a message."""

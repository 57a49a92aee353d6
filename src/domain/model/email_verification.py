from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

VERIFICATION_TTL = timedelta(hours=24)


@dataclass(frozen=True)
class EmailVerification:
    """A single email verification attempt (Entity).

    Created once per verification send. Consumption of the code is handled
    outside this service.
    """
    code: str
    user_id: str
    created_at: datetime
    expires_at: datetime

    @classmethod
    def create(cls, code: str, user_id: str, now: datetime | None = None) -> 'EmailVerification':
        """Create a record expiring exactly VERIFICATION_TTL after creation."""
        created_at = now or datetime.now(timezone.utc)
        return cls(
            code=code,
            user_id=user_id,
            created_at=created_at,
            expires_at=created_at + VERIFICATION_TTL,
        )

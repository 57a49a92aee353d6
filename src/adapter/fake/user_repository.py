"""In-memory implementation of UserRepository for testing."""

from dataclasses import replace
from datetime import datetime, timezone

from domain.model.email_verification import EmailVerification
from domain.model.errors import DuplicateRecordError
from domain.model.user import UserRecord


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, UserRecord] = {}
        self.verifications: list[EmailVerification] = []

    # ── write operations ─────────────────────────────────────

    def insert(self, record: UserRecord) -> UserRecord:
        # unique index on email covers soft-deleted users too
        if record.id in self.store or any(u.email == record.email for u in self.store.values()):
            raise DuplicateRecordError("duplicate key")

        self.store[record.id] = replace(record)
        return replace(record)

    def delete(self, user_id: str) -> None:
        record = self.store.get(user_id)
        if not record or record.is_deleted:
            return

        now = datetime.now(timezone.utc)
        record.deleted_at = now
        record.updated_at = now

    def insert_email_verification(self, verification: EmailVerification) -> None:
        self.verifications.append(verification)

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> UserRecord | None:
        for record in self.store.values():
            if record.email == email and not record.is_deleted:
                return replace(record)
        return None

    def get_by_id(self, user_id: str) -> UserRecord | None:
        record = self.store.get(user_id)
        if record is None or record.is_deleted:
            return None
        return replace(record)

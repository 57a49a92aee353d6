"""MongoDB implementation of UserRepository."""

from dataclasses import asdict
from datetime import date, datetime, time, timezone
from logging import getLogger

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import EMAIL_VERIFICATIONS_COLLECTION_NAME, USERS_COLLECTION_NAME
from domain.model.email_verification import EmailVerification
from domain.model.errors import DuplicateRecordError, StorageError
from domain.model.user import UserRecord

logger = getLogger(__name__)

# Soft-deleted users carry a deleted_at timestamp; missing or null means live
_LIVE = {'deleted_at': None}


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]
        self.verifications = db[EMAIL_VERIFICATIONS_COLLECTION_NAME]

    # ── indexes ──────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for users and email verification collections."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            create_index_safe(self.verifications, [('user_id', 1)], 'idx_verifications_user_id')
            create_index_safe(self.verifications, [('code', 1)], 'idx_verifications_code')
            # MongoDB drops expired verification records on its own
            create_index_safe(
                self.verifications, [('expires_at', 1)], 'idx_verifications_ttl',
                expireAfterSeconds=0,
            )
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> UserRecord:
        """Convert MongoDB document to UserRecord."""
        return UserRecord(
            id=doc['_id'],
            fullname=doc['fullname'],
            username=doc['username'],
            email=doc['email'],
            birthdate=_to_date(doc['birthdate']),
            password_hash=doc['password_hash'],
            role=doc['role'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            email_verified=doc.get('email_verified', False),
            deleted_at=doc.get('deleted_at'),
        )

    def _to_document(self, record: UserRecord) -> dict:
        doc = asdict(record)
        doc['_id'] = doc.pop('id')
        # BSON has no date type
        doc['birthdate'] = datetime.combine(record.birthdate, time.min, tzinfo=timezone.utc)
        return doc

    # ── write operations ─────────────────────────────────────

    def insert(self, record: UserRecord) -> UserRecord:
        """Insert a new user and return the stored record."""
        doc = self._to_document(record)
        try:
            self.collection.insert_one(doc)
        except DuplicateKeyError as e:
            logger.warning("User insert rejected: duplicate key", extra={"userId": record.id})
            raise DuplicateRecordError(str(e)) from e
        except PyMongoError as e:
            logger.error("Failed to insert user", extra={"userId": record.id, "error": str(e)})
            raise StorageError(str(e)) from e

        logger.debug("User inserted", extra={"userId": record.id})
        return self._to_domain(doc)

    def delete(self, user_id: str) -> None:
        """Soft delete user by setting deleted_at."""
        now = datetime.now(timezone.utc)
        try:
            result = self.collection.update_one(
                {'_id': user_id, **_LIVE},
                {'$set': {'deleted_at': now, 'updated_at': now}},
            )
        except PyMongoError as e:
            logger.error("Failed to delete user", extra={"userId": user_id, "error": str(e)})
            raise StorageError(str(e)) from e

        if result.matched_count == 0:
            logger.warning("User not found for deletion", extra={"userId": user_id})

    def insert_email_verification(self, verification: EmailVerification) -> None:
        try:
            self.verifications.insert_one(asdict(verification))
        except PyMongoError as e:
            logger.error(
                "Failed to insert email verification",
                extra={"userId": verification.user_id, "error": str(e)},
            )
            raise StorageError(str(e)) from e

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> UserRecord | None:
        return self._find_one({'email': email, **_LIVE})

    def get_by_id(self, user_id: str) -> UserRecord | None:
        return self._find_one({'_id': user_id, **_LIVE})

    def _find_one(self, query: dict) -> UserRecord | None:
        try:
            doc = self.collection.find_one(query)
        except PyMongoError as e:
            logger.error("Failed to find user", extra={"error": str(e)})
            raise StorageError(str(e)) from e
        return self._to_domain(doc) if doc else None


def _to_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value

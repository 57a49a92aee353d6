"""Unit tests for UserService."""

import random
import unittest
import uuid
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from adapter.fake.mailer import FakeMailer
from adapter.fake.user_repository import FakeUserRepository
from adapter.smtp.mailer import SmtpMailer
from domain.model.errors import (
    AlreadyExistsError,
    DeliveryError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidIDError,
    InvalidPasswordError,
    NotFoundError,
    StorageError,
    TokenExpiredError,
    UserMappingError,
    ValidationError,
)
from domain.model.user import CreateUserInput, Role
from services.email_verification_service import EmailVerificationIssuer
from services.password_hasher import PasswordHasher
from services.token_service import TokenCodec
from services.user_service import UserService

SECRET = 'test-signing-key-0123456789abcdef0123456789'

JANE = CreateUserInput(
    fullname='Jane Doe',
    username='janedoe',
    email='jane@example.com',
    birthdate=date(1990, 1, 1),
    password='Str0ngPass!',
)


class UserServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.now = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        self.repo = FakeUserRepository()
        self.mailer = FakeMailer()
        self.hasher = PasswordHasher(rounds=4)
        self.codec = TokenCodec(SECRET, clock=lambda: self.now)
        self.issuer = EmailVerificationIssuer(
            repo=self.repo,
            mailer=self.mailer,
            sender_name='Accounts',
            sender_address='no-reply@example.com',
            endpoint='https://accounts.example.com/verify',
            rng=random.Random(1),
        )
        self.service = UserService(
            repo=self.repo,
            token_codec=self.codec,
            hasher=self.hasher,
            email_verification=self.issuer,
        )


class TestCreate(UserServiceTestCase):

    def test_create_defaults(self):
        user = self.service.create(JANE)

        uuid.UUID(user.id)
        self.assertEqual(user.username, 'janedoe')
        self.assertEqual(user.email, 'jane@example.com')
        self.assertEqual(user.birthdate, date(1990, 1, 1))
        self.assertEqual(user.role, Role.USER)
        self.assertFalse(user.email_verified)
        self.assertEqual(user.created_at, user.updated_at)

    def test_create_does_not_expose_hash(self):
        user = self.service.create(JANE)

        self.assertFalse(hasattr(user, 'password_hash'))

    def test_stored_hash_verifies_only_original_password(self):
        user = self.service.create(JANE)
        digest = self.repo.store[user.id].password_hash

        self.assertNotEqual(digest, JANE.password)
        self.assertTrue(self.hasher.verify(digest, 'Str0ngPass!'))
        self.assertFalse(self.hasher.verify(digest, 'Str0ngPass?'))

    def test_duplicate_email_raises_already_exists(self):
        self.service.create(JANE)

        with self.assertRaises(AlreadyExistsError):
            self.service.create(CreateUserInput(
                fullname='Jane Other',
                username='janeother',
                email='jane@example.com',
                birthdate=date(1985, 5, 5),
                password='An0therPass',
            ))
        self.assertEqual(len(self.repo.store), 1)

    def test_duplicate_email_differing_in_domain_case(self):
        self.service.create(JANE)

        with self.assertRaises(AlreadyExistsError):
            self.service.create(CreateUserInput(
                fullname='Jane Doe',
                username='janedoe2',
                email='jane@EXAMPLE.COM',
                birthdate=date(1990, 1, 1),
                password='Str0ngPass!',
            ))
        self.assertEqual(len(self.repo.store), 1)

    def test_stores_normalized_email(self):
        user = self.service.create(CreateUserInput(
            fullname='Jane Doe',
            username='janedoe',
            email='jane@Example.Com',
            birthdate=date(1990, 1, 1),
            password='Str0ngPass!',
        ))

        self.assertEqual(user.email, 'jane@example.com')
        self.assertEqual(self.repo.store[user.id].email, 'jane@example.com')

    @patch('adapter.smtp.mailer.smtplib.SMTP')
    def test_non_ascii_address_rejected_by_smtp_does_not_fail_create(self, mock_smtp):
        server = mock_smtp.return_value.__enter__.return_value
        server.sendmail.side_effect = UnicodeEncodeError(
            'ascii', 'jöe@example.com', 1, 2, 'ordinal not in range(128)'
        )
        issuer = EmailVerificationIssuer(
            repo=self.repo,
            mailer=SmtpMailer(host='localhost', port=25, use_tls=False),
            sender_name='Accounts',
            sender_address='no-reply@example.com',
            endpoint='https://accounts.example.com/verify',
        )
        service = UserService(
            repo=self.repo,
            token_codec=self.codec,
            hasher=self.hasher,
            email_verification=issuer,
        )

        with self.assertLogs('services.user_service', level='ERROR'):
            user = service.create(CreateUserInput(
                fullname='Joe',
                username='joe',
                email='jöe@example.com',
                birthdate=date(1990, 1, 1),
                password='Str0ngPass!',
            ))

        self.assertIn(user.id, self.repo.store)
        self.assertEqual(user.email, 'jöe@example.com')

    def test_validation_failure_never_reaches_hasher_or_storage(self):
        hasher = MagicMock(spec=PasswordHasher)
        repo = MagicMock()
        service = UserService(repo=repo, token_codec=self.codec, hasher=hasher)

        with self.assertRaises(ValidationError):
            service.create(CreateUserInput(
                fullname='Jane Doe',
                username='janedoe',
                email='jane@example.com',
                birthdate=date(1990, 1, 1),
                password='weak',
            ))

        hasher.hash.assert_not_called()
        repo.insert.assert_not_called()

    def test_storage_failure_is_wrapped(self):
        repo = MagicMock()
        repo.insert.side_effect = StorageError('connection reset')
        service = UserService(repo=repo, token_codec=self.codec, hasher=self.hasher)

        with self.assertRaises(StorageError) as ctx:
            service.create(JANE)

        self.assertIn('Could not insert user', str(ctx.exception))
        self.assertNotIsInstance(ctx.exception, AlreadyExistsError)

    def test_create_sends_verification(self):
        user = self.service.create(JANE)

        self.assertEqual(len(self.mailer.sent), 1)
        self.assertEqual(self.mailer.sent[0]['to'], 'jane@example.com')
        self.assertEqual(len(self.repo.verifications), 1)
        self.assertEqual(self.repo.verifications[0].user_id, user.id)

    def test_verification_failure_does_not_fail_create(self):
        """Mail delivery failure is logged; the account still exists."""
        self.mailer.fail = True

        with self.assertLogs('services.user_service', level='ERROR') as logs:
            user = self.service.create(JANE)

        self.assertIn(user.id, self.repo.store)
        self.assertIn('Could not send email verification', logs.output[0])

    def test_create_without_issuer(self):
        service = UserService(repo=self.repo, token_codec=self.codec, hasher=self.hasher)

        user = service.create(JANE)

        self.assertEqual(user.role, Role.USER)
        self.assertEqual(self.mailer.sent, [])


class TestFetchAndDelete(UserServiceTestCase):

    def test_fetch_by_id(self):
        created = self.service.create(JANE)

        fetched = self.service.fetch_by_id(created.id)

        self.assertEqual(fetched, created)

    def test_fetch_missing_user(self):
        with self.assertRaises(NotFoundError):
            self.service.fetch_by_id(str(uuid.uuid4()))

    def test_fetch_invalid_id(self):
        with self.assertRaises(InvalidIDError):
            self.service.fetch_by_id('user-123')

    def test_fetch_unknown_stored_role(self):
        user = self.service.create(JANE)
        self.repo.store[user.id].role = 'owner'

        with self.assertRaises(UserMappingError):
            self.service.fetch_by_id(user.id)

    def test_delete_hides_user(self):
        user = self.service.create(JANE)

        self.service.delete(user.id)

        with self.assertRaises(NotFoundError):
            self.service.fetch_by_id(user.id)
        # soft delete: record is kept
        self.assertIsNotNone(self.repo.store[user.id].deleted_at)

    def test_delete_invalid_id(self):
        with self.assertRaises(InvalidIDError):
            self.service.delete('')

    def test_delete_propagates_storage_error(self):
        repo = MagicMock()
        repo.delete.side_effect = StorageError('timeout')
        service = UserService(repo=repo, token_codec=self.codec, hasher=self.hasher)

        with self.assertRaises(StorageError):
            service.delete(str(uuid.uuid4()))


class TestTokens(UserServiceTestCase):

    def setUp(self):
        super().setUp()
        self.user = self.service.create(JANE)

    def test_example_flow(self):
        """create → generate_token → verify_token yields the stored identity."""
        token = self.service.generate_token('jane@example.com', 'Str0ngPass!')
        self.assertTrue(token)

        verified = self.service.verify_token(token)

        self.assertEqual(verified.id, self.user.id)
        self.assertEqual(verified.username, 'janedoe')
        self.assertEqual(verified.role, Role.USER)

    def test_wrong_password_and_unknown_email_are_indistinguishable(self):
        with self.assertRaises(InvalidCredentialsError) as wrong_password:
            self.service.generate_token('jane@example.com', 'Wr0ngPass!')
        with self.assertRaises(InvalidCredentialsError) as unknown_email:
            self.service.generate_token('nobody@example.com', 'Str0ngPass!')

        self.assertIs(type(wrong_password.exception), type(unknown_email.exception))
        self.assertEqual(str(wrong_password.exception), str(unknown_email.exception))

    def test_login_ignores_domain_case(self):
        token = self.service.generate_token('jane@EXAMPLE.com', 'Str0ngPass!')

        self.assertEqual(self.service.verify_token(token).id, self.user.id)

    def test_token_issued_log_carries_user_id_only(self):
        with self.assertLogs('services.user_service', level='INFO') as logs:
            self.service.generate_token('jane@example.com', 'Str0ngPass!')

        record = logs.records[-1]
        self.assertEqual(record.getMessage(), 'Token issued')
        self.assertEqual(record.userId, self.user.id)
        self.assertNotIn('jane@example.com', ' '.join(logs.output))
        self.assertFalse(hasattr(record, 'email'))

    def test_unknown_email_spends_a_hash_comparison(self):
        hasher = MagicMock(spec=PasswordHasher)
        service = UserService(repo=self.repo, token_codec=self.codec, hasher=hasher)

        with self.assertRaises(InvalidCredentialsError):
            service.generate_token('nobody@example.com', 'Str0ngPass!')

        hasher.burn.assert_called_once_with('Str0ngPass!')

    def test_generate_token_validates_input(self):
        with self.assertRaises(InvalidEmailError):
            self.service.generate_token('not-an-email', 'Str0ngPass!')
        with self.assertRaises(InvalidPasswordError):
            self.service.generate_token('jane@example.com', 'short')

    def test_deleted_user_token_rejected(self):
        token = self.service.generate_token('jane@example.com', 'Str0ngPass!')
        self.service.delete(self.user.id)

        with self.assertRaises(NotFoundError):
            self.service.verify_token(token)

    def test_deleted_user_cannot_log_in(self):
        self.service.delete(self.user.id)

        with self.assertRaises(InvalidCredentialsError):
            self.service.generate_token('jane@example.com', 'Str0ngPass!')

    def test_expired_token_rejected(self):
        token = self.service.generate_token('jane@example.com', 'Str0ngPass!')
        self.now += timedelta(hours=24)

        with self.assertRaises(TokenExpiredError):
            self.service.verify_token(token)

    def test_role_comes_from_token_not_storage(self):
        """A stored role change only takes effect on the next issued token."""
        old_token = self.service.generate_token('jane@example.com', 'Str0ngPass!')
        self.repo.store[self.user.id].role = Role.ADMIN.value

        self.assertEqual(self.service.verify_token(old_token).role, Role.USER)

        new_token = self.service.generate_token('jane@example.com', 'Str0ngPass!')
        self.assertEqual(self.service.verify_token(new_token).role, Role.ADMIN)


class TestSendEmailVerification(UserServiceTestCase):

    def test_delegates_to_issuer(self):
        user_id = str(uuid.uuid4())

        verification = self.service.send_email_verification(user_id, 'janedoe', 'jane@example.com')

        self.assertEqual(verification.user_id, user_id)
        self.assertEqual(len(verification.code), 6)
        self.assertEqual(verification.expires_at - verification.created_at, timedelta(hours=24))
        self.assertEqual(self.repo.verifications, [verification])

    def test_delivery_failure_propagates(self):
        self.mailer.fail = True

        with self.assertRaises(DeliveryError):
            self.service.send_email_verification(str(uuid.uuid4()), 'janedoe', 'jane@example.com')

    def test_not_configured(self):
        service = UserService(repo=self.repo, token_codec=self.codec, hasher=self.hasher)

        with self.assertRaises(DeliveryError):
            service.send_email_verification(str(uuid.uuid4()), 'janedoe', 'jane@example.com')


if __name__ == '__main__':
    unittest.main()

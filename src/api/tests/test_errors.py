"""Tests for domain error → HTTP status mapping."""

import unittest

from api.errors import to_http_exception
from domain.model.errors import (
    AlreadyExistsError,
    DeliveryError,
    DuplicateRecordError,
    HashingError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidRoleError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    TokenExpiredError,
    UserMappingError,
)


class TestToHttpException(unittest.TestCase):

    def test_status_codes(self):
        cases = [
            (InvalidEmailError("Email is invalid"), 400),
            (InvalidRoleError("Invalid role"), 400),
            (AlreadyExistsError("User already exists"), 409),
            (NotFoundError("User not found"), 404),
            (PermissionDeniedError("nope"), 403),
            (InvalidCredentialsError(), 401),
            (TokenExpiredError(), 401),
            (StorageError("timeout"), 503),
            (DuplicateRecordError("E11000"), 503),
            (DeliveryError("refused"), 502),
            (HashingError("bad salt"), 500),
            (UserMappingError("Invalid role: owner"), 500),
        ]
        for error, expected in cases:
            with self.subTest(error=type(error).__name__):
                self.assertEqual(to_http_exception(error).status_code, expected)

    def test_client_errors_keep_message(self):
        exc = to_http_exception(NotFoundError("User not found"))

        self.assertEqual(exc.detail, "User not found")

    def test_unauthorized_carries_challenge(self):
        exc = to_http_exception(InvalidCredentialsError())

        self.assertEqual(exc.headers, {"WWW-Authenticate": "Bearer"})

    def test_server_errors_are_opaque(self):
        exc = to_http_exception(StorageError("mongo-7:27017 timed out"))

        self.assertEqual(exc.detail, "Storage unavailable")
        self.assertNotIn("mongo", exc.detail)


if __name__ == '__main__':
    unittest.main()

"""Password hashing with bcrypt.

The salt is embedded in the digest, so only the digest is stored.
"""

import bcrypt

from domain.model.errors import HashingError

BCRYPT_ROUNDS = 12


class PasswordHasher:
    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds
        # burn() only ever compares against this digest
        self._dummy_digest = self.hash('dummy-Passw0rd')

    def hash(self, password: str) -> str:
        """Hash password using bcrypt.

        Raises:
            HashingError: bcrypt could not produce a digest
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        except (ValueError, TypeError) as e:
            raise HashingError(f"Could not hash password: {e}") from e
        return hashed.decode('utf-8')

    def verify(self, digest: str, password: str) -> bool:
        """Check password against a stored digest.

        Returns False on mismatch.

        Raises:
            HashingError: stored digest is malformed
        """
        try:
            return bcrypt.checkpw(password.encode('utf-8'), digest.encode('utf-8'))
        except (ValueError, TypeError) as e:
            raise HashingError(f"Could not verify password: {e}") from e

    def burn(self, password: str) -> None:
        """Spend the cost of one verification without a real digest.

        Used on the unknown-account path so it takes as long as a mismatch.
        """
        self.verify(self._dummy_digest, password)

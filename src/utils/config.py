"""Application settings sourced from environment variables (and a .env file)."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


class ConfigurationError(RuntimeError):
    """Required setting is missing or malformed."""


_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off', ''}


def _get(key: str) -> str:
    value = os.getenv(key)
    if not value:
        raise ConfigurationError(f"{key} environment variable is required")
    return value


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable {key} must be an integer") from None


def _get_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ConfigurationError(f"Environment variable {key} must be a boolean")


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str
    bcrypt_rounds: int = 12

    mongo_url: str | None = None
    mongodb_database: str = 'users'

    email_verification_enabled: bool = False
    email_verification_sender_name: str = 'Accounts'
    email_verification_sender_address: str = ''
    email_verification_endpoint: str = ''

    smtp_host: str = ''
    smtp_port: int = 587
    smtp_username: str = ''
    smtp_password: str = field(default='', repr=False)
    smtp_use_tls: bool = True

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from the process environment.

        Raises:
            ConfigurationError: a required variable is missing or malformed
        """
        load_dotenv()

        settings = cls(
            jwt_secret_key=_get('JWT_SECRET_KEY'),
            bcrypt_rounds=_get_int('BCRYPT_ROUNDS', 12),
            mongo_url=os.getenv('MONGO_URL'),
            mongodb_database=os.getenv('MONGODB_DATABASE', 'users'),
            email_verification_enabled=_get_bool('EMAIL_VERIFICATION_ENABLED', False),
            email_verification_sender_name=os.getenv('EMAIL_VERIFICATION_SENDER_NAME', 'Accounts'),
            email_verification_sender_address=os.getenv('EMAIL_VERIFICATION_SENDER_ADDRESS', ''),
            email_verification_endpoint=os.getenv('EMAIL_VERIFICATION_ENDPOINT', ''),
            smtp_host=os.getenv('SMTP_HOST', ''),
            smtp_port=_get_int('SMTP_PORT', 587),
            smtp_username=os.getenv('SMTP_USERNAME', ''),
            smtp_password=os.getenv('SMTP_PASSWORD', ''),
            smtp_use_tls=_get_bool('SMTP_USE_TLS', True),
        )

        if settings.email_verification_enabled:
            if not settings.email_verification_sender_address:
                raise ConfigurationError(
                    "EMAIL_VERIFICATION_SENDER_ADDRESS is required when email verification is enabled"
                )
            if not settings.email_verification_endpoint:
                raise ConfigurationError(
                    "EMAIL_VERIFICATION_ENDPOINT is required when email verification is enabled"
                )
        return settings

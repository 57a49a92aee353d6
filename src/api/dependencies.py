from functools import lru_cache

from fastapi import Depends, HTTPException

from adapter.mongodb.connection import get_mongodb_client
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.smtp.mailer import SmtpMailer
from port.mailer import MailerPort
from port.user_repository import UserRepository
from services.email_verification_service import EmailVerificationIssuer
from services.password_hasher import PasswordHasher
from services.token_service import TokenCodec
from services.user_service import UserService
from utils.config import Settings


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


# Both hold immutable configuration; the hasher also caches its dummy digest
@lru_cache
def _password_hasher(rounds: int) -> PasswordHasher:
    return PasswordHasher(rounds)


@lru_cache
def _token_codec(secret_key: str) -> TokenCodec:
    return TokenCodec(secret_key)


def _get_db(settings: Settings):
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client(settings.mongo_url)
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[settings.mongodb_database]


def get_user_repo(settings: Settings = Depends(get_settings)) -> UserRepository:
    return MongoUserRepository(_get_db(settings))


def get_mailer(settings: Settings = Depends(get_settings)) -> MailerPort | None:
    """SMTP mailer, or None when email verification is disabled."""
    if not settings.email_verification_enabled:
        return None
    return SmtpMailer(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        envelope_from=settings.email_verification_sender_address,
        use_tls=settings.smtp_use_tls,
    )


def get_user_service(
    settings: Settings = Depends(get_settings),
    repo: UserRepository = Depends(get_user_repo),
    mailer: MailerPort | None = Depends(get_mailer),
) -> UserService:
    issuer = None
    if mailer is not None:
        issuer = EmailVerificationIssuer(
            repo=repo,
            mailer=mailer,
            sender_name=settings.email_verification_sender_name,
            sender_address=settings.email_verification_sender_address,
            endpoint=settings.email_verification_endpoint,
        )
    return UserService(
        repo=repo,
        token_codec=_token_codec(settings.jwt_secret_key),
        hasher=_password_hasher(settings.bcrypt_rounds),
        email_verification=issuer,
    )

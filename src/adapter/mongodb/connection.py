import logging

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Driver-level logs are noisy at INFO
logging.getLogger('pymongo').setLevel(logging.WARNING)

USERS_COLLECTION_NAME = 'users'
EMAIL_VERIFICATIONS_COLLECTION_NAME = 'email_verifications'

_client_cache: MongoClient | None = None
_client_url: str | None = None


def reset_client() -> None:
    global _client_cache, _client_url
    if _client_cache is not None:
        _client_cache.close()
    _client_cache = None
    _client_url = None


def get_mongodb_client(url: str | None) -> MongoClient | None:
    """Get a cached MongoDB client, reconnecting if the cached one stops answering.

    Returns None when no URL is configured or the server is unreachable.
    """
    global _client_cache, _client_url

    if _client_cache is not None and _client_url == url:
        try:
            _client_cache.admin.command('ping')
            return _client_cache
        except PyMongoError:
            logger.debug("Cached MongoDB client failed ping, reconnecting")
            reset_client()

    if not url:
        logger.error("MONGO_URL not configured")
        return None

    try:
        client = MongoClient(
            url,
            tz_aware=True,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
            maxPoolSize=10,
            retryWrites=True,
            retryReads=True,
        )
        client.admin.command('ping')
    except (ConnectionFailure, PyMongoError) as e:
        logger.error("MongoDB connection failed", extra={"error": str(e)[:200]})
        return None

    _client_cache = client
    _client_url = url
    logger.info("Connected to MongoDB")
    return client

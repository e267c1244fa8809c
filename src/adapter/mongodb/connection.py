import os
import logging
from pymongo import MongoClient
from pymongo.errors import ConfigurationError, ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Driver-level logs are noisy at INFO
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)

MONGODB_URI = os.getenv('MONGODB_URI', 'mongodb://localhost:27017')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'evista')

CLIENT_OPTIONS = {
    'serverSelectionTimeoutMS': 5000,
    'connectTimeoutMS': 5000,
    'socketTimeoutMS': 30000,
    'maxPoolSize': 10,
    'minPoolSize': 0,
    'maxIdleTimeMS': 30000,
    'waitQueueTimeoutMS': 10000,
    'retryWrites': True,
    'retryReads': True,
}

_client_cache = None
# Set only for settings that can never connect (missing or invalid URI)
_misconfigured = False
# Consecutive unreachable attempts; only the first one is logged at ERROR
_failed_attempts = 0


def reset_client():
    global _client_cache, _misconfigured, _failed_attempts
    if _client_cache is not None:
        _client_cache.close()
    _client_cache = None
    _misconfigured = False
    _failed_attempts = 0


def _is_healthy(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.debug(f"[MONGODB] Ping failed: {str(e)[:200]}")
        return False


def get_mongodb_client() -> MongoClient | None:
    """Return a live MongoDB client, connecting on demand.

    A cached client is reused while it answers ping. An unreachable server
    is retried on the next call, so the API recovers once MongoDB comes up.
    A missing or malformed MONGODB_URI is reported once and never retried.

    Returns:
        MongoDB client or None if no connection is available right now
    """
    global _client_cache, _misconfigured, _failed_attempts

    if _client_cache is not None:
        if _is_healthy(_client_cache):
            return _client_cache
        logger.warning("[MONGODB] Cached client lost its connection, reconnecting")
        _client_cache.close()
        _client_cache = None

    if _misconfigured:
        return None

    if not MONGODB_URI:
        logger.error("[MONGODB] MONGODB_URI not configured.")
        _misconfigured = True
        return None

    try:
        client = MongoClient(MONGODB_URI, **CLIENT_OPTIONS)
    except ConfigurationError as e:
        logger.error(f"[MONGODB] Invalid MONGODB_URI: {str(e)[:200]}")
        _misconfigured = True
        return None

    try:
        client.admin.command('ping')
    except (ConnectionFailure, PyMongoError) as e:
        client.close()
        _failed_attempts += 1
        log = logger.error if _failed_attempts == 1 else logger.debug
        log(f"[MONGODB] Connection failed (attempt {_failed_attempts}), will retry: {str(e)[:200]}")
        return None

    if _failed_attempts:
        logger.info(f"[MONGODB] Connected to {DATABASE_NAME} after {_failed_attempts} failed attempt(s)")
    else:
        logger.info(f"[MONGODB] Connected successfully to {DATABASE_NAME}")
    _failed_attempts = 0
    _client_cache = client
    return client

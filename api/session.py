"""Per-client trainer sessions backed by the configured key-value store."""

import logging
from datetime import datetime, timedelta
from uuid import uuid4

import redis
from fastapi import HTTPException
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from config import StorageConfig, config
from core.onboarding import OnboardingTracker
from core.persistence import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    NamespacedStore,
    RedisStore,
    SessionRepository,
)
from core.session import TrainingSession

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key or config.security.secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        try:
            return self._serializer.loads(token, max_age=max_age or config.session_ttl)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


def build_store(storage: StorageConfig | None = None) -> KeyValueStore:
    """
    Create the store named by the storage configuration.

    An unreachable Redis server falls back to memory, so a local run never
    needs one.
    """
    storage = storage or config.storage

    if storage.backend == "file":
        logger.info(f"Using file storage in {storage.directory}")
        return JsonFileStore(storage.directory)

    if storage.backend == "redis":
        try:
            client = redis.Redis.from_url(config.redis.url, decode_responses=True)
            client.ping()
            logger.info(f"Using Redis storage at {config.redis.host}:{config.redis.port}")
            return RedisStore(client, prefix=storage.redis_prefix)
        except redis.RedisError as e:
            logger.warning(f"Redis unavailable ({e}); falling back to in-memory storage")

    return InMemoryStore()


# Global store and live trainers with their expiry
_store: KeyValueStore | None = None
_trainers: dict[str, tuple[TrainingSession, datetime]] = {}


def get_store() -> KeyValueStore:
    """Get or create the shared store."""
    global _store
    if _store is None:
        _store = build_store()
    return _store


def set_store(store: KeyValueStore | None) -> None:
    """Swap the shared store and drop live trainers."""
    global _store
    _store = store
    _trainers.clear()


def create_session() -> str:
    """Create a new client session and return its signed token."""
    return get_session_signer().sign(str(uuid4()))


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    return get_session_signer().unsign(token)


def get_repository(session_id: str) -> SessionRepository:
    return SessionRepository(get_store(), namespace=session_id)


def get_onboarding(session_id: str) -> OnboardingTracker:
    return OnboardingTracker(NamespacedStore(get_store(), session_id))


def get_trainer(session_id: str) -> TrainingSession:
    """
    Get the live trainer for a client session.

    A trainer not in memory starts idle; its last snapshot, if any, is
    offered through the recovery endpoints. Each call pushes the trainer's
    expiry out by the session TTL.
    """
    cleanup_expired()
    entry = _trainers.get(session_id)
    if entry is None:
        trainer = TrainingSession(
            repository=get_repository(session_id),
            prompt_thresholds=config.training.prompt_thresholds,
            complete_on_shoe_end=config.training.complete_on_shoe_end,
        )
    else:
        trainer = entry[0]
    _trainers[session_id] = (trainer, datetime.now() + timedelta(seconds=config.session_ttl))
    return trainer


def cleanup_expired() -> int:
    """
    Forget trainers idle for longer than the session TTL.

    Their last snapshot stays in the store and is offered for recovery.
    """
    now = datetime.now()
    expired = [sid for sid, (_, expiry) in _trainers.items() if expiry < now]
    for sid in expired:
        del _trainers[sid]
    if expired:
        logger.info(f"Expired {len(expired)} idle trainers")
    return len(expired)


def drop_trainer(session_id: str) -> None:
    """Forget the live trainer; persisted data is kept."""
    _trainers.pop(session_id, None)


def require_session_id(token: str) -> str:
    """Verify a signed session token or raise 401."""
    session_id = extract_session_id(token)
    if session_id is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    return session_id

"""
Storage layer for pastes on Redis, with an in-memory backend for development.
Handles paste create/read, view counting, deletion, and health checks.
"""
import logging
import math
import time
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError as SchemaError
from redis import Redis
from redis.exceptions import RedisError

from pastebox.clock import current_time_ms
from pastebox.errors import StorageError
from pastebox.models import Paste

logger = logging.getLogger(__name__)

PASTE_PREFIX = "paste:"
TTL_PREFIX = "ttl:"


class InMemoryStore:
    """Dict-backed stand-in for the subset of the Redis API used here."""

    def __init__(self):
        self.store: Dict[str, Tuple[str, Optional[float]]] = {}

    def get(self, key: str) -> Optional[str]:
        """Retrieve a value, dropping it if its expiry has passed."""
        entry = self.store.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and time.time() >= expires_at:
            del self.store[key]
            return None

        return value

    def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        """Store a value with optional expiry in seconds."""
        expires_at = time.time() + ex if ex else None
        self.store[key] = (value, expires_at)
        return True

    def delete(self, *keys: str) -> int:
        """Delete keys, returning how many existed."""
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    def pipeline(self) -> "InMemoryPipeline":
        """Batch writes that are applied together on execute()."""
        return InMemoryPipeline(self)

    def ping(self):
        """Health check."""
        return True


class InMemoryPipeline:
    """Buffered writes against an InMemoryStore, mirroring a Redis pipeline."""

    def __init__(self, store: InMemoryStore):
        self._store = store
        self._commands: List[Tuple[str, str, Optional[int]]] = []

    def set(self, key: str, value: str, ex: Optional[int] = None) -> "InMemoryPipeline":
        self._commands.append((key, value, ex))
        return self

    def execute(self) -> List[bool]:
        commands, self._commands = self._commands, []
        return [self._store.set(key, value, ex=ex) for key, value, ex in commands]


class PasteStore:
    """Paste persistence on top of a Redis-like key-value backend."""

    def __init__(self, backend, using_fallback: bool = False):
        self.backend = backend
        self.using_fallback = using_fallback

    def is_healthy(self) -> bool:
        """Check if the backend connection is alive."""
        try:
            self.backend.ping()
            return True
        except Exception as e:
            logger.error(f"Health check failed: {e}")
        return False

    def create(self, paste: Paste, now: Optional[int] = None) -> str:
        """
        Persist a new paste with its view count reset to zero.

        When the paste expires, a ``ttl:`` marker with a matching backend
        expiry is written next to it so the backend can clean up.

        Args:
            paste: Paste record to store
            now: Creation time in epoch milliseconds (defaults to wall clock)

        Returns:
            The paste ID

        Raises:
            StorageError: If the backend write fails
        """
        record = paste.model_copy(update={"view_count": 0})
        try:
            # Record and marker go out in one MULTI/EXEC so neither lands alone
            pipe = self.backend.pipeline()
            pipe.set(self._key(paste.id), record.model_dump_json())

            if paste.expires_at is not None:
                if now is None:
                    now = current_time_ms()
                ttl_seconds = max(1, math.ceil((paste.expires_at - now) / 1000))
                pipe.set(f"{TTL_PREFIX}{paste.id}", paste.id, ex=ttl_seconds)

            pipe.execute()
        except RedisError as e:
            logger.error(f"Error saving paste {paste.id}: {e}")
            raise StorageError(f"Failed to save paste {paste.id}") from e

        logger.info(f"Paste {paste.id} saved successfully")
        return paste.id

    def get(self, paste_id: str) -> Optional[Paste]:
        """
        Fetch a paste.

        Returns:
            The paste, or None if unknown or removed by the backend

        Raises:
            StorageError: If the backend cannot be read
        """
        try:
            raw = self.backend.get(self._key(paste_id))
        except RedisError as e:
            logger.error(f"Error fetching paste {paste_id}: {e}")
            raise StorageError(f"Failed to fetch paste {paste_id}") from e

        if raw is None:
            return None

        try:
            return Paste.model_validate_json(raw)
        except SchemaError as e:
            raise StorageError(f"Corrupt record for paste {paste_id}") from e

    def increment_view(self, paste_id: str) -> None:
        """
        Add one view to a paste; no-op if it does not exist.

        This is a plain read-modify-write. Two concurrent views of the same
        paste can both read the old count, so one increment may be lost.
        """
        paste = self.get(paste_id)
        if paste is None:
            return

        paste.view_count += 1
        try:
            self.backend.set(self._key(paste_id), paste.model_dump_json())
        except RedisError as e:
            logger.error(f"Error incrementing views for {paste_id}: {e}")
            raise StorageError(f"Failed to update paste {paste_id}") from e

        logger.info(f"View count incremented for paste {paste_id}")

    def delete(self, paste_id: str) -> None:
        """Remove a paste and its cleanup marker."""
        try:
            self.backend.delete(self._key(paste_id), f"{TTL_PREFIX}{paste_id}")
        except RedisError as e:
            logger.error(f"Error deleting paste {paste_id}: {e}")
            raise StorageError(f"Failed to delete paste {paste_id}") from e

        logger.info(f"Paste {paste_id} deleted")

    @staticmethod
    def _key(paste_id: str) -> str:
        return f"{PASTE_PREFIX}{paste_id}"


def connect_store(redis_url: str) -> PasteStore:
    """Connect to Redis, falling back to the in-memory backend."""
    try:
        logger.info(f"Attempting to connect to Redis: {redis_url[:30]}...")
        backend = Redis.from_url(redis_url, decode_responses=True)
        backend.ping()
        logger.info("Redis connected successfully")
        return PasteStore(backend)
    except (RedisError, ValueError) as e:
        logger.error(f"Error connecting to Redis: {type(e).__name__}: {e}")
        logger.warning("Using in-memory fallback for development. Data will NOT persist across restarts.")
        return PasteStore(InMemoryStore(), using_fallback=True)

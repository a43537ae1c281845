"""Thin Redis client wrapper used by the DAO layer."""
import logging
from typing import Callable, Optional, TypeVar
import redis
from redis.client import Pipeline

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RedisClient:
    """Redis client exposing the few string operations the app needs."""

    def __init__(self, client: redis.Redis):
        """Initialize Redis client.

        Args:
            client: Connected redis-py client (decode_responses=True)
        """
        self.client = client

        # Test connection
        try:
            self.ping()
            logger.info("Connected to Redis")
        except redis.ConnectionError as e:
            logger.error(f"Could not connect to Redis: {e}")
            raise

    def set(self, key: str, value: str) -> None:
        """Set a key-value pair in Redis.

        Args:
            key: Redis key
            value: String value to store
        """
        self.client.set(key, value)

    def get(self, key: str) -> Optional[str]:
        """Get value for a given key from Redis.

        Args:
            key: Redis key

        Returns:
            String value or None if key doesn't exist
        """
        return self.client.get(key)

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Set a key-value pair with expiration.

        Args:
            key: Redis key
            ttl_seconds: Time-to-live in seconds
            value: String value to store
        """
        self.client.setex(key, ttl_seconds, value)

    def del_(self, key: str) -> None:
        """Delete a key from Redis.

        Args:
            key: Redis key to delete
        """
        self.client.delete(key)

    def transaction(self, func: Callable[[Pipeline], T], *watches: str) -> T:
        """Run func under WATCH/MULTI, retrying whenever a watched key changes.

        Args:
            func: Called with a pipeline in watch mode; reads happen
                immediately until it calls pipe.multi()
            watches: Keys to WATCH

        Returns:
            Whatever func returned on the attempt that committed
        """
        return self.client.transaction(func, *watches, value_from_callable=True)


    def ping(self) -> bool:
        """Check connectivity to Redis.

        Returns:
            True if connected

        Raises:
            redis.ConnectionError if connection fails
        """
        return self.client.ping()

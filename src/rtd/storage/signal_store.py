"""
Signal store adapters.

The identity SDK persists cohorts as JSON strings in a string-keyed
key/value store. The RTD provider only reads from it.

Redis Key Structure (RedisSignalStore):
    {prefix}_psegs           - JSON array of standard cohort ids
    {prefix}_pssps           - JSON object {"ssps": [...], "cohorts": [...]}
    {prefix}permutive-prebid-rtd - JSON object of platform module params
"""

import json
import os
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

try:
    import redis

    REDIS_AVAILABLE = True
except ImportError:
    REDIS_AVAILABLE = False

from ..logging import storage_logger

T = TypeVar("T")

logger = storage_logger()


class SignalStore(Protocol):
    """Read access to raw string values by key."""

    def get_data(self, key: str) -> str | None:
        ...


@dataclass(frozen=True)
class ReadResult(Generic[T]):
    """
    Outcome of a single store read.

    Either ``ok`` with a ``value``, or not ok with an ``error`` reason.
    """

    ok: bool
    value: T | None = None
    error: str = ""

    @classmethod
    def success(cls, value: T) -> "ReadResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "ReadResult[T]":
        return cls(ok=False, error=error)

    def or_default(self, default: T) -> T:
        """Return the value, or ``default`` when the read failed."""
        return self.value if self.ok else default

    def map(self, fn) -> "ReadResult":
        """Apply ``fn`` to a successful value; a raised error becomes a failure."""
        if not self.ok:
            return self
        try:
            return ReadResult.success(fn(self.value))
        except (TypeError, ValueError, AttributeError) as e:
            return ReadResult.failure(str(e))


def _is_empty(value: Any) -> bool:
    # null, false, 0 and "" count as absent; empty containers do not
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and value == 0:
        return True
    return value == ""


def read_json(store: SignalStore, key: str) -> ReadResult[Any]:
    """
    Read and parse a JSON value from the store.

    Missing keys, empty values and unparsable payloads are failures.
    """
    try:
        raw = store.get_data(key)
    except Exception as e:
        logger.debug("Store read failed", key=key, error=str(e))
        return ReadResult.failure(f"read failed: {e}")

    if raw is None:
        return ReadResult.failure("missing")

    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        return ReadResult.failure(f"invalid json: {e}")

    if _is_empty(value):
        return ReadResult.failure("empty")
    return ReadResult.success(value)


class InMemorySignalStore:
    """Dictionary-backed store for tests and offline enrichment."""

    def __init__(self, data: dict[str, Any] | None = None):
        """
        Initialize the store.

        Args:
            data: Initial values. Non-string values are JSON encoded.
        """
        self._data: dict[str, str] = {}
        for key, value in (data or {}).items():
            self.set_data(key, value)

    def get_data(self, key: str) -> str | None:
        return self._data.get(key)

    def set_data(self, key: str, value: Any) -> None:
        self._data[key] = value if isinstance(value, str) else json.dumps(value)


class RedisSignalStore:
    """
    Redis-backed signal store.

    Used when cohorts are mirrored server-side, e.g. by a browser
    beacon that copies the SDK's local storage keys into Redis.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        prefix: str | None = None,
        client: "redis.Redis | None" = None,
    ):
        """
        Initialize the store.

        Args:
            redis_url: Redis connection URL (defaults to RTD_REDIS_URL)
            prefix: Key prefix (defaults to RTD_REDIS_PREFIX)
            client: Pre-built client, mainly for tests
        """
        self._redis_url = redis_url or os.getenv("RTD_REDIS_URL", "redis://localhost:6379")
        self._prefix = prefix if prefix is not None else os.getenv("RTD_REDIS_PREFIX", "")
        self._redis = client
        if self._redis is None and REDIS_AVAILABLE:
            self._redis = redis.from_url(self._redis_url, decode_responses=True)
        elif self._redis is None:
            logger.warning("redis-py not installed, store reads will be empty")

    @property
    def is_connected(self) -> bool:
        """Check if Redis is reachable."""
        if self._redis is None:
            return False
        try:
            return bool(self._redis.ping())
        except Exception:
            return False

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get_data(self, key: str) -> str | None:
        if self._redis is None:
            return None
        value = self._redis.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set_data(self, key: str, value: Any) -> bool:
        if self._redis is None:
            return False
        payload = value if isinstance(value, str) else json.dumps(value)
        return bool(self._redis.set(self._key(key), payload))

"""
TTL-bounded storage for pending intent records

Records live under intentrelay:{fingerprint}. Each record's fingerprint is
also registered in a per-network bucket (intentrelay:bucket:{a.b.c}), a
sorted set scored by click time, so an install whose fingerprint differs
from the click's can still find the most recent records from its network.
Bucket members older than the TTL are trimmed on every write.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from intentrelay.core.exceptions import IntentStoreError, RedisError
from intentrelay.core.logging import get_logger
from intentrelay.core.redis import RedisClient, check_redis_health
from intentrelay.shared.constants.attribution import MAX_BUCKET_CANDIDATES
from intentrelay.shared.constants.redis import INTENT_BUCKET_PREFIX, INTENT_KEY_PREFIX
from intentrelay.shared.helpers import now_ms
from ..models.intent import IntentRecord
from .fingerprint import short_fingerprint
from .matcher import network_bucket

logger = get_logger(__name__)


def record_key(fingerprint: str) -> str:
    return f"{INTENT_KEY_PREFIX}:{fingerprint}"


def bucket_key(bucket: str) -> str:
    return f"{INTENT_BUCKET_PREFIX}:{bucket}"


def record_bucket(record: IntentRecord) -> str:
    return network_bucket(record.signals.network_address)


def bucket_cutoff(record: IntentRecord, ttl_seconds: int) -> int:
    """Bucket members clicked before this instant can no longer be live"""
    return record.created_at - ttl_seconds * 1000


class IntentStore(ABC):
    """Interface the attribution service depends on"""

    @abstractmethod
    async def put(self, fingerprint: str, record: IntentRecord, ttl_seconds: int) -> None:
        """Overwrite the record under fingerprint, expiring ttl_seconds from now"""
        pass

    @abstractmethod
    async def get(self, fingerprint: str) -> Optional[IntentRecord]:
        """The live record, or None if never written or already expired"""
        pass

    @abstractmethod
    async def get_many(self, fingerprints: List[str]) -> List[Optional[IntentRecord]]:
        """Records for several fingerprints in one round trip, positionally aligned"""
        pass

    @abstractmethod
    async def delete(self, fingerprint: str, bucket: Optional[str] = None) -> None:
        """Remove the record; no error if it is absent"""
        pass

    @abstractmethod
    async def candidates(self, bucket: str, limit: int = MAX_BUCKET_CANDIDATES) -> List[str]:
        """Up to limit fingerprints registered under a network bucket, newest click first"""
        pass

    @abstractmethod
    async def forget_candidate(self, bucket: str, *fingerprints: str) -> None:
        """Drop bucket members whose records no longer exist"""
        pass

    @abstractmethod
    async def count_pending(self) -> int:
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Round-trip check, raises IntentStoreError when the backend is down"""
        pass


class InMemoryIntentStore(IntentStore):
    """
    Process-local store for tests and single-instance development.

    With native_expiry=False entries never expire on their own, which models
    backends without TTL support; only the service's timestamp check purges them.
    """

    def __init__(
        self,
        clock: Callable[[], int] = now_ms,
        native_expiry: bool = True,
    ):
        self._clock = clock
        self._native_expiry = native_expiry
        # fingerprint -> (serialized record, expires_at_ms)
        self._records: Dict[str, Tuple[str, int]] = {}
        # bucket -> {fingerprint: (created_at_ms, expires_at_ms)}
        self._buckets: Dict[str, Dict[str, Tuple[int, int]]] = {}

    def _expired(self, expires_at: int) -> bool:
        return self._native_expiry and self._clock() >= expires_at

    async def put(self, fingerprint: str, record: IntentRecord, ttl_seconds: int) -> None:
        expires_at = self._clock() + ttl_seconds * 1000
        self._records[fingerprint] = (record.model_dump_json(), expires_at)

        members = self._buckets.setdefault(record_bucket(record), {})
        cutoff = bucket_cutoff(record, ttl_seconds)
        for member, (created_at, _) in list(members.items()):
            if created_at < cutoff:
                del members[member]
        members[fingerprint] = (record.created_at, expires_at)

    async def get(self, fingerprint: str) -> Optional[IntentRecord]:
        entry = self._records.get(fingerprint)
        if entry is None:
            return None
        payload, expires_at = entry
        if self._expired(expires_at):
            del self._records[fingerprint]
            return None
        return IntentRecord.model_validate_json(payload)

    async def get_many(self, fingerprints: List[str]) -> List[Optional[IntentRecord]]:
        return [await self.get(fingerprint) for fingerprint in fingerprints]

    async def delete(self, fingerprint: str, bucket: Optional[str] = None) -> None:
        self._records.pop(fingerprint, None)
        buckets = [bucket] if bucket is not None else list(self._buckets)
        for name in buckets:
            self._buckets.get(name, {}).pop(fingerprint, None)

    async def candidates(self, bucket: str, limit: int = MAX_BUCKET_CANDIDATES) -> List[str]:
        live = [
            (created_at, fingerprint)
            for fingerprint, (created_at, expires_at) in self._buckets.get(bucket, {}).items()
            if not self._expired(expires_at)
        ]
        live.sort(reverse=True)
        return [fingerprint for _, fingerprint in live[:limit]]

    async def forget_candidate(self, bucket: str, *fingerprints: str) -> None:
        members = self._buckets.get(bucket, {})
        for fingerprint in fingerprints:
            members.pop(fingerprint, None)

    async def count_pending(self) -> int:
        return sum(
            1 for _, expires_at in self._records.values() if not self._expired(expires_at)
        )

    async def ping(self) -> bool:
        return True


class RedisIntentStore(IntentStore):
    """Intent records in Redis with native key expiry"""

    def __init__(self, redis_client: RedisClient):
        self._redis = redis_client

    async def put(self, fingerprint: str, record: IntentRecord, ttl_seconds: int) -> None:
        key = record_key(fingerprint)
        index = bucket_key(record_bucket(record))
        try:
            await self._redis.set(key, record.model_dump_json(), ex=ttl_seconds)
            await self._redis.zadd(index, {fingerprint: record.created_at})
            await self._redis.zremrangebyscore(
                index, "-inf", f"({bucket_cutoff(record, ttl_seconds)}"
            )
            await self._redis.expire(index, ttl_seconds)
        except RedisError as e:
            raise IntentStoreError(
                "Failed to store intent record", operation="put", key=key, cause=e
            ) from e

    async def _decode(self, fingerprint: str, payload: Optional[str]) -> Optional[IntentRecord]:
        if payload is None:
            return None
        try:
            return IntentRecord.model_validate_json(payload)
        except PydanticValidationError as e:
            logger.warning(
                "Discarding unreadable intent record",
                fingerprint=short_fingerprint(fingerprint),
                error=str(e),
            )
            await self.delete(fingerprint)
            return None

    async def get(self, fingerprint: str) -> Optional[IntentRecord]:
        key = record_key(fingerprint)
        try:
            payload = await self._redis.get(key)
        except RedisError as e:
            raise IntentStoreError(
                "Failed to read intent record", operation="get", key=key, cause=e
            ) from e
        return await self._decode(fingerprint, payload)

    async def get_many(self, fingerprints: List[str]) -> List[Optional[IntentRecord]]:
        if not fingerprints:
            return []
        try:
            payloads = await self._redis.mget([record_key(fp) for fp in fingerprints])
        except RedisError as e:
            raise IntentStoreError(
                "Failed to read intent records", operation="get_many", cause=e
            ) from e
        return [
            await self._decode(fingerprint, payload)
            for fingerprint, payload in zip(fingerprints, payloads)
        ]

    async def delete(self, fingerprint: str, bucket: Optional[str] = None) -> None:
        key = record_key(fingerprint)
        try:
            await self._redis.delete(key)
            if bucket is not None:
                await self._redis.zrem(bucket_key(bucket), fingerprint)
        except RedisError as e:
            raise IntentStoreError(
                "Failed to delete intent record", operation="delete", key=key, cause=e
            ) from e

    async def candidates(self, bucket: str, limit: int = MAX_BUCKET_CANDIDATES) -> List[str]:
        index = bucket_key(bucket)
        try:
            members = await self._redis.zrevrange(index, 0, limit - 1)
        except RedisError as e:
            raise IntentStoreError(
                "Failed to read network bucket", operation="candidates", key=index, cause=e
            ) from e
        return list(members or [])

    async def forget_candidate(self, bucket: str, *fingerprints: str) -> None:
        if not fingerprints:
            return
        index = bucket_key(bucket)
        try:
            await self._redis.zrem(index, *fingerprints)
        except RedisError as e:
            raise IntentStoreError(
                "Failed to update network bucket", operation="forget", key=index, cause=e
            ) from e

    async def count_pending(self) -> int:
        try:
            keys = await self._redis.scan_keys(f"{INTENT_KEY_PREFIX}:*")
        except RedisError as e:
            raise IntentStoreError(
                "Failed to count intent records", operation="count", cause=e
            ) from e
        return sum(1 for key in keys if not key.startswith(f"{INTENT_BUCKET_PREFIX}:"))

    async def ping(self) -> bool:
        status = await check_redis_health(self._redis)
        if not status.is_healthy:
            raise IntentStoreError(
                status.error_message or "Redis unavailable", operation="ping"
            )
        return True

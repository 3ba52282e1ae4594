"""
Tests for the in-memory and Redis intent record stores
"""

from unittest.mock import AsyncMock, patch

import pytest

from intentrelay.core.exceptions import (
    IntentStoreError,
    RedisConnectionError,
    RedisTimeoutError,
)
from intentrelay.core.redis import RedisHealthStatus
from intentrelay.domains.attribution.models import IntentRecord, SignalTuple
from intentrelay.domains.attribution.services.intent_store import (
    InMemoryIntentStore,
    RedisIntentStore,
    bucket_key,
    record_bucket,
    record_key,
)

TTL = 86400


def make_record(link_id="link-1", address="203.0.113.10", created_at=1_700_000_000_000):
    return IntentRecord(
        link_id=link_id,
        content="promo42",
        campaign="summer",
        source="newsletter",
        fingerprint=f"fp-{link_id}",
        signals=SignalTuple(platform_name="iOS", network_address=address),
        created_at=created_at,
    )


class TestKeyLayout:
    def test_record_key(self):
        assert record_key("abc") == "intentrelay:abc"

    def test_bucket_key(self):
        assert bucket_key("203.0.113") == "intentrelay:bucket:203.0.113"

    def test_record_bucket_uses_network_prefix(self):
        assert record_bucket(make_record()) == "203.0.113"
        assert record_bucket(make_record(address=None)) == "unknown"


class TestInMemoryIntentStore:
    @pytest.mark.asyncio
    async def test_round_trip(self, store):
        record = make_record()
        await store.put("fp-1", record, TTL)

        assert await store.get("fp-1") == record
        assert await store.get("fp-missing") is None

    @pytest.mark.asyncio
    async def test_overwrite_is_last_write_wins(self, store):
        await store.put("fp-1", make_record(link_id="first"), TTL)
        await store.put("fp-1", make_record(link_id="second"), TTL)

        assert (await store.get("fp-1")).link_id == "second"
        assert await store.count_pending() == 1

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, store):
        await store.put("fp-1", make_record(), TTL)

        await store.delete("fp-1", "203.0.113")
        await store.delete("fp-1", "203.0.113")
        await store.delete("never-stored")

        assert await store.get("fp-1") is None
        assert await store.candidates("203.0.113") == []

    @pytest.mark.asyncio
    async def test_native_expiry(self, store, clock):
        await store.put("fp-1", make_record(), TTL)

        clock.advance(TTL - 1)
        assert await store.get("fp-1") is not None

        clock.advance(1)
        assert await store.get("fp-1") is None
        assert await store.candidates("203.0.113") == []
        assert await store.count_pending() == 0

    @pytest.mark.asyncio
    async def test_without_native_expiry_records_persist(self, clock):
        store = InMemoryIntentStore(clock=clock, native_expiry=False)
        await store.put("fp-1", make_record(), TTL)

        clock.advance(TTL * 2)
        assert await store.get("fp-1") is not None

    @pytest.mark.asyncio
    async def test_candidate_index_groups_by_network(self, store):
        await store.put("fp-1", make_record(link_id="a", address="203.0.113.10"), TTL)
        await store.put("fp-2", make_record(link_id="b", address="203.0.113.99"), TTL)
        await store.put("fp-3", make_record(link_id="c", address="198.51.100.7"), TTL)

        assert sorted(await store.candidates("203.0.113")) == ["fp-1", "fp-2"]
        assert await store.candidates("198.51.100") == ["fp-3"]

        await store.forget_candidate("203.0.113", "fp-1")
        assert await store.candidates("203.0.113") == ["fp-2"]

    @pytest.mark.asyncio
    async def test_candidates_newest_first_and_limited(self, store):
        for offset in range(5):
            record = make_record(link_id=f"l{offset}", created_at=1_700_000_000_000 + offset)
            await store.put(f"fp-{offset}", record, TTL)

        assert await store.candidates("203.0.113", limit=3) == ["fp-4", "fp-3", "fp-2"]

    @pytest.mark.asyncio
    async def test_put_trims_bucket_members_older_than_ttl(self, clock):
        store = InMemoryIntentStore(clock=clock, native_expiry=False)
        await store.put("fp-old", make_record(link_id="old", created_at=clock.now), TTL)

        clock.advance(TTL + 1)
        await store.put("fp-new", make_record(link_id="new", created_at=clock.now), TTL)

        assert await store.candidates("203.0.113") == ["fp-new"]

    @pytest.mark.asyncio
    async def test_get_many_aligns_with_input(self, store):
        record = make_record()
        await store.put("fp-1", record, TTL)

        assert await store.get_many(["fp-missing", "fp-1"]) == [None, record]

    @pytest.mark.asyncio
    async def test_ping(self, store):
        assert await store.ping() is True


class TestRedisIntentStore:
    @pytest.fixture
    def redis_client(self):
        return AsyncMock()

    @pytest.fixture
    def redis_store(self, redis_client):
        return RedisIntentStore(redis_client)

    @pytest.mark.asyncio
    async def test_put_writes_record_and_bucket(self, redis_store, redis_client):
        record = make_record()
        await redis_store.put("fp-1", record, TTL)

        redis_client.set.assert_awaited_once_with(
            "intentrelay:fp-1", record.model_dump_json(), ex=TTL
        )
        index = "intentrelay:bucket:203.0.113"
        redis_client.zadd.assert_awaited_once_with(index, {"fp-1": record.created_at})
        redis_client.zremrangebyscore.assert_awaited_once_with(
            index, "-inf", f"({record.created_at - TTL * 1000}"
        )
        redis_client.expire.assert_awaited_once_with(index, TTL)

    @pytest.mark.asyncio
    async def test_get_parses_payload(self, redis_store, redis_client):
        record = make_record()
        redis_client.get.return_value = record.model_dump_json()

        assert await redis_store.get("fp-1") == record
        redis_client.get.assert_awaited_once_with("intentrelay:fp-1")

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, redis_store, redis_client):
        redis_client.get.return_value = None
        assert await redis_store.get("fp-1") is None

    @pytest.mark.asyncio
    async def test_unreadable_payload_is_discarded(self, redis_store, redis_client):
        redis_client.get.return_value = "{not json"

        assert await redis_store.get("fp-1") is None
        redis_client.delete.assert_awaited_once_with("intentrelay:fp-1")

    @pytest.mark.asyncio
    async def test_delete_removes_bucket_membership(self, redis_store, redis_client):
        await redis_store.delete("fp-1", "203.0.113")

        redis_client.delete.assert_awaited_once_with("intentrelay:fp-1")
        redis_client.zrem.assert_awaited_once_with("intentrelay:bucket:203.0.113", "fp-1")

    @pytest.mark.asyncio
    async def test_candidates_newest_first_and_bounded(self, redis_store, redis_client):
        redis_client.zrevrange.return_value = ["fp-2", "fp-1"]

        assert await redis_store.candidates("203.0.113", limit=10) == ["fp-2", "fp-1"]
        redis_client.zrevrange.assert_awaited_once_with("intentrelay:bucket:203.0.113", 0, 9)

    @pytest.mark.asyncio
    async def test_get_many_single_round_trip(self, redis_store, redis_client):
        record = make_record()
        redis_client.mget.return_value = [record.model_dump_json(), None]

        assert await redis_store.get_many(["fp-1", "fp-2"]) == [record, None]
        redis_client.mget.assert_awaited_once_with(["intentrelay:fp-1", "intentrelay:fp-2"])
        redis_client.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_many_empty_skips_redis(self, redis_store, redis_client):
        assert await redis_store.get_many([]) == []
        redis_client.mget.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_many_discards_unreadable(self, redis_store, redis_client):
        redis_client.mget.return_value = ["{not json"]

        assert await redis_store.get_many(["fp-1"]) == [None]
        redis_client.delete.assert_awaited_once_with("intentrelay:fp-1")

    @pytest.mark.asyncio
    async def test_forget_candidate_batches(self, redis_store, redis_client):
        await redis_store.forget_candidate("203.0.113", "fp-1", "fp-2")
        await redis_store.forget_candidate("203.0.113")

        redis_client.zrem.assert_awaited_once_with("intentrelay:bucket:203.0.113", "fp-1", "fp-2")

    @pytest.mark.asyncio
    async def test_count_pending_excludes_bucket_keys(self, redis_store, redis_client):
        redis_client.scan_keys.return_value = [
            "intentrelay:fp-1",
            "intentrelay:fp-2",
            "intentrelay:bucket:203.0.113",
        ]

        assert await redis_store.count_pending() == 2
        redis_client.scan_keys.assert_awaited_once_with("intentrelay:*")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["put", "get", "get_many", "delete", "candidates"])
    async def test_redis_errors_become_store_errors(self, redis_store, redis_client, operation):
        failure = RedisConnectionError("Redis operation failed")
        redis_client.set.side_effect = failure
        redis_client.get.side_effect = failure
        redis_client.delete.side_effect = failure
        redis_client.mget.side_effect = failure
        redis_client.zrevrange.side_effect = failure

        calls = {
            "put": lambda: redis_store.put("fp-1", make_record(), TTL),
            "get": lambda: redis_store.get("fp-1"),
            "get_many": lambda: redis_store.get_many(["fp-1"]),
            "delete": lambda: redis_store.delete("fp-1"),
            "candidates": lambda: redis_store.candidates("203.0.113"),
        }

        with pytest.raises(IntentStoreError) as exc_info:
            await calls[operation]()

        assert exc_info.value.operation == operation
        assert exc_info.value.error_code == "INTENT_STORE_ERROR"
        assert exc_info.value.cause is failure

    @pytest.mark.asyncio
    async def test_timeout_becomes_store_error(self, redis_store, redis_client):
        redis_client.scan_keys.side_effect = RedisTimeoutError("timed out", operation="scan_iter")

        with pytest.raises(IntentStoreError):
            await redis_store.count_pending()

    @pytest.mark.asyncio
    async def test_ping_raises_when_unhealthy(self, redis_store):
        unhealthy = RedisHealthStatus(
            is_healthy=False,
            checked_at="2026-01-01T00:00:00+00:00",
            response_time_ms=5000.0,
            error_message="Connection refused",
        )
        with patch(
            "intentrelay.domains.attribution.services.intent_store.check_redis_health",
            AsyncMock(return_value=unhealthy),
        ):
            with pytest.raises(IntentStoreError, match="Connection refused"):
                await redis_store.ping()

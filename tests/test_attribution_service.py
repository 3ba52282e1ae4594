"""
Tests for click recording and install-time resolution
"""

from unittest.mock import AsyncMock

import pytest

from intentrelay.core.exceptions import IntentStoreError, ValidationError
from intentrelay.domains.attribution.models import AppInfo, ObservationContext, SignalTuple
from intentrelay.domains.attribution.services import (
    AttributionService,
    InMemoryIntentStore,
    build_fingerprint,
)
from intentrelay.shared.constants.attribution import INTENT_TTL_SECONDS, MAX_BUCKET_CANDIDATES
from intentrelay.shared.helpers import utc_day


class TestRecordClick:
    @pytest.mark.asyncio
    async def test_mobile_click_writes_record(self, service, store, ios_click_signals, clock):
        outcome = await service.record_click(
            "link-1",
            content="promo42",
            campaign="summer",
            source="newsletter",
            signals=ios_click_signals,
        )

        assert outcome.mobile is True
        assert outcome.record_written is True
        assert outcome.redirect_target == (
            "exampleapp://content/promo42?campaign=summer&source=newsletter"
        )
        assert outcome.fingerprint == build_fingerprint(ios_click_signals, ObservationContext.CLICK)

        stored = await store.get(outcome.fingerprint)
        assert stored.link_id == "link-1"
        assert stored.created_at == clock.now
        assert stored.signals == ios_click_signals.captured()

    @pytest.mark.asyncio
    async def test_defaults_applied(self, service, ios_click_signals):
        outcome = await service.record_click("link-1", signals=ios_click_signals)

        assert outcome.record.content == "default"
        assert outcome.record.campaign == "direct"
        assert outcome.record.source == "unknown"

    @pytest.mark.asyncio
    async def test_captures_only_matching_fields(self, service):
        signals = SignalTuple(
            platform_name="Android",
            platform_version="14",
            network_address="198.51.100.4",
            client_name="Chrome Mobile",
            client_version="120.0",
            device_model="Pixel 8",
            locale="en-GB",
        )
        outcome = await service.record_click("link-1", signals=signals)

        captured = outcome.record.signals
        assert captured.client_name == "Chrome Mobile"
        assert captured.device_model is None
        assert captured.locale is None

    @pytest.mark.asyncio
    async def test_desktop_click_skips_store(self, service, store):
        signals = SignalTuple(platform_name="Mac OS X", network_address="203.0.113.10")
        outcome = await service.record_click("link-1", content="promo42", signals=signals)

        assert outcome.mobile is False
        assert outcome.record_written is False
        assert outcome.redirect_target == "https://example.com/content/promo42"
        assert await store.count_pending() == 0

    @pytest.mark.asyncio
    async def test_explicit_classification_wins(self, service, store):
        signals = SignalTuple(platform_name="iOS")
        outcome = await service.record_click("link-1", signals=signals, is_mobile=False)

        assert outcome.mobile is False
        assert await store.count_pending() == 0

    @pytest.mark.asyncio
    async def test_missing_link_id_rejected(self, ios_click_signals):
        store = AsyncMock()
        service = AttributionService(store=store)

        with pytest.raises(ValidationError) as exc_info:
            await service.record_click("", signals=ios_click_signals)

        assert exc_info.value.message == "linkId is required"
        store.put.assert_not_awaited()


class TestResolveQuery:
    @pytest.mark.asyncio
    async def test_scenario_a_tolerant_match(self, service, stats, ios_click_signals, clock):
        """Minor OS update and a new address on the same /24 still match"""
        await service.record_click(
            "link-1",
            content="promo42",
            campaign="summer",
            source="newsletter",
            signals=ios_click_signals,
        )
        clock.advance(5 * 60)

        result = await service.resolve_query(
            SignalTuple(platform_name="iOS", platform_version="17.4", network_address="203.0.113.250")
        )

        assert result.found is True
        assert result.record.content == "promo42"
        assert result.record.campaign == "summer"
        assert result.record.source == "newsletter"
        assert result.record.link_id == "link-1"
        assert result.record.score == 1.0
        assert result.record.timestamp == clock.now - 5 * 60 * 1000
        assert (await stats.get_counts(utc_day()))["success"] == 1

    @pytest.mark.asyncio
    async def test_scenario_b_platform_mismatch(self, service, store, stats, ios_click_signals):
        click = await service.record_click("link-1", signals=ios_click_signals)

        result = await service.resolve_query(
            SignalTuple(platform_name="Android", platform_version="14", network_address="203.0.113.250")
        )

        assert result.found is False
        assert result.reason == "Device mismatch"
        assert result.score < 0.6
        assert await store.get(click.fingerprint) is not None
        assert (await stats.get_counts(utc_day())) == {"success": 0, "error": 0}

    @pytest.mark.asyncio
    async def test_scenario_c_no_prior_click(self, service):
        result = await service.resolve_query(
            SignalTuple(platform_name="iOS", network_address="192.0.2.1")
        )

        assert result.found is False
        assert result.reason == "No matching fingerprint found"
        assert result.score is None

    @pytest.mark.asyncio
    async def test_scenario_d_desktop_click_never_matches(self, service):
        signals = SignalTuple(platform_name="Windows", network_address="203.0.113.10")
        await service.record_click("link-1", signals=signals)

        result = await service.resolve_query(signals)

        assert result.found is False
        assert result.reason == "No matching fingerprint found"

    @pytest.mark.asyncio
    async def test_one_shot_consumption(self, service, store, ios_click_signals):
        click = await service.record_click("link-1", signals=ios_click_signals)

        first = await service.resolve_query(ios_click_signals)
        second = await service.resolve_query(ios_click_signals)

        assert first.found is True
        assert second.found is False
        assert second.reason == "No matching fingerprint found"
        assert await store.get(click.fingerprint) is None
        assert await store.candidates("203.0.113") == []

    @pytest.mark.asyncio
    async def test_mismatch_then_retry_succeeds(self, service, ios_click_signals):
        await service.record_click("link-1", signals=ios_click_signals)

        miss = await service.resolve_query(
            SignalTuple(platform_name="Android", platform_version="14", network_address="203.0.113.7")
        )
        hit = await service.resolve_query(ios_click_signals)

        assert miss.reason == "Device mismatch"
        assert hit.found is True

    @pytest.mark.asyncio
    async def test_exact_fingerprint_lookup(self, service, store):
        signals = SignalTuple(
            network_address="203.0.113.10",
            client_name="Mobile Safari",
            client_version="17.1",
            platform_name="iOS",
            platform_version="17.1",
            device_model="iPhone",
            locale="en-US",
            encoding="gzip",
        )
        click = await service.record_click("link-1", signals=signals)
        assert click.fingerprint == build_fingerprint(signals, ObservationContext.INSTALL)

        result = await service.resolve_query(signals, AppInfo(version="3.1.0"))

        assert result.found is True
        assert await store.get(click.fingerprint) is None

    @pytest.mark.asyncio
    async def test_expired_via_timestamp_check(self, stats, links, clock, ios_click_signals):
        """Records the store has not purged are still rejected once stale"""
        store = InMemoryIntentStore(clock=clock, native_expiry=False)
        service = AttributionService(store=store, stats=stats, links=links, clock=clock)
        click = await service.record_click("link-1", signals=ios_click_signals)

        clock.advance(INTENT_TTL_SECONDS + 1)
        result = await service.resolve_query(ios_click_signals)

        assert result.found is False
        assert result.reason == "Data expired"
        assert await store.get(click.fingerprint) is None

    @pytest.mark.asyncio
    async def test_expired_exact_match_is_deleted(self, stats, links, clock):
        store = InMemoryIntentStore(clock=clock, native_expiry=False)
        service = AttributionService(store=store, stats=stats, links=links, clock=clock)
        signals = SignalTuple(
            network_address="203.0.113.10",
            client_name="Chrome Mobile",
            client_version="120.0",
            platform_name="Android",
            platform_version="14",
        )
        click = await service.record_click("link-1", signals=signals)

        clock.advance(INTENT_TTL_SECONDS + 1)
        result = await service.resolve_query(signals)

        assert result.reason == "Data expired"
        assert await store.get(click.fingerprint) is None
        assert await store.candidates("203.0.113") == []

    @pytest.mark.asyncio
    async def test_within_ttl_still_matches(self, service, clock, ios_click_signals):
        await service.record_click("link-1", signals=ios_click_signals)
        clock.advance(INTENT_TTL_SECONDS - 1)

        assert (await service.resolve_query(ios_click_signals)).found is True

    @pytest.mark.asyncio
    async def test_best_candidate_wins(self, service, clock):
        await service.record_click(
            "android-link",
            signals=SignalTuple(platform_name="Android", platform_version="14", network_address="203.0.113.10"),
        )
        await service.record_click(
            "ios-link",
            signals=SignalTuple(platform_name="iOS", platform_version="17.1", network_address="203.0.113.11"),
        )

        result = await service.resolve_query(
            SignalTuple(platform_name="iOS", platform_version="17.2", network_address="203.0.113.12")
        )

        assert result.found is True
        assert result.record.link_id == "ios-link"

    @pytest.mark.asyncio
    async def test_newest_candidate_breaks_ties(self, service, clock):
        await service.record_click(
            "older",
            signals=SignalTuple(platform_name="iOS", platform_version="17.1", network_address="203.0.113.10"),
        )
        clock.advance(60)
        await service.record_click(
            "newer",
            signals=SignalTuple(platform_name="iOS", platform_version="17.0", network_address="203.0.113.20"),
        )

        result = await service.resolve_query(
            SignalTuple(platform_name="iOS", platform_version="17.3", network_address="203.0.113.30")
        )

        assert result.record.link_id == "newer"

    @pytest.mark.asyncio
    async def test_missing_signals_rejected(self):
        store = AsyncMock()
        service = AttributionService(store=store)

        with pytest.raises(ValidationError, match="deviceInfo is required"):
            await service.resolve_query(None)

        store.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_counts_error_and_raises(self, stats, ios_click_signals):
        store = AsyncMock()
        store.get.side_effect = IntentStoreError("Failed to read intent record", operation="get")
        service = AttributionService(store=store, stats=stats)

        with pytest.raises(IntentStoreError):
            await service.resolve_query(ios_click_signals)

        assert (await stats.get_counts(utc_day()))["error"] == 1

    @pytest.mark.asyncio
    async def test_counter_failure_does_not_change_result(self, store, links, clock, ios_click_signals):
        broken_stats = AsyncMock()
        broken_stats.increment.side_effect = RuntimeError("counter backend down")
        service = AttributionService(store=store, stats=broken_stats, links=links, clock=clock)

        await service.record_click("link-1", signals=ios_click_signals)
        result = await service.resolve_query(ios_click_signals)

        assert result.found is True
        broken_stats.increment.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_threshold_is_configurable(self, store, links, clock, ios_click_signals):
        service = AttributionService(store=store, links=links, clock=clock, threshold=0.3)
        await service.record_click("link-1", signals=ios_click_signals)

        result = await service.resolve_query(
            SignalTuple(platform_name="Android", platform_version="14", network_address="203.0.113.250")
        )

        assert result.found is True
        assert result.record.score == pytest.approx(1 / 3)


class CountingStore(InMemoryIntentStore):
    """In-memory store that counts record reads, batched or not"""

    def __init__(self, clock):
        super().__init__(clock=clock)
        self.reads = 0
        self.batch_sizes = []

    async def get(self, fingerprint):
        self.reads += 1
        return await InMemoryIntentStore.get(self, fingerprint)

    async def get_many(self, fingerprints):
        self.reads += 1
        self.batch_sizes.append(len(fingerprints))
        return [await InMemoryIntentStore.get(self, fp) for fp in fingerprints]


class TestNetworkFallback:
    @pytest.mark.asyncio
    async def test_address_only_query_cannot_claim_intent(self, service, store, ios_click_signals):
        click = await service.record_click("victim-link", content="promo42", signals=ios_click_signals)

        result = await service.resolve_query(SignalTuple(network_address="203.0.113.77"))

        assert result.found is False
        assert result.reason == "No matching fingerprint found"
        assert await store.get(click.fingerprint) is not None

    @pytest.mark.asyncio
    async def test_record_without_platform_is_not_a_candidate(self, service, store):
        click = await service.record_click(
            "link-1", signals=SignalTuple(network_address="203.0.113.10"), is_mobile=True
        )

        result = await service.resolve_query(
            SignalTuple(platform_name="iOS", platform_version="17.1", network_address="203.0.113.77")
        )

        assert result.found is False
        assert result.reason == "No matching fingerprint found"
        assert await store.get(click.fingerprint) is not None

    @pytest.mark.asyncio
    async def test_addressless_query_skips_bucket_scan(self):
        store = AsyncMock()
        store.get.return_value = None
        service = AttributionService(store=store)

        result = await service.resolve_query(SignalTuple(platform_name="iOS", platform_version="17.1"))

        assert result.reason == "No matching fingerprint found"
        store.candidates.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bounded_reads_in_crowded_network(self, stats, links, clock):
        store = CountingStore(clock)
        service = AttributionService(store=store, stats=stats, links=links, clock=clock)
        for host in range(200):
            await service.record_click(
                f"link-{host}",
                signals=SignalTuple(
                    platform_name="iOS", platform_version="17.1", network_address=f"10.0.0.{host}"
                ),
            )
            clock.advance(1)

        result = await service.resolve_query(
            SignalTuple(platform_name="iOS", platform_version="17.2", network_address="10.0.0.1")
        )

        assert result.found is True
        assert result.record.link_id == "link-199"
        # One exact lookup plus one batched candidate read
        assert store.reads == 2
        assert store.batch_sizes == [MAX_BUCKET_CANDIDATES]

    @pytest.mark.asyncio
    async def test_dangling_members_forgotten_in_one_call(self, service, store, ios_click_signals):
        click = await service.record_click("link-1", signals=ios_click_signals)
        store._records.pop(click.fingerprint)

        result = await service.resolve_query(
            SignalTuple(platform_name="iOS", platform_version="17.1", network_address="203.0.113.5")
        )

        assert result.reason == "No matching fingerprint found"
        assert await store.candidates("203.0.113") == []

"""
Attribution Service for deferred deep links

Clicks from mobile browsers are stored as intent records keyed by device
fingerprint. When the app is installed and opened it reports its own
signals; the service looks the intent up, scores the device agreement and
hands the intent back at most once.

Lifecycle of a record:
    NO_RECORD -> (mobile click) -> PENDING
    PENDING -> (query, score >= threshold) -> MATCHED, record deleted
    PENDING -> (query, score < threshold) -> MISMATCH, record kept for retries
    PENDING -> (TTL elapsed) -> EXPIRED, record purged
"""

from typing import Callable, List, Optional, Tuple

from intentrelay.core.exceptions import IntentStoreError, ValidationError
from intentrelay.core.logging import get_logger
from intentrelay.domains.presentation.links import LinkBuilder
from intentrelay.shared.constants.attribution import (
    DEFAULT_CAMPAIGN,
    DEFAULT_CONTENT,
    DEFAULT_SOURCE,
    INTENT_TTL_SECONDS,
    MATCH_THRESHOLD,
    MAX_BUCKET_CANDIDATES,
    OUTCOME_ERROR,
    OUTCOME_SUCCESS,
    REASON_EXPIRED,
    REASON_MISMATCH,
    REASON_NOT_FOUND,
    STATS_TIMEOUT_SECONDS,
)
from intentrelay.shared.helpers import now_ms
from ..models.intent import ClickOutcome, IntentRecord, MatchedIntent, ResolveResult
from ..models.signals import AppInfo, ObservationContext, SignalTuple
from .fingerprint import build_fingerprint, short_fingerprint
from .intent_store import IntentStore, record_bucket
from .matcher import has_enough_evidence, is_match, network_bucket, score_signals
from .stats import StatsRecorder, record_outcome_safely

logger = get_logger(__name__)


class AttributionService:
    """Records link clicks and resolves them for freshly installed apps"""

    def __init__(
        self,
        store: IntentStore,
        stats: Optional[StatsRecorder] = None,
        links: Optional[LinkBuilder] = None,
        clock: Callable[[], int] = now_ms,
        ttl_seconds: int = INTENT_TTL_SECONDS,
        threshold: float = MATCH_THRESHOLD,
        stats_timeout: float = STATS_TIMEOUT_SECONDS,
        max_candidates: int = MAX_BUCKET_CANDIDATES,
    ):
        self.store = store
        self.stats = stats
        self.links = links or LinkBuilder()
        self.clock = clock
        self.ttl_seconds = ttl_seconds
        self.threshold = threshold
        self.stats_timeout = stats_timeout
        self.max_candidates = max_candidates

    # ------------------------------------------------------------------
    # Click side
    # ------------------------------------------------------------------

    async def record_click(
        self,
        link_id: Optional[str],
        content: Optional[str] = None,
        campaign: Optional[str] = None,
        source: Optional[str] = None,
        signals: Optional[SignalTuple] = None,
        is_mobile: Optional[bool] = None,
    ) -> ClickOutcome:
        """
        Store the click's intent for mobile visitors.

        Desktop clicks never touch the store and get a plain content redirect.
        When is_mobile is not supplied it is derived from the platform name.
        """
        if not link_id:
            raise ValidationError("linkId is required", field="link_id")

        content = content or DEFAULT_CONTENT
        campaign = campaign or DEFAULT_CAMPAIGN
        source = source or DEFAULT_SOURCE
        signals = signals or SignalTuple()
        if is_mobile is None:
            is_mobile = signals.is_mobile()

        if not is_mobile:
            logger.debug("Desktop click, redirecting to content", link_id=link_id)
            return ClickOutcome(
                mobile=False,
                record_written=False,
                redirect_target=self.links.content_url(content),
            )

        fingerprint = build_fingerprint(signals, ObservationContext.CLICK)
        record = IntentRecord(
            link_id=link_id,
            content=content,
            campaign=campaign,
            source=source,
            fingerprint=fingerprint,
            signals=signals.captured(),
            created_at=self.clock(),
        )
        await self.store.put(fingerprint, record, self.ttl_seconds)

        logger.info(
            "Stored intent record",
            link_id=link_id,
            fingerprint=short_fingerprint(fingerprint),
            platform=signals.platform_name,
            campaign=campaign,
        )

        return ClickOutcome(
            mobile=True,
            record_written=True,
            redirect_target=self.links.deep_link_url(content, campaign, source),
            fingerprint=fingerprint,
            record=record,
        )

    # ------------------------------------------------------------------
    # Install side
    # ------------------------------------------------------------------

    async def resolve_query(
        self,
        signals: Optional[SignalTuple],
        app_info: Optional[AppInfo] = None,
    ) -> ResolveResult:
        """
        Find and consume the intent record for an installing device.

        Store failures bump the daily error counter and propagate as
        IntentStoreError; every other outcome is a ResolveResult.
        """
        if signals is None:
            raise ValidationError("deviceInfo is required", field="signals")

        app_version = app_info.version if app_info else None
        fingerprint = build_fingerprint(signals, ObservationContext.INSTALL, app_version)

        try:
            result = await self._resolve(fingerprint, signals)
        except IntentStoreError as e:
            logger.error(
                "Intent store failure during resolution",
                fingerprint=short_fingerprint(fingerprint),
                error=str(e),
            )
            await record_outcome_safely(self.stats, OUTCOME_ERROR, timeout=self.stats_timeout)
            raise

        if result.found:
            await record_outcome_safely(self.stats, OUTCOME_SUCCESS, timeout=self.stats_timeout)
        return result

    async def _resolve(self, fingerprint: str, signals: SignalTuple) -> ResolveResult:
        now = self.clock()

        record = await self.store.get(fingerprint)
        if record is not None:
            if record.is_stale(now, self.ttl_seconds):
                await self.store.delete(fingerprint, record_bucket(record))
                logger.info(
                    "Intent record expired",
                    fingerprint=short_fingerprint(fingerprint),
                    age_ms=record.age_ms(now),
                )
                return ResolveResult(found=False, reason=REASON_EXPIRED)
            return await self._decide(fingerprint, record, signals)

        # The install rarely reproduces the click fingerprint byte for byte,
        # so fall back to the newest pending records from the same network.
        # Address-less queries share the "unknown" bucket and are not scanned.
        if not signals.network_address or not signals.platform_name:
            logger.info(
                "Query too sparse for network lookup",
                fingerprint=short_fingerprint(fingerprint),
            )
            return ResolveResult(found=False, reason=REASON_NOT_FOUND)

        candidates, saw_stale = await self._fresh_candidates(signals, now)
        candidates = [
            (candidate, record)
            for candidate, record in candidates
            if has_enough_evidence(record.signals, signals)
        ]
        if not candidates:
            reason = REASON_EXPIRED if saw_stale else REASON_NOT_FOUND
            logger.info(
                "No intent record for query",
                fingerprint=short_fingerprint(fingerprint),
                reason=reason,
            )
            return ResolveResult(found=False, reason=reason)

        best_fingerprint, best_record = max(
            candidates,
            key=lambda item: (score_signals(item[1].signals, signals), item[1].created_at),
        )
        return await self._decide(best_fingerprint, best_record, signals)

    async def _fresh_candidates(
        self, signals: SignalTuple, now: int
    ) -> Tuple[List[Tuple[str, IntentRecord]], bool]:
        bucket = network_bucket(signals.network_address)
        fingerprints = await self.store.candidates(bucket, self.max_candidates)
        if not fingerprints:
            return [], False

        fresh = []
        dangling = []
        saw_stale = False
        records = await self.store.get_many(fingerprints)

        for candidate, record in zip(fingerprints, records):
            if record is None:
                dangling.append(candidate)
                continue
            if record.is_stale(now, self.ttl_seconds):
                await self.store.delete(candidate, bucket)
                saw_stale = True
                continue
            fresh.append((candidate, record))

        if dangling:
            await self.store.forget_candidate(bucket, *dangling)
        return fresh, saw_stale

    async def _decide(
        self, fingerprint: str, record: IntentRecord, signals: SignalTuple
    ) -> ResolveResult:
        score = score_signals(record.signals, signals)

        if not is_match(score, self.threshold):
            logger.info(
                "Device mismatch",
                fingerprint=short_fingerprint(fingerprint),
                score=round(score, 3),
                threshold=self.threshold,
            )
            return ResolveResult(found=False, reason=REASON_MISMATCH, score=score)

        # One-shot: a matched intent is never handed out twice
        await self.store.delete(fingerprint, record_bucket(record))

        logger.info(
            "Deferred deep link matched",
            link_id=record.link_id,
            fingerprint=short_fingerprint(fingerprint),
            score=round(score, 3),
        )

        return ResolveResult(
            found=True,
            record=MatchedIntent(
                link_id=record.link_id,
                content=record.content,
                campaign=record.campaign,
                source=record.source,
                score=score,
                timestamp=record.created_at,
            ),
        )

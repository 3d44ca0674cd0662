"""SKU matcher: maps food items to cached platform SKUs.

Pipeline per food:
1. Normalize the food name and aliases into tokens and keywords
2. Build the deduplicated list of search queries
3. Read candidates for every query (bounded fan-out, gathered in query order)
4. Deduplicate candidates by (platform, platform_product_id)
5. Score every candidate
6. Drop candidates below min_confidence, rank, cap at max_results
7. Explain the surviving candidates
"""

import contextvars
import logging
import threading
import time
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from config import Settings, get_settings
from platforms.ports import EcommercePlatform, UnknownPlatformError
from platforms.registry import PlatformAdapterRegistry, build_default_registry
from .candidates import dedupe_candidates, filter_and_rank
from .corrections import CorrectionRecorder, LoggingCorrectionSink
from .explainer import explain_match
from .models import (
    CorrectionRecord,
    FoodItem,
    MatchConfig,
    PlatformProductRecord,
    ScoredCandidate,
    SKUMatchResult,
)
from .normalizer import normalize_food
from .ports import (
    CatalogFilters,
    CatalogReaderPort,
    CorrectionSinkPort,
    MatcherError,
    MatcherPort,
    MatchCancelledError,
    MatchConfigError,
)
from .query_builder import build_search_queries
from .scorer import MatchScorer


logger = logging.getLogger(__name__)

# How often a waiting read re-checks the cancel event (seconds)
CANCEL_POLL_INTERVAL = 0.05


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)



class _CatalogRead:
    """One catalog query submitted to the read pool."""

    def __init__(self, query: str):
        self.query = query
        self.started_at: Optional[float] = None

    def run(self, reader: CatalogReaderPort, filters: CatalogFilters) -> List[PlatformProductRecord]:
        self.started_at = time.monotonic()
        return reader.search(self.query, filters)


class SkuMatcher(MatcherPort):
    """Matcher over a pluggable catalog reader.

    One instance is meant to be shared: it owns a bounded pool for catalog
    reads and a background thread for corrections. Call close() (or use it as
    a context manager) to release both.
    """

    def __init__(
        self,
        catalog_reader: CatalogReaderPort,
        registry: Optional[PlatformAdapterRegistry] = None,
        scorer: Optional[MatchScorer] = None,
        correction_sink: Optional[CorrectionSinkPort] = None,
        settings: Optional[Settings] = None,
        default_config: Optional[MatchConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize matcher.

        Args:
            catalog_reader: Source of cached platform products
            registry: Platform adapter registry (defaults to all platforms)
            scorer: Confidence scorer (defaults to MatchScorer(settings))
            correction_sink: Where corrections go (defaults to the log)
            settings: Settings for pool sizes, timeouts and defaults
            default_config: Config applied when a call passes none
            clock: Returns the current time (aware UTC) for expiry checks
        """
        settings = settings or get_settings()

        self.catalog_reader = catalog_reader
        self.registry = registry if registry is not None else build_default_registry(settings)
        self.scorer = scorer or MatchScorer(settings)
        self.default_config = default_config or MatchConfig.from_settings(settings)
        self.default_config.validate()

        self.batch_workers = max(1, settings.MATCH_BATCH_WORKERS)
        self.read_timeout = settings.CATALOG_READ_TIMEOUT_SECONDS
        self._clock = clock or _utcnow

        self._read_executor = ThreadPoolExecutor(
            max_workers=max(1, settings.CATALOG_MAX_CONCURRENT_READS),
            thread_name_prefix="sku-catalog-read",
        )
        self._recorder = CorrectionRecorder(correction_sink or LoggingCorrectionSink())

    def __enter__(self) -> "SkuMatcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the read pool and flush pending corrections.

        Reads still running after a timeout are not waited for.
        """
        self._read_executor.shutdown(wait=False, cancel_futures=True)
        self._recorder.close(wait=True)

    def match_food(
        self,
        food: FoodItem,
        config: Optional[Union[MatchConfig, Mapping[str, Any]]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[SKUMatchResult]:
        """Match one food item to catalog SKUs.

        Args:
            food: Food to match
            config: MatchConfig or mapping of overrides over the defaults
            cancel_event: Set to abandon the match

        Returns:
            Results sorted by confidence, highest first

        Raises:
            MatchConfigError: If config is malformed or names an unknown platform
            MatchCancelledError: If cancel_event was set
            MatcherError: If matching fails (code MATCH_FAILED)
        """
        resolved = self._resolve_config(config)
        return self._match_checked(food, resolved, cancel_event)

    def match_foods(
        self,
        foods: Sequence[FoodItem],
        config: Optional[Union[MatchConfig, Mapping[str, Any]]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[str, List[SKUMatchResult]]:
        """Match several foods on a bounded worker pool.

        A food whose match fails gets an empty list; the batch never aborts
        because of one food.

        Args:
            foods: Foods to match
            config: MatchConfig or mapping of overrides, shared by all foods
            cancel_event: Set to cancel queued foods and stop running ones

        Returns:
            Dict of food id to results, in input order

        Raises:
            MatchConfigError: If config is malformed or names an unknown platform
            MatchCancelledError: If cancel_event was set during the batch
        """
        resolved = self._resolve_config(config)
        foods = list(foods)
        results: Dict[str, List[SKUMatchResult]] = {}
        if not foods:
            return results

        workers = min(self.batch_workers, len(foods))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sku-batch") as executor:
            futures = [
                executor.submit(
                    contextvars.copy_context().run,
                    self._match_isolated, food, resolved, cancel_event,
                )
                for food in foods
            ]
            try:
                for food, future in zip(foods, futures):
                    results[food.id] = future.result()
            except MatchCancelledError:
                for future in futures:
                    future.cancel()
                logger.info(f"Batch match cancelled after {len(results)} of {len(foods)} foods")
                raise

        logger.info(
            f"Batch matched {len(foods)} foods, "
            f"{sum(1 for matches in results.values() if matches)} with matches"
        )
        return results

    def record_correction(
        self,
        food_id: str,
        platform_product_id: str,
        platform: Union[EcommercePlatform, str],
        is_correct: bool,
    ) -> None:
        """Record a human judgment about a previous match.

        The correction is appended to the sink in the background; this call
        does not wait for it and matching results are not affected.

        Raises:
            MatchConfigError: If platform is not a registered platform
        """
        adapter = self._confirm_platform(platform)
        record = CorrectionRecord(
            food_id=food_id,
            platform_product_id=platform_product_id,
            platform=adapter.platform,
            is_correct=bool(is_correct),
            recorded_at=self._clock(),
        )
        self._recorder.submit(record)

    def _resolve_config(
        self,
        config: Optional[Union[MatchConfig, Mapping[str, Any]]],
    ) -> MatchConfig:
        resolved = self.default_config.merged(config)
        if resolved.platforms is not None:
            for platform in sorted(resolved.platforms, key=lambda item: item.value):
                self._confirm_platform(platform)
        return resolved

    def _confirm_platform(self, platform: Union[EcommercePlatform, str]):
        try:
            return self.registry.adapter_for(platform)
        except UnknownPlatformError as e:
            raise MatchConfigError(
                str(e),
                details={"platform": str(e.platform), "available": e.available},
                code="UNKNOWN_PLATFORM",
            ) from e

    def _match_isolated(
        self,
        food: FoodItem,
        config: MatchConfig,
        cancel_event: Optional[threading.Event],
    ) -> List[SKUMatchResult]:
        """Batch item: any failure other than cancellation yields []."""
        try:
            return self._match_checked(food, config, cancel_event)
        except MatchCancelledError:
            raise
        except Exception as e:
            logger.error(
                f"Matching failed for food {food.id}, returning no matches: {e}",
                exc_info=True,
                extra={"food_id": food.id},
            )
            return []

    def _match_checked(
        self,
        food: FoodItem,
        config: MatchConfig,
        cancel_event: Optional[threading.Event],
    ) -> List[SKUMatchResult]:
        try:
            return self._match(food, config, cancel_event)
        except (MatchConfigError, MatchCancelledError):
            raise
        except Exception as e:
            food_id = getattr(food, "id", None)
            raise MatcherError(
                f"Matching failed for food {food_id}: {e}",
                details={"food_id": food_id, "original_error": e},
            ) from e

    def _match(
        self,
        food: FoodItem,
        config: MatchConfig,
        cancel_event: Optional[threading.Event],
    ) -> List[SKUMatchResult]:
        self._check_cancelled(cancel_event, food)

        normalized = normalize_food(food)
        queries = build_search_queries(normalized)
        if not queries:
            logger.info(f"No search queries for food {food.id}", extra={"food_id": food.id})
            return []

        filters = CatalogFilters.from_config(config, now=self._clock())
        records = self._read_candidates(food, queries, filters, cancel_event)
        candidates = dedupe_candidates(records)

        self._check_cancelled(cancel_event, food)

        scored = [
            ScoredCandidate(
                product=product,
                breakdown=self.scorer.score(normalized, food.category, product),
            )
            for product in candidates
        ]
        ranked = filter_and_rank(scored, config)
        results = [explain_match(normalized, candidate) for candidate in ranked]

        logger.info(
            f"Matched food {food.id}: {len(queries)} queries, "
            f"{len(candidates)} candidates, {len(results)} results",
            extra={"food_id": food.id},
        )
        return results

    def _read_candidates(
        self,
        food: FoodItem,
        queries: List[str],
        filters: CatalogFilters,
        cancel_event: Optional[threading.Event],
    ) -> List[PlatformProductRecord]:
        """Issue all queries concurrently and concatenate results in query order."""
        reads = [_CatalogRead(query) for query in queries]
        futures = [
            self._read_executor.submit(
                contextvars.copy_context().run,
                read.run, self.catalog_reader, filters,
            )
            for read in reads
        ]
        records: List[PlatformProductRecord] = []
        try:
            for read, future in zip(reads, futures):
                records.extend(self._await_read(food, read, future, cancel_event))
        finally:
            for future in futures:
                future.cancel()
        return records

    def _await_read(
        self,
        food: FoodItem,
        read: _CatalogRead,
        future: Future,
        cancel_event: Optional[threading.Event],
    ) -> List[PlatformProductRecord]:
        """Wait for one read; a failed or timed-out read yields no records.

        The timeout runs from when the read starts on a pool thread, so time
        spent queued behind other reads does not count against it.
        """
        query = read.query
        while True:
            self._check_cancelled(cancel_event, food)
            started_at = read.started_at
            if started_at is None:
                step = CANCEL_POLL_INTERVAL
            else:
                remaining = started_at + self.read_timeout - time.monotonic()
                if remaining <= 0:
                    future.cancel()
                    logger.warning(
                        f"Catalog read timed out after {self.read_timeout}s for query '{query}'",
                        extra={"food_id": food.id, "query": query},
                    )
                    return []
                step = remaining if cancel_event is None else min(remaining, CANCEL_POLL_INTERVAL)
            done, _ = wait([future], timeout=step)
            if done:
                break

        try:
            return list(future.result())
        except CancelledError:
            return []
        except Exception as e:
            logger.warning(
                f"Catalog read failed for query '{query}': {e}",
                extra={"food_id": food.id, "query": query},
            )
            return []

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event], food: FoodItem) -> None:
        if cancel_event is not None and cancel_event.is_set():
            food_id = getattr(food, "id", None)
            raise MatchCancelledError(
                f"Match cancelled for food {food_id}",
                details={"food_id": food_id},
            )

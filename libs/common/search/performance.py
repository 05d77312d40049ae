"""Debounced, cached and measured search.

SearchPerformance wraps a caller-supplied `async search_fn(query) -> T`:

- set_search_query() feeds a debouncer; once input pauses the query is
  committed and, when long enough, resolved through the QueryClient.
- On every resolution the wrapper's own TTL cache is consulted first; only a
  miss reaches search_fn. Successful results are cached, failures are not.
- Every attempt (hit, miss or failure) is timed into the metrics window.

The instance owns its cache, metrics and debounce timer. Call dispose() (or
use it as an async context manager) when the owner goes away.
"""

import asyncio
import time
from dataclasses import dataclass, fields, replace
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from libs.common.logging import get_logger
from libs.common.search.cache import SearchCache, normalize_query_key
from libs.common.search.debounce import Debouncer
from libs.common.search.metrics import MetricsAccumulator, SearchMetrics, SearchOutcome
from libs.common.search.query_client import QueryClient, QueryResult, QueryStatus

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SearchPerformanceOptions:
    debounce_ms: int = 300
    cache_time: float = 5 * 60.0  # seconds
    stale_time: float = 2 * 60.0  # seconds
    min_search_length: int = 1
    max_cache_size: int = 100
    retry: int = 2

    @classmethod
    def from_settings(cls, settings: Any, **overrides: Any) -> "SearchPerformanceOptions":
        values = {
            "debounce_ms": settings.SEARCH_DEBOUNCE_MS,
            "cache_time": settings.SEARCH_CACHE_TTL_SECONDS,
            "stale_time": settings.SEARCH_STALE_TIME_SECONDS,
            "min_search_length": settings.SEARCH_MIN_LENGTH,
            "max_cache_size": settings.SEARCH_CACHE_MAX_SIZE,
            "retry": settings.SEARCH_RETRY_COUNT,
        }
        values.update(overrides)
        return cls(**values)


SUGGESTION_OPTIONS = SearchPerformanceOptions(debounce_ms=150, min_search_length=2)


def suggestion_options(
    options: Optional[SearchPerformanceOptions] = None,
) -> SearchPerformanceOptions:
    """Layer `options` over SUGGESTION_OPTIONS.

    Fields the caller left at the plain SearchPerformanceOptions default keep
    the suggestion default, so `SearchPerformanceOptions(retry=0)` still
    debounces for 150 ms and needs two characters.
    """
    if options is None:
        return SUGGESTION_OPTIONS
    plain = SearchPerformanceOptions()
    changed = {
        field.name: getattr(options, field.name)
        for field in fields(options)
        if getattr(options, field.name) != getattr(plain, field.name)
    }
    return replace(SUGGESTION_OPTIONS, **changed)


class SearchPerformance(Generic[T]):
    def __init__(
        self,
        search_fn: Callable[[str], Awaitable[T]],
        options: Optional[SearchPerformanceOptions] = None,
        *,
        name: str = "search",
        query_client: Optional[QueryClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.options = options or SearchPerformanceOptions()
        self.name = name
        self._search_fn = search_fn
        self._cache: SearchCache[T] = SearchCache(
            max_size=self.options.max_cache_size,
            ttl_seconds=self.options.cache_time,
            clock=clock,
        )
        self._metrics = MetricsAccumulator()
        self._debouncer = Debouncer(self.options.debounce_ms / 1000, self._commit)
        self._query_client = query_client or QueryClient(
            stale_time=self.options.stale_time,
            cache_time=self.options.cache_time,
            retry=self.options.retry,
        )
        self._debounced_query = ""
        self._result: QueryResult[T] = QueryResult()
        # Bumped on every commit; a refresh only publishes if it is still current
        self._generation = 0
        # Bumped by invalidate(); a miss only caches if nothing invalidated meanwhile
        self._cache_epoch = 0
        self._refresh_task: Optional[asyncio.Task] = None
        self._disposed = False

    # ── Exposed state ───────────────────────────────────────────────

    @property
    def debounced_query(self) -> str:
        return self._debounced_query

    @property
    def metrics(self) -> SearchMetrics:
        return self._metrics.snapshot

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    @property
    def result(self) -> QueryResult[T]:
        return self._result

    @property
    def data(self) -> Optional[T]:
        return self._result.data

    @property
    def error(self) -> Optional[BaseException]:
        return self._result.error

    @property
    def is_loading(self) -> bool:
        return self._result.is_loading

    @property
    def is_fetching(self) -> bool:
        return self._result.is_fetching

    @property
    def is_searching(self) -> bool:
        return self._result.is_fetching

    @property
    def has_results(self) -> bool:
        return bool(self._result.data)

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ── Operations ──────────────────────────────────────────────────

    def set_search_query(self, raw: str) -> None:
        """Feed raw input; the query is committed once typing pauses."""
        if self._disposed:
            raise RuntimeError(f"{self.name} search has been disposed")
        self._debouncer.submit(raw)

    async def settle(self) -> QueryResult[T]:
        """Wait for the refresh started by the latest commit, if any."""
        task = self._refresh_task
        if task is not None:
            await asyncio.shield(task)
        return self._result

    async def search(self, query: str) -> QueryResult[T]:
        """Resolve `query` through the query client (no debounce)."""
        if not self.is_searchable(query):
            return QueryResult()
        return await self._query_client.fetch(
            self._query_key(query), lambda: self._cached_search(query)
        )

    async def prefetch(self, query: str) -> None:
        """Warm the cache for `query`. Never raises."""
        if not self.is_searchable(query):
            return
        try:
            await self._cached_search(query)
        except Exception as exc:
            logger.debug(f"Prefetch failed for query {query!r}: {exc}")

    def invalidate(self) -> None:
        """Drop cached results, keeping metrics, after the underlying data changed.

        Searches already running when this is called return their result to
        their callers but do not cache it.
        """
        self._cache_epoch += 1
        self._cache.clear()
        self._query_client.invalidate(self._owns_key)
        logger.debug(f"Invalidated {self.name} search results")

    def clear_cache(self) -> None:
        """Empty the cache and reset metrics; the next query is a miss."""
        self.invalidate()
        self._metrics.reset()
        logger.info(f"Cleared {self.name} search cache")

    def dispose(self) -> None:
        """Cancel the pending debounce timer and drop cached state."""
        if self._disposed:
            return
        self._disposed = True
        self._debouncer.cancel()
        # In-flight fetches run to completion but can no longer publish
        self._generation += 1
        self._cache.clear()
        self._query_client.invalidate(self._owns_key)

    async def __aenter__(self) -> "SearchPerformance[T]":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.dispose()

    def is_searchable(self, query: str) -> bool:
        return len(query.strip()) >= self.options.min_search_length

    # ── Internals ───────────────────────────────────────────────────

    def _query_key(self, query: str) -> tuple[str, str]:
        return (self.name, query)

    def _owns_key(self, key: Any) -> bool:
        return isinstance(key, tuple) and len(key) == 2 and key[0] == self.name

    def _commit(self, query: str) -> None:
        if self._disposed:
            return
        self._debounced_query = query
        self._generation += 1
        if not self.is_searchable(query):
            self._result = QueryResult()
            self._refresh_task = None
            return

        previous = self._query_client.get_query_data(self._query_key(query))
        self._result = QueryResult(
            status=QueryStatus.SUCCESS if previous.is_success else QueryStatus.LOADING,
            data=previous.data,
            is_fetching=True,
            updated_at=previous.updated_at,
        )
        self._refresh_task = asyncio.ensure_future(
            self._refresh(query, self._generation)
        )

    async def _refresh(self, query: str, generation: int) -> None:
        result = await self.search(query)
        if generation != self._generation:
            logger.debug(f"Discarding superseded {self.name} result for {query!r}")
            return
        self._result = result

    async def _cached_search(self, query: str) -> T:
        started = time.perf_counter()
        key = normalize_query_key(query)
        epoch = self._cache_epoch

        entry = self._cache.lookup(key)
        if entry is not None:
            self._metrics.record(_elapsed_ms(started), SearchOutcome.HIT)
            return entry.value

        try:
            value = await self._search_fn(query)
        except Exception:
            self._metrics.record(_elapsed_ms(started), SearchOutcome.FAILURE)
            raise

        if epoch == self._cache_epoch:
            self._cache.insert(key, value)
        self._metrics.record(_elapsed_ms(started), SearchOutcome.MISS)
        return value


class SearchSuggestions:
    """Faster-debounced SearchPerformance for type-ahead suggestion lists."""

    def __init__(
        self,
        get_suggestions_fn: Callable[[str], Awaitable[list[str]]],
        options: Optional[SearchPerformanceOptions] = None,
        **kwargs: Any,
    ):
        kwargs.setdefault("name", "suggestions")
        self.performance: SearchPerformance[list[str]] = SearchPerformance(
            get_suggestions_fn, suggestion_options(options), **kwargs
        )
        self._suggestions: list[str] = []

    def get_suggestions(self, raw: str) -> None:
        self.performance.set_search_query(raw)

    async def suggest(self, query: str) -> list[str]:
        result = await self.performance.search(query)
        if result.error is not None:
            raise result.error
        return result.data or []

    @property
    def suggestions(self) -> list[str]:
        # Keep showing the previous list while a new one loads
        if self.performance.data is not None:
            self._suggestions = self.performance.data
        return self._suggestions

    @property
    def is_loading_suggestions(self) -> bool:
        return self.performance.is_loading

    @property
    def suggestions_error(self) -> Optional[BaseException]:
        return self.performance.error

    @property
    def debounced_query(self) -> str:
        return self.performance.debounced_query

    def dispose(self) -> None:
        self.performance.dispose()


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000

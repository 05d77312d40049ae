"""
Search performance package.

Modules:
- cache: bounded TTL cache keyed by normalized query
- metrics: rolling latency window and cache hit-rate accounting
- debounce: asyncio timer that commits input once it pauses
- query_client: keyed request cache with de-duplication and retries
- performance: SearchPerformance / SearchSuggestions wrappers tying it together
- utils: normalization, fuzzy matching and relevance scoring helpers

Usage:
    from libs.common.search import SearchPerformance, SearchPerformanceOptions

    search = SearchPerformance(search_volunteers, SearchPerformanceOptions())
    result = await search.search("coach")
    print(search.metrics.cache_hit_rate)
"""

from libs.common.search.cache import CacheEntry, SearchCache, normalize_query_key
from libs.common.search.debounce import Debouncer
from libs.common.search.metrics import MetricsAccumulator, SearchMetrics
from libs.common.search.performance import (
    SearchPerformance,
    SearchPerformanceOptions,
    SearchSuggestions,
)
from libs.common.search.query_client import QueryClient, QueryResult, QueryStatus

__all__ = [
    "CacheEntry",
    "Debouncer",
    "MetricsAccumulator",
    "QueryClient",
    "QueryResult",
    "QueryStatus",
    "SearchCache",
    "SearchMetrics",
    "SearchPerformance",
    "SearchPerformanceOptions",
    "SearchSuggestions",
    "normalize_query_key",
]

"""Latency and hit-rate accounting for cached search."""

import enum
from dataclasses import asdict, dataclass

# Rolling window bounds: once the window passes WINDOW_LIMIT samples it is cut
# back to the most recent WINDOW_KEEP.
WINDOW_LIMIT = 100
WINDOW_KEEP = 50


class SearchOutcome(str, enum.Enum):
    HIT = "hit"
    MISS = "miss"
    FAILURE = "failure"


@dataclass(frozen=True)
class SearchMetrics:
    """Read-only snapshot. Times are milliseconds, hit rate is a percentage."""

    search_count: int = 0
    average_response_time: float = 0.0
    cache_hit_rate: float = 0.0
    last_search_time: float = 0.0

    def as_dict(self) -> dict:
        return asdict(self)


class MetricsAccumulator:
    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.total_searches = 0
        self.cache_hits = 0
        self.failures = 0
        self.samples: list[float] = []
        self._snapshot = SearchMetrics()

    @property
    def snapshot(self) -> SearchMetrics:
        return self._snapshot

    def record(self, elapsed_ms: float, outcome: SearchOutcome) -> SearchMetrics:
        self.total_searches += 1
        if outcome == SearchOutcome.HIT:
            self.cache_hits += 1
        elif outcome == SearchOutcome.FAILURE:
            self.failures += 1

        self.samples.append(elapsed_ms)
        if len(self.samples) > WINDOW_LIMIT:
            self.samples = self.samples[-WINDOW_KEEP:]

        self._snapshot = SearchMetrics(
            search_count=self.total_searches,
            average_response_time=sum(self.samples) / len(self.samples),
            cache_hit_rate=(self.cache_hits / self.total_searches) * 100,
            last_search_time=elapsed_ms,
        )
        return self._snapshot

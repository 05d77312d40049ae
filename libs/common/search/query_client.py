"""Keyed request cache for async producers.

Plays the part a client-side data-fetching library plays in a browser: one
in-flight fetch per key, results served without refetching while younger than
`stale_time`, entries dropped after `cache_time` without use, and failed
fetches retried with exponential backoff unless the failure is a client error.
Failures are captured in the returned QueryResult rather than raised.
"""

import asyncio
import enum
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, Hashable, Optional, TypeVar

from libs.common.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

MAX_RETRY_DELAY = 30.0


class QueryStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    status: QueryStatus = QueryStatus.IDLE
    data: Optional[T] = None
    error: Optional[BaseException] = None
    is_fetching: bool = False
    updated_at: float = 0.0

    @property
    def is_loading(self) -> bool:
        return self.status == QueryStatus.LOADING

    @property
    def is_success(self) -> bool:
        return self.status == QueryStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR


@dataclass
class _QueryState:
    result: QueryResult
    last_used: float = field(default=0.0)


def default_retry_delay(attempt_index: int) -> float:
    """1s, 2s, 4s, ... capped at 30s."""
    return min(1.0 * 2**attempt_index, MAX_RETRY_DELAY)


def is_client_error(exc: BaseException) -> bool:
    """True for 4xx failures (HTTPException, httpx.HTTPStatusError and friends)."""
    status_code = getattr(exc, "status_code", None)
    if status_code is None:
        response = getattr(exc, "response", None)
        status_code = getattr(response, "status_code", None)
    return isinstance(status_code, int) and 400 <= status_code < 500


class QueryClient:
    def __init__(
        self,
        *,
        stale_time: float = 120.0,
        cache_time: float = 300.0,
        retry: int = 2,
        retry_delay: Callable[[int], float] = default_retry_delay,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.stale_time = stale_time
        self.cache_time = cache_time
        self.retry = retry
        self.retry_delay = retry_delay
        self._clock = clock
        self._sleep = sleep
        self._queries: dict[Hashable, _QueryState] = {}
        self._in_flight: dict[Hashable, asyncio.Task] = {}

    def get_query_data(self, key: Hashable) -> QueryResult:
        state = self._queries.get(key)
        return state.result if state else QueryResult()

    def is_fetching(self, key: Hashable) -> bool:
        return key in self._in_flight

    async def fetch(
        self, key: Hashable, producer: Callable[[], Awaitable[T]]
    ) -> QueryResult[T]:
        """Resolve `key`, calling `producer` only when no fresh result exists."""
        now = self._clock()
        self._collect_garbage(now)

        state = self._queries.get(key)
        if (
            state is not None
            and state.result.is_success
            and now - state.result.updated_at < self.stale_time
        ):
            state.last_used = now
            return state.result

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, producer))
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._release(key, done))
        # A cancelled waiter must not cancel the fetch other waiters share
        return await asyncio.shield(task)

    def invalidate(self, predicate: Optional[Callable[[Hashable], bool]] = None) -> int:
        """Drop cached results (all, or those whose key matches `predicate`).

        Matching fetches still in flight are detached: their waiters get the
        result, but it is not stored and the next fetch starts afresh.
        """
        keys = [k for k in self._queries if predicate is None or predicate(k)]
        for key in keys:
            del self._queries[key]
        for key in [k for k in self._in_flight if predicate is None or predicate(k)]:
            del self._in_flight[key]
        return len(keys)

    def clear(self) -> None:
        self._queries.clear()

    async def _run(self, key: Hashable, producer: Callable[[], Awaitable[T]]):
        previous = self._queries.get(key)
        previous_data = previous.result.data if previous else None
        attempt = 0
        while True:
            try:
                data = await producer()
            except Exception as exc:
                if attempt >= self.retry or is_client_error(exc):
                    logger.warning(
                        f"Query {key!r} failed after {attempt + 1} attempt(s): {exc}"
                    )
                    return self._store(
                        key,
                        QueryResult(
                            status=QueryStatus.ERROR,
                            data=previous_data,
                            error=exc,
                            updated_at=self._clock(),
                        ),
                    )
                delay = self.retry_delay(attempt)
                attempt += 1
                logger.debug(f"Retrying query {key!r} in {delay:.1f}s ({exc})")
                await self._sleep(delay)
                continue

            return self._store(
                key,
                QueryResult(
                    status=QueryStatus.SUCCESS, data=data, updated_at=self._clock()
                ),
            )

    def _store(self, key: Hashable, result: QueryResult) -> QueryResult:
        if self._in_flight.get(key) is not asyncio.current_task():
            logger.debug(f"Not storing detached result for {key!r}")
            return result
        self._queries[key] = _QueryState(result=result, last_used=self._clock())
        return result

    def _release(self, key: Hashable, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    def _collect_garbage(self, now: float) -> None:
        expired = [
            key
            for key, state in self._queries.items()
            if now - state.last_used >= self.cache_time and key not in self._in_flight
        ]
        for key in expired:
            del self._queries[key]

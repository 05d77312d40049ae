"""Debounce rapidly changing input on the running event loop."""

import asyncio
from typing import Any, Callable, Optional


class Debouncer:
    """
    Call `callback(value)` once input has been quiet for `delay` seconds.

    Each submit() cancels the pending timer and starts a new one, so at most
    one timer is ever outstanding. Must be used from within a running loop.
    """

    def __init__(self, delay: float, callback: Callable[[Any], None]):
        self.delay = delay
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def submit(self, value: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: Any) -> None:
        self._handle = None
        self._callback(value)

# COMPONENT: DEBOUNCED SEARCH COMMIT
# REQUIREMENTS SATISFIED: quiescence window between keystrokes and search filter commits
"""
coi_tracker/utils/debounce.py

Delays a callback until input has been quiet for a fixed window.

Each `submit` cancels the pending delayed task (if any) and schedules a
fresh one, so of several values submitted within overlapping windows only
the last is ever committed. Timers come from an injectable factory with the
`threading.Timer` signature, which lets tests fire them by hand.
"""
import threading
from typing import Any, Callable, Optional

from .logging import get_logger

logger = get_logger("debounce")

TimerFactory = Callable[[float, Callable[[], None]], Any]


class Debouncer:
    def __init__(
        self,
        delay_s: float,
        callback: Callable[[Any], None],
        timer_factory: TimerFactory = threading.Timer,
    ):
        self.delay_s = delay_s
        self._callback = callback
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer = None
        self._generation = 0
        self._pending: Optional[tuple] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def submit(self, value: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (value,)
            self._generation += 1
            generation = self._generation
            timer = self._timer_factory(self.delay_s, lambda: self._fire(generation))
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._timer = timer
        timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A superseded timer that was already running must not commit
            if generation != self._generation or self._pending is None:
                return
            (value,) = self._pending
            self._pending = None
            self._timer = None
        self._callback(value)

    def flush(self) -> bool:
        """Commit the pending value now. Returns False if nothing was pending."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if self._pending is None:
                return False
            (value,) = self._pending
            self._pending = None
        self._callback(value)
        return True

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None


class DebouncedSearch:
    """Feeds raw search text into a store's `searchQuery` filter after the quiescence window."""

    def __init__(self, store, delay_ms: int = 300, timer_factory: TimerFactory = threading.Timer):
        self.store = store
        self.text = store.filters.search_query
        self._debouncer = Debouncer(delay_ms / 1000.0, self._commit, timer_factory=timer_factory)

    def type(self, text: str) -> None:
        self.text = text
        self._debouncer.submit(text)

    def _commit(self, text: str) -> None:
        logger.debug("Committing search query %r", text)
        self.store.set_filters(search_query=text)

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def flush(self) -> bool:
        return self._debouncer.flush()

    def cancel(self) -> None:
        self._debouncer.cancel()

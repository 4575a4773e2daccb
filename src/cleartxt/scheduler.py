"""
Virtual-clock timer scheduling.

Everything in the core runs on one thread. Timers are requested through
``call_later(delay, callback, *args)``, which returns a handle with
``cancel()``; this is the same contract as ``asyncio`` event loops, so a
loop can be handed to the controller directly. ``ManualScheduler`` is the
in-process implementation: the host advances it from its own event loop and
tests advance it by hand.
"""
import heapq
import itertools
from typing import Any, Callable, List, Optional, Protocol, Tuple

from cleartxt.logs import get_logger

log = get_logger("scheduler")

class Cancellable(Protocol):
    def cancel(self) -> None: ...

class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Cancellable: ...

class TimerHandle:
    """A pending callback. Cancelling is idempotent and safe after it fired."""

    __slots__ = ("when", "callback", "args", "cancelled", "fired")

    def __init__(self, when: float, callback: Callable[..., Any], args: Tuple[Any, ...]):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "fired" if self.fired else "pending"
        name = getattr(self.callback, "__name__", repr(self.callback))
        return f"<TimerHandle {name} at {self.when:.3f} {state}>"

class ManualScheduler:
    """Timers on a clock that only moves when advance()/advance_to() is called."""

    def __init__(self, now: float = 0.0):
        self.now = now
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle(self.now + max(0.0, delay), callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def advance_to(self, when: float) -> int:
        """
        Move the clock forward to ``when``, firing due timers in order.

        Callbacks see ``now`` set to their own due time, and timers they arm
        fire in the same call if they fall due before ``when``. Moving the
        clock backwards is ignored.

        Returns:
            Number of callbacks run.
        """
        fired = 0
        while self._queue and self._queue[0][0] <= when:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = max(self.now, due)
            handle.fired = True
            handle.callback(*handle.args)
            fired += 1
        self.now = max(self.now, when)
        return fired

    def advance(self, seconds: float) -> int:
        return self.advance_to(self.now + seconds)

    def pending(self) -> List[TimerHandle]:
        """Live timers, soonest first."""
        return [h for _, _, h in sorted(self._queue) if h.active]

    def next_due(self) -> Optional[float]:
        live = self.pending()
        return live[0].when if live else None

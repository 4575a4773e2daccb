from typing import Callable, List, Optional

from cleartxt.logs import get_logger
from cleartxt.scheduler import Cancellable, Scheduler

log = get_logger("notify")

NOTICE_DURATION = 3.0

class Notifier:
    """
    Transient error banner.

    Only one message is shown at a time; showing a new one replaces the old
    message and restarts the hide timer.
    """

    def __init__(self, scheduler: Scheduler, duration: float = NOTICE_DURATION):
        self.scheduler = scheduler
        self.duration = duration
        self.message = ""
        self.visible = False
        self._timer: Optional[Cancellable] = None
        self._listeners: List[Callable[["Notifier"], None]] = []

    def subscribe(self, callback: Callable[["Notifier"], None]) -> None:
        self._listeners.append(callback)

    def show(self, message: str) -> None:
        self._cancel_timer()
        self.message = message
        self.visible = True
        log.warning(message)
        self._timer = self.scheduler.call_later(self.duration, self.hide)
        self._changed()

    def hide(self) -> None:
        self._cancel_timer()
        if not self.visible and not self.message:
            return
        self.visible = False
        self.message = ""
        self._changed()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _changed(self) -> None:
        for callback in self._listeners:
            callback(self)

"""
GestureController - turns raw pointer, wheel and key events into list edits.

One press/move/release stream is classified into a tap, double tap, long
press (then reorder), horizontal swipe or pull-down. While a gesture is in
flight its visual state (swipe offset, pull distance) lives only in the
session object; it reaches the list model only when the gesture commits on
release, except for reordering, which is applied row by row as the pointer
crosses rows.

Sessions are a tagged variant per phase. A press creates one, release or
cancel() discards it, and a phase change replaces it with the next variant
carrying the same anchor.
"""
from enum import Enum
from typing import ClassVar, Optional, Protocol, Union

from pydantic import BaseModel, Field

from cleartxt.config import Settings
from cleartxt.layout import (
    EditorRequest,
    Frame,
    Geometry,
    build_frame,
    clamp_scroll,
    editor_request,
    hit_test,
    scroll_into_view,
)
from cleartxt.listmodel import ListModel, ModelEvent
from cleartxt.logs import get_logger
from cleartxt.models import Task
from cleartxt.notify import Notifier
from cleartxt.scheduler import Cancellable, Scheduler

log = get_logger("gestures")

LONG_PRESS_DELAY = 0.3
CLICK_DELAY = 0.3

TAP_SLOP = 5            # movement below this (both axes) is still a tap
DRAG_THRESHOLD = 10     # swipe start, and row-crossing while reordering
PULL_SWITCH_DY = 20     # a downward drag from a row turns into a pull...
PULL_SWITCH_MAX_DX = 30  # ...as long as it stays this close to vertical
PULL_CANCEL_DY = -5

class Phase(Enum):
    IDLE = "idle"
    PENDING_LONG_PRESS = "pending_long_press"
    REORDERING = "reordering"
    SWIPING = "swiping"
    PULLING_DOWN = "pulling_down"

class Button(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    MIDDLE = "middle"

class Key(Enum):
    ENTER = "enter"
    ESCAPE = "escape"
    DELETE = "delete"
    OTHER = "other"

class EventKind(Enum):
    PRESS = "press"
    MOVE = "move"
    RELEASE = "release"

class PointerEvent(BaseModel):
    kind: EventKind
    x: float
    y: float
    button: Button = Button.PRIMARY
    clicks: int = Field(default=1, ge=1, description="Click count from the host; 2 or more is a multi-click")
    timestamp: float = 0.0

class WheelEvent(BaseModel):
    dy: float = Field(description="Wheel steps, positive scrolls the list up")
    timestamp: float = 0.0

class KeyEvent(BaseModel):
    key: Key
    timestamp: float = 0.0

InputEvent = Union[PointerEvent, WheelEvent, KeyEvent]

class View(Protocol):
    """What the host must do when the controller changes what is on screen."""

    def open_editor(self, request: EditorRequest) -> None: ...
    def close_editor(self) -> None: ...
    def redraw(self) -> None: ...

# -------------------- sessions --------------------
class Session(BaseModel):
    phase: ClassVar[Phase] = Phase.IDLE

    anchor_x: float
    anchor_y: float
    last_dx: float = 0.0
    last_dy: float = 0.0

class PendingLongPress(Session):
    phase: ClassVar[Phase] = Phase.PENDING_LONG_PRESS

    target: int
    reorder_blocked: bool = Field(default=False, description="Moved too much to ever become a reorder")

class Reordering(Session):
    phase: ClassVar[Phase] = Phase.REORDERING

    target: int

class Swiping(Session):
    phase: ClassVar[Phase] = Phase.SWIPING

    target: int
    offset: float = 0.0

class PullingDown(Session):
    phase: ClassVar[Phase] = Phase.PULLING_DOWN

    amount: float = 0.0

class GestureController:
    """Owns the interaction state for one list on one viewport."""

    def __init__(self, model: ListModel, scheduler: Scheduler, geometry: Optional[Geometry] = None,
                 view: Optional[View] = None, notifier: Optional[Notifier] = None,
                 long_press_delay: float = LONG_PRESS_DELAY, click_delay: float = CLICK_DELAY):
        self.model = model
        self.scheduler = scheduler
        self.geometry = geometry or Geometry()
        self.view = view
        self.notifier = notifier
        self.long_press_delay = long_press_delay
        self.click_delay = click_delay

        self.session: Optional[Session] = None
        self.scroll = 0.0
        # Last task pressed; the Delete key acts on it
        self.selected: Optional[Task] = None

        self._long_press: Optional[Cancellable] = None
        self._pending_click: Optional[Cancellable] = None
        self._pending_click_task: Optional[Task] = None

        model.subscribe(self._on_model_event)
        if notifier is not None:
            notifier.subscribe(lambda _: self._redraw())

    @classmethod
    def from_settings(cls, model: ListModel, scheduler: Scheduler, settings: Settings,
                      view: Optional[View] = None, notifier: Optional[Notifier] = None) -> "GestureController":
        """Controller sized and timed from the user's settings."""
        return cls(model, scheduler, settings.geometry(), view=view, notifier=notifier,
                   long_press_delay=settings.long_press_delay, click_delay=settings.click_delay)

    # -------------------- state --------------------
    @property
    def phase(self) -> Phase:
        return self.session.phase if self.session is not None else Phase.IDLE

    @property
    def editing(self) -> Optional[int]:
        return self.model.editing

    @property
    def pull_offset(self) -> float:
        if isinstance(self.session, PullingDown):
            return self.session.amount
        return 0.0

    def swipe_offset(self, storage_position: int) -> float:
        """Transient horizontal offset of a row; zero unless it is being swiped."""
        s = self.session
        if isinstance(s, Swiping) and s.target == storage_position:
            return s.offset
        return 0.0

    # -------------------- event entry points --------------------
    def handle(self, event: InputEvent) -> bool:
        """Dispatch one host event. Returns True if the event was consumed."""
        if isinstance(event, PointerEvent):
            if event.kind is EventKind.PRESS:
                return self.press(event.x, event.y, event.button)
            if event.kind is EventKind.MOVE:
                return self.move(event.x, event.y)
            return self.release(event.x, event.y, event.clicks)
        if isinstance(event, WheelEvent):
            return self.wheel(event.dy)
        if isinstance(event, KeyEvent):
            return self.key(event.key)
        raise TypeError(f"Unsupported event: {event!r}")

    def press(self, x: float, y: float, button: Button = Button.PRIMARY) -> bool:
        self._cancel_long_press()
        # A new press cancels a pending single click and drops any swipe offset
        self._cancel_pending_click()
        self.session = None

        if self.model.editing is not None:
            target, _ = self._hit(y)
            if target == self.model.editing:
                # Presses on the open editor belong to the text-entry surface
                return False
            if button is Button.PRIMARY:
                self.model.finish_editing()

        target, above = self._hit(y)
        if target is not None:
            task = self.model[target]
            self.selected = task
            if button is Button.PRIMARY:
                self.session = PendingLongPress(anchor_x=x, anchor_y=y, target=target)
                self._long_press = self.scheduler.call_later(
                    self.long_press_delay, self._on_long_press, self.session)
                log.debug(f"Press on row {target}, waiting for long press")
            elif button is Button.SECONDARY:
                if self.model.editing is not None:
                    self.model.finish_editing()
                position = self.model.position_of(task)
                if position is not None:
                    log.debug(f"Secondary press deletes row {position}")
                    self.model.delete(position)
                self.selected = None
        elif above and button is Button.PRIMARY:
            self.session = PullingDown(anchor_x=x, anchor_y=y)
            log.debug("Press above the list, pulling down")

        self._redraw()
        return True

    def move(self, x: float, y: float) -> bool:
        s = self.session
        if s is None:
            return False
        dx = x - s.anchor_x
        dy = y - s.anchor_y
        s.last_dx, s.last_dy = dx, dy

        if isinstance(s, PullingDown):
            self._pull(s, dy)
        elif isinstance(s, PendingLongPress):
            if dy > PULL_SWITCH_DY and abs(dx) < PULL_SWITCH_MAX_DX:
                self._cancel_long_press()
                self._pull(self._become(s, PullingDown), dy)
                log.debug("Drag down from a row, switching to pull-down")
            elif abs(dx) > DRAG_THRESHOLD and abs(dx) > abs(dy):
                self._cancel_long_press()
                self._become(s, Swiping, target=s.target, offset=dx)
                log.debug(f"Swiping row {s.target}")
            elif abs(dx) > TAP_SLOP or abs(dy) > TAP_SLOP:
                self._cancel_long_press()
                s.reorder_blocked = True
            else:
                return True
        elif isinstance(s, Reordering):
            if abs(dx) > DRAG_THRESHOLD:
                self._become(s, Swiping, target=s.target, offset=dx)
                log.debug(f"Reorder of row {s.target} abandoned for a swipe")
            elif abs(dy) > DRAG_THRESHOLD:
                target, _ = self._hit(y)
                # A task can only land among rows of its own group; crossing into the
                # other group would move it back and forth on every event
                if (target is not None and target != s.target
                        and self.model[target].completed == self.model[s.target].completed):
                    self.model.reorder(s.target, target)
                    log.debug(f"Reordered row {s.target} -> {target}")
                    s.target = target
        elif isinstance(s, Swiping):
            s.offset = dx

        self._redraw()
        return True

    def release(self, x: float, y: float, clicks: int = 1) -> bool:
        self._cancel_long_press()
        s = self.session
        self.session = None
        if s is None:
            return False

        if isinstance(s, PullingDown):
            if s.amount > self.geometry.pull_commit:
                log.debug(f"Pull of {s.amount} commits a new task")
                self.scroll = 0.0
                self.model.insert_at_head("")
        elif isinstance(s, Swiping):
            self._commit_swipe(s)
        elif isinstance(s, PendingLongPress):
            dx = x - s.anchor_x
            dy = y - s.anchor_y
            if abs(dx) < TAP_SLOP and abs(dy) < TAP_SLOP:
                self._tap(s.target, clicks)
        # Reordering: every crossed row was already applied during move

        self._redraw()
        return True

    def cancel(self) -> None:
        """Abandon any gesture in flight; nothing reaches the model."""
        self._cancel_long_press()
        if self.session is not None:
            log.debug(f"Cancelled {self.session.phase.value} gesture")
            self.session = None
            self._redraw()

    def wheel(self, dy: float) -> bool:
        if dy == 0:
            return False
        self.scroll = clamp_scroll(self.scroll - dy * self.geometry.row_height, len(self.model), self.geometry)
        self._redraw()
        return True

    def key(self, key: Key) -> bool:
        """Keyboard input. While editing only Escape is taken; the rest is the entry surface's."""
        if self.model.editing is not None:
            if key is Key.ESCAPE:
                self.model.cancel_editing()
                return True
            return False
        if key is Key.DELETE and self.selected is not None:
            position = self.model.position_of(self.selected)
            self.selected = None
            if position is not None:
                self.model.delete(position)
                return True
        return False

    # -------------------- text-entry surface callbacks --------------------
    def text_changed(self, text: str) -> None:
        if self.model.editing is not None:
            self.model.draft = text

    def confirm_edit(self, text: Optional[str] = None) -> None:
        """Enter in the entry surface."""
        if text is not None:
            self.model.draft = text
        self.model.finish_editing()

    # -------------------- geometry / drawing --------------------
    def resize(self, width: int, height: int) -> None:
        self.geometry = self.geometry.model_copy(update={"width": width, "height": height})
        self.scroll = clamp_scroll(self.scroll, len(self.model), self.geometry)
        self._redraw()

    def editor_request(self) -> Optional[EditorRequest]:
        position = self.model.editing
        if position is None:
            return None
        task = self.model[position]
        return editor_request(
            position,
            self.model.visible_position(position),
            self.model.draft,
            task.completed,
            len(self.model),
            self.geometry,
            scroll=self.scroll,
            pull=self.pull_offset,
            offset=self.swipe_offset(position),
        )

    def frame(self) -> Frame:
        s = self.session
        swipe = (s.target, s.offset) if isinstance(s, Swiping) else None
        banner = None
        if self.notifier is not None and self.notifier.visible:
            banner = self.notifier.message
        return build_frame(self.model, self.geometry, scroll=self.scroll, pull=self.pull_offset,
                           swipe=swipe, editor=self.editor_request(), banner=banner)

    # -------------------- internals --------------------
    def _hit(self, y: float):
        """(storage position or None, pointer is above the first row)"""
        hit = hit_test(y, self.scroll, len(self.model), self.geometry.row_height)
        if hit.visible is None:
            return None, hit.above
        return self.model.storage_position(hit.visible), False

    def _become(self, s: Session, cls, **fields) -> Session:
        nxt = cls(anchor_x=s.anchor_x, anchor_y=s.anchor_y, last_dx=s.last_dx, last_dy=s.last_dy, **fields)
        self.session = nxt
        return nxt

    def _pull(self, s: PullingDown, dy: float) -> None:
        if dy > 0:
            s.amount = min(dy, self.geometry.pull_limit)
        elif dy < PULL_CANCEL_DY:
            s.amount = 0.0

    def _commit_swipe(self, s: Swiping) -> None:
        if not self.model.in_range(s.target):
            return
        limit = self.geometry.swipe_commit
        if s.offset < -limit:
            log.debug(f"Swipe left of {s.offset} deletes row {s.target}")
            self.model.delete(s.target)
        elif s.offset > limit:
            log.debug(f"Swipe right of {s.offset} toggles row {s.target}")
            self.model.toggle_completed(s.target)
        # otherwise the row snaps back; the offset went with the session

    def _tap(self, target: int, clicks: int) -> None:
        if not self.model.in_range(target):
            return
        if clicks > 1:
            self._cancel_pending_click()
            if self.model.editing is None:
                self.model.toggle_completed(target)
            return
        self._cancel_pending_click()
        task = self.model[target]
        self._pending_click_task = task
        self._pending_click = self.scheduler.call_later(self.click_delay, self._on_single_click, task)

    def _on_long_press(self, session: PendingLongPress) -> None:
        if self.session is not session:
            return
        self._long_press = None
        if session.reorder_blocked:
            return
        self._become(session, Reordering, target=session.target)
        log.debug(f"Long press on row {session.target}, reordering")
        self._redraw()

    def _on_single_click(self, task: Task) -> None:
        if self._pending_click_task is not task:
            return
        self._pending_click = None
        self._pending_click_task = None
        position = self.model.position_of(task)
        if position is not None and self.model.editing != position:
            self.model.open_editor(position)

    def _cancel_long_press(self) -> None:
        if self._long_press is not None:
            self._long_press.cancel()
            self._long_press = None

    def _cancel_pending_click(self) -> None:
        if self._pending_click is not None:
            self._pending_click.cancel()
        self._pending_click = None
        self._pending_click_task = None

    def _on_model_event(self, event: ModelEvent, position: Optional[int]) -> None:
        if event is ModelEvent.DELETED:
            if isinstance(self.session, Swiping):
                self.session = None
            self.scroll = clamp_scroll(self.scroll, len(self.model), self.geometry)
        elif event is ModelEvent.EDIT_OPENED:
            visible = self.model.visible_position(position) if position is not None else None
            if visible is not None:
                self.scroll = scroll_into_view(visible, self.scroll, len(self.model), self.geometry,
                                               self.pull_offset)
            request = self.editor_request()
            if self.view is not None and request is not None:
                self.view.open_editor(request)
        elif event is ModelEvent.EDIT_CLOSED:
            if self.view is not None:
                self.view.close_editor()
        self._redraw()

    def _redraw(self) -> None:
        if self.view is not None:
            self.view.redraw()

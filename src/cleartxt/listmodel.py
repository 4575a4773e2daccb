"""
ListModel - the ordered todo list and everything that mutates it.

Storage order is insertion order: it is what gets written to disk and what
reorder acts on. The sorted view (incomplete tasks first, then completed,
each group in storage order) is what gets drawn and hit-tested; it is
recomputed on every call so the two can never disagree.

Every successful mutation is saved before the call returns. Positions
outside the list are ignored rather than raised on.
"""
from enum import Enum
from typing import Callable, Iterator, List, Optional

from cleartxt.data.codec import decode, encode
from cleartxt.data.io import TextStore
from cleartxt.logs import get_logger
from cleartxt.models import Task, sample_tasks
from cleartxt.notify import Notifier
from cleartxt.recovery import FileOperationError

log = get_logger("listmodel")

class ModelEvent(Enum):
    CHANGED = "changed"
    DELETED = "deleted"
    EDIT_OPENED = "edit_opened"
    EDIT_CLOSED = "edit_closed"

Listener = Callable[[ModelEvent, Optional[int]], None]

class ListModel:
    """The single todo list, its text-entry state, and its persistence."""

    def __init__(self, store: Optional[TextStore] = None, notifier: Optional[Notifier] = None,
                 tasks: Optional[List[Task]] = None):
        self.store = store
        self.notifier = notifier
        self.tasks: List[Task] = list(tasks) if tasks else []
        # Text currently in the entry surface, mirrored by the host
        self.draft = ""
        self._editing: Optional[Task] = None
        self._listeners: List[Listener] = []

    # -------------------- queries --------------------
    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __getitem__(self, position: int) -> Task:
        return self.tasks[position]

    def in_range(self, position) -> bool:
        return isinstance(position, int) and 0 <= position < len(self.tasks)

    def position_of(self, task: Task) -> Optional[int]:
        """Storage position of this exact task object (not an equal one)."""
        for i, t in enumerate(self.tasks):
            if t is task:
                return i
        return None

    def sorted_view(self) -> List[int]:
        """Storage positions, incomplete tasks first, each group in storage order."""
        incomplete = [i for i, t in enumerate(self.tasks) if not t.completed]
        completed = [i for i, t in enumerate(self.tasks) if t.completed]
        return incomplete + completed

    def sorted_tasks(self) -> List[Task]:
        return [self.tasks[i] for i in self.sorted_view()]

    def visible_position(self, storage_position: int) -> Optional[int]:
        if not self.in_range(storage_position):
            return None
        return self.sorted_view().index(storage_position)

    def storage_position(self, visible_position: int) -> Optional[int]:
        view = self.sorted_view()
        if isinstance(visible_position, int) and 0 <= visible_position < len(view):
            return view[visible_position]
        return None

    @property
    def editing(self) -> Optional[int]:
        """Storage position of the task open for editing, or None."""
        if self._editing is None:
            return None
        return self.position_of(self._editing)

    @property
    def editing_task(self) -> Optional[Task]:
        return self._editing

    # -------------------- listeners --------------------
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, event: ModelEvent, position: Optional[int] = None) -> None:
        for listener in list(self._listeners):
            listener(event, position)

    # -------------------- persistence --------------------
    def load(self) -> bool:
        """
        Replace the list with the store's contents.

        When nothing could be recovered the onboarding tasks are seeded and
        saved right away, unless the file was there but unreadable, in which
        case it is left alone.

        Returns:
            True if at least one task was read from the store.
        """
        text = None
        read_failed = False
        if self.store is not None:
            try:
                text = self.store.read()
            except FileOperationError as e:
                read_failed = True
                self._notify(f"Error reading file: {self.store.path}")
                log.debug(f"Read failure detail: {e}")

        tasks, recovered = decode(text) if text else ([], False)
        if self._editing is not None:
            self._close()
        if recovered:
            self.tasks = tasks
            log.info(f"Loaded {len(tasks)} task(s)")
        else:
            self.tasks = sample_tasks()
            log.info("No tasks found, seeding onboarding tasks")
            if not read_failed:
                self.save()
        self._emit(ModelEvent.CHANGED)
        return recovered

    def save(self) -> bool:
        """Write the whole list; failures become a notification, never an exception."""
        if self.store is None:
            return True
        try:
            self.store.write(encode(self.tasks))
        except FileOperationError as e:
            self._notify(f"Failed to save file: {self.store.path}")
            log.debug(f"Save failure detail: {e}")
            return False
        return True

    def _notify(self, message: str) -> None:
        if self.notifier is not None:
            self.notifier.show(message)
        else:
            log.error(message)

    # -------------------- mutations --------------------
    def insert_at_head(self, text: str = "") -> None:
        """Add a task at the top and open it for editing."""
        if self._editing is not None:
            # An abandoned empty row is dropped here without a replacement
            self._finish(None, refill=False)
        task = Task(text=text)
        self.tasks.insert(0, task)
        self.save()
        self._emit(ModelEvent.CHANGED, 0)
        self._open(task)

    def edit(self, position: int, text: str) -> None:
        """Store new text; empty text removes the task instead."""
        self._apply_edit(position, text, refill=True)

    def delete(self, position: int) -> None:
        if not self.in_range(position):
            return
        if self.tasks[position] is self._editing:
            self._close()
        self._remove(position, refill=True)

    def toggle_completed(self, position: int) -> None:
        if not self.in_range(position):
            return
        self.tasks[position].toggle()
        self.save()
        self._emit(ModelEvent.CHANGED, position)

    def reorder(self, from_position: int, to_position: int) -> None:
        """Move a task to another storage position."""
        if (not self.in_range(from_position) or not self.in_range(to_position)
                or from_position == to_position):
            return
        task = self.tasks.pop(from_position)
        self.tasks.insert(to_position, task)
        self.save()
        self._emit(ModelEvent.CHANGED, to_position)

    def _apply_edit(self, position: int, text: str, refill: bool) -> None:
        if not self.in_range(position):
            return
        task = self.tasks[position]
        if task is self._editing:
            self._close()
        if not text:
            self._remove(position, refill=refill)
            return
        task.text = text
        self.save()
        self._emit(ModelEvent.CHANGED, position)

    def _remove(self, position: int, refill: bool) -> None:
        self.tasks.pop(position)
        refilled = refill and not self.tasks
        if refilled:
            self.tasks.append(Task())
        if self.tasks:
            self.save()
        self._emit(ModelEvent.DELETED, position)
        if refilled:
            self._open(self.tasks[0])

    # -------------------- editing --------------------
    def open_editor(self, position: int) -> None:
        """Start editing a task, committing any other open edit first."""
        if not self.in_range(position):
            return
        task = self.tasks[position]
        if task is self._editing:
            return
        if self._editing is not None:
            self.finish_editing()
        if self.position_of(task) is None:
            return
        self._open(task)

    def finish_editing(self, text: Optional[str] = None) -> None:
        """Commit the open edit through edit(); ``text`` defaults to the draft."""
        self._finish(text, refill=True)

    def cancel_editing(self, text: Optional[str] = None) -> None:
        """Close the open edit without saving; an empty field removes the task."""
        task = self._editing
        if task is None:
            return
        if text is None:
            text = self.draft
        position = self.position_of(task)
        self._close()
        if position is not None and not text:
            self._remove(position, refill=True)

    def _finish(self, text: Optional[str], refill: bool) -> None:
        task = self._editing
        if task is None:
            return
        if text is None:
            text = self.draft
        position = self.position_of(task)
        if position is None:
            self._close()
            return
        self._apply_edit(position, text, refill=refill)

    def _open(self, task: Task) -> None:
        self._editing = task
        self.draft = task.text
        self._emit(ModelEvent.EDIT_OPENED, self.position_of(task))

    def _close(self) -> None:
        position = self.editing
        self._editing = None
        self.draft = ""
        self._emit(ModelEvent.EDIT_CLOSED, position)

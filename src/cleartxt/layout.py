"""
Geometry shared by hit-testing and drawing.

The core never draws, but the host needs to put rows, the pull-down preview
and the editor overlay exactly where the gesture layer thinks they are.
Everything here is computed from the list model's sorted view.
"""
from typing import List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, Field

from cleartxt.colors import RGB, color_for, selection_color_for, text_color_for

# Thresholds expressed as fractions of the row height / viewport width
PULL_MAX_RATIO = 1.5
PULL_COMMIT_RATIO = 0.6
SWIPE_COMMIT_RATIO = 0.3

HINT = "Pull down to add | Click to edit | Double-click to complete | Swipe left to delete"
PULL_LABEL = "Pull down to add..."
RELEASE_LABEL = "Release to add..."

class Geometry(BaseModel):
    """Viewport size and row metrics, in the host's pixel units."""

    width: int = Field(default=600, gt=0, description="Viewport width")
    height: int = Field(default=800, gt=0, description="Viewport height")
    row_height: int = Field(default=60, gt=0, description="Height of one task row")
    footer_height: int = Field(default=40, ge=0, description="Space kept free for the hint line at the bottom")
    text_padding: int = Field(default=20, ge=0, description="Left inset of row text and of the editor")

    @property
    def list_height(self) -> int:
        return max(0, self.height - self.footer_height)

    @property
    def pull_limit(self) -> float:
        return self.row_height * PULL_MAX_RATIO

    @property
    def pull_commit(self) -> float:
        return self.row_height * PULL_COMMIT_RATIO

    @property
    def swipe_commit(self) -> float:
        return self.width * SWIPE_COMMIT_RATIO

class Hit(NamedTuple):
    visible: Optional[int]
    above: bool

def hit_test(y: float, scroll: float, rows: int, row_height: int) -> Hit:
    """Which visible row is under ``y`` (window coordinates)."""
    adjusted = y + scroll
    if adjusted < 0:
        return Hit(None, True)
    index = int(adjusted // row_height)
    if index < rows:
        return Hit(index, False)
    return Hit(None, False)

def max_scroll(rows: int, geometry: Geometry) -> float:
    return max(0, rows * geometry.row_height - geometry.list_height)

def clamp_scroll(scroll: float, rows: int, geometry: Geometry) -> float:
    return min(max(0.0, scroll), max_scroll(rows, geometry))

def row_top(visible_position: int, scroll: float, geometry: Geometry, pull: float = 0.0) -> float:
    """Top edge of a row; every row shifts down while a pull is in progress."""
    return visible_position * geometry.row_height - scroll + max(0.0, pull)

def scroll_into_view(visible_position: int, scroll: float, rows: int, geometry: Geometry,
                     pull: float = 0.0) -> float:
    """Scroll offset that keeps the row inside the list area (above the footer)."""
    top = row_top(visible_position, scroll, geometry, pull)
    if top < 0:
        scroll += top
    elif top + geometry.row_height > geometry.list_height:
        scroll += top + geometry.row_height - geometry.list_height
    return clamp_scroll(scroll, rows, geometry)

def content_bounds(offset: float, geometry: Geometry) -> Tuple[float, float]:
    """Left edge and width of a row's colored area under a swipe offset."""
    bg_x = offset if offset > 0 else 0.0
    return bg_x, max(0.0, geometry.width - abs(offset))

class EditorRequest(BaseModel):
    """Where and how the host should show its text-entry surface."""

    position: int = Field(description="Storage position of the task being edited")
    text: str = Field(description="Initial text of the entry surface")
    background: RGB
    foreground: RGB
    selection: RGB
    x: float
    y: float
    width: float
    height: float

def editor_request(position: int, visible_position: int, text: str, completed: bool, rows: int,
                   geometry: Geometry, scroll: float = 0.0, pull: float = 0.0,
                   offset: float = 0.0) -> EditorRequest:
    background = color_for(visible_position, rows, completed)
    foreground = text_color_for(background)
    bg_x, _ = content_bounds(offset, geometry)
    return EditorRequest(
        position=position,
        text=text,
        background=background,
        foreground=foreground,
        selection=selection_color_for(foreground),
        x=bg_x + geometry.text_padding,
        y=row_top(visible_position, scroll, geometry, pull),
        width=max(0.0, geometry.width - abs(offset) - geometry.text_padding),
        height=geometry.row_height,
    )

class RowView(BaseModel):
    storage_position: int
    visible_position: int
    y: float
    offset: float = 0.0
    background: RGB
    foreground: RGB
    text: str
    completed: bool
    editing: bool = False

class PullPreview(BaseModel):
    y: float
    background: RGB
    foreground: RGB
    label: str
    armed: bool = Field(description="Releasing now would create a task")

class Frame(BaseModel):
    """Everything a host needs to draw one frame."""

    rows: List[RowView] = Field(default_factory=list)
    pull: Optional[PullPreview] = None
    editor: Optional[EditorRequest] = None
    banner: Optional[str] = None
    hint: str = HINT
    scroll: float = 0.0

def build_frame(model, geometry: Geometry, scroll: float = 0.0, pull: float = 0.0,
                swipe: Optional[Tuple[int, float]] = None, editor: Optional[EditorRequest] = None,
                banner: Optional[str] = None) -> Frame:
    """
    Lay out the visible rows of ``model``.

    Args:
        model: the ListModel to draw.
        scroll: current scroll offset.
        pull: live pull-down distance (0 when not pulling).
        swipe: (storage position, horizontal offset) of the row being swiped.
        editor: placement of the open editor, if any.
        banner: notification text to show, if any.
    """
    view = model.sorted_view()
    rows = len(view)
    editing = model.editing
    frame = Frame(editor=editor, banner=banner, scroll=scroll)

    if pull > 0:
        top = pull - geometry.row_height - scroll
        if top + geometry.row_height > 0 and top < geometry.height:
            # The new task lands at the top, so it previews the top color
            background = color_for(0, rows + 1)
            armed = pull > geometry.pull_commit
            frame.pull = PullPreview(
                y=top,
                background=background,
                foreground=text_color_for(background),
                label=RELEASE_LABEL if armed else PULL_LABEL,
                armed=armed,
            )

    for visible, storage in enumerate(view):
        y = row_top(visible, scroll, geometry, pull)
        if y + geometry.row_height <= 0 or y >= geometry.height:
            continue
        task = model[storage]
        background = color_for(visible, rows, task.completed)
        offset = swipe[1] if swipe is not None and swipe[0] == storage else 0.0
        frame.rows.append(RowView(
            storage_position=storage,
            visible_position=visible,
            y=y,
            offset=offset,
            background=background,
            foreground=text_color_for(background),
            text=task.text,
            completed=task.completed,
            editing=storage == editing,
        ))
    return frame

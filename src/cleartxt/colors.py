"""
Row colors.

Incomplete rows run a red -> orange -> yellow gradient down the list;
completed rows are a flat dark grey. The text color on top of any row is
picked from the background's luma, so rendering and the editor overlay
always agree on what is readable.
"""
from typing import NamedTuple

class RGB(NamedTuple):
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def luminance(self) -> float:
        """Relative luminance (ITU-R BT.709 weights), 0-255."""
        return 0.2126 * self.r + 0.7152 * self.g + 0.0722 * self.b

RED = RGB(255, 0, 0)
ORANGE = RGB(255, 165, 0)
YELLOW = RGB(255, 255, 0)
COMPLETED = RGB(64, 64, 64)
BLACK = RGB(0, 0, 0)
WHITE = RGB(255, 255, 255)
BLUE = RGB(0, 0, 255)

LUMINANCE_THRESHOLD = 128

def color_for(visible_position: int, group_size: int, completed: bool = False) -> RGB:
    """Background color for the row at ``visible_position`` of ``group_size`` rows."""
    if completed:
        return COMPLETED
    if group_size <= 1:
        return RED

    ratio = visible_position / (group_size - 1)
    if ratio < 0.5:
        local = ratio * 2.0
        green = int(ORANGE.g * local)
    else:
        local = (ratio - 0.5) * 2.0
        green = int(ORANGE.g + (YELLOW.g - ORANGE.g) * local)
    return RGB(255, max(0, min(255, green)), 0)

def text_color_for(background: RGB) -> RGB:
    return BLACK if background.luminance() > LUMINANCE_THRESHOLD else WHITE

def selection_color_for(text_color: RGB) -> RGB:
    """Selection / caret tint for the editor, contrasting with its text."""
    return BLUE if text_color == BLACK else YELLOW

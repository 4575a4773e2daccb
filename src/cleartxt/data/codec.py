"""
Line-oriented text encoding of the todo list.

Each task is one line::

    <legacy>|<completed>|<escaped text>

The legacy field used to hold a color index; colors are derived from the
row position now, so it is always written as ``0`` and ignored on read.
"""
from typing import Iterable, List, Tuple

from cleartxt.models import Task
from cleartxt.logs import get_logger

log = get_logger("codec")

LEGACY_FIELD = "0"
SEPARATOR = "|"
ESCAPE = "\\"

def escape_text(text: str) -> str:
    """Escape backslashes and newlines so a task fits on one line."""
    return text.replace(ESCAPE, ESCAPE * 2).replace("\n", ESCAPE + "n")

def unescape_text(text: str) -> str:
    """
    Inverse of escape_text.

    An escape followed by anything other than ``n`` or another escape is
    kept as-is, and so is a trailing lone escape.
    """
    out = []
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == ESCAPE and i + 1 < length:
            nxt = text[i + 1]
            if nxt == "n":
                out.append("\n")
                i += 2
                continue
            if nxt == ESCAPE:
                out.append(ESCAPE)
                i += 2
                continue
        out.append(ch)
        i += 1
    return "".join(out)

def encode_task(task: Task) -> str:
    flag = "1" if task.completed else "0"
    return SEPARATOR.join((LEGACY_FIELD, flag, escape_text(task.text)))

def encode(tasks: Iterable[Task]) -> str:
    """Serialize tasks in storage order, one newline-terminated line each."""
    return "".join(encode_task(task) + "\n" for task in tasks)

def decode_line(line: str):
    """Parse one line; returns None for blank or malformed lines."""
    if not line:
        return None
    first = line.find(SEPARATOR)
    if first < 0:
        return None
    second = line.find(SEPARATOR, first + 1)
    if second < 0:
        return None
    completed = line[first + 1:second] == "1"
    return Task(text=unescape_text(line[second + 1:]), completed=completed)

def decode(text: str) -> Tuple[List[Task], bool]:
    """
    Parse the todo file contents.

    Returns:
        The recovered tasks in file order, and whether at least one task was
        recovered (False tells the caller to seed the onboarding tasks).
    """
    tasks: List[Task] = []
    skipped = 0
    # Only "\n" separates records; other line-break characters are task text
    for line in text.split("\n"):
        task = decode_line(line)
        if task is None:
            if line:
                skipped += 1
            continue
        tasks.append(task)
    if skipped:
        log.debug(f"Skipped {skipped} malformed line(s)")
    return tasks, bool(tasks)

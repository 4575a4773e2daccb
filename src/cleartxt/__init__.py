"""
clear-txt - a single-list todo manager driven entirely by pointer gestures.

Taps edit, double taps complete, swipes complete or delete, a long press
starts reordering and pulling the list down creates a task. The list is
kept in a plain text file, one task per line.
"""

from .version import VERSION
from .models import Task, SAMPLE_TASKS
from .listmodel import ListModel, ModelEvent
from .gestures import GestureController, Phase, Button, Key
from .layout import Geometry
from .scheduler import ManualScheduler
from .notify import Notifier

__version__ = VERSION

__all__ = [
    "VERSION",
    "Task",
    "SAMPLE_TASKS",
    "ListModel",
    "ModelEvent",
    "GestureController",
    "Phase",
    "Button",
    "Key",
    "Geometry",
    "ManualScheduler",
    "Notifier",
]

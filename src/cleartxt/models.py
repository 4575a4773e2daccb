from pydantic import BaseModel, Field
from typing import List

class Task(BaseModel):
    """A single entry of the todo list.

    Tasks are compared by value, but the list model tracks the one being
    edited by identity, so two tasks with the same text never get mixed up.
    """

    text: str = Field(default="", description="The task text; may contain newlines")
    completed: bool = Field(default=False, description="Whether the task has been checked off")

    def toggle(self) -> bool:
        """Flip the completed flag and return the new value."""
        self.completed = not self.completed
        return self.completed

# Seeded on first run, when the todo file yields no tasks
SAMPLE_TASKS: List[str] = [
    "Welcome to Clear",
    "Pull down to add new task",
    "Click to edit task",
    "Double-click to complete",
    "Swipe left to delete",
    "Swipe right to complete",
    "Long press to reorder",
]

def sample_tasks() -> List[Task]:
    """Fresh onboarding tasks, all incomplete."""
    return [Task(text=text) for text in SAMPLE_TASKS]

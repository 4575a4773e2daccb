"""Shared fixtures: a list model on a temp file with a manual clock."""

import pytest

from cleartxt.data.io import TextStore
from cleartxt.listmodel import ListModel
from cleartxt.models import Task
from cleartxt.notify import Notifier
from cleartxt.scheduler import ManualScheduler


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the real per-user directory and log settings."""
    monkeypatch.setenv("CLEARTXT_DATA_DIR", str(tmp_path / "data"))
    for name in ("CLEARTXT_DATA_FILE", "CLEARTXT_LOG_LEVEL", "CLEARTXT_DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def notifier(scheduler):
    return Notifier(scheduler)


@pytest.fixture
def todo_path(tmp_path):
    return tmp_path / "todos.txt"


@pytest.fixture
def store(todo_path):
    return TextStore(todo_path)


@pytest.fixture
def make_model(store, notifier):
    """Build a model holding the given (text, completed) pairs."""
    def _make(*items):
        tasks = [Task(text=text, completed=completed) for text, completed in items]
        return ListModel(store, notifier, tasks)
    return _make

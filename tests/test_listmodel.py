"""Unit tests for ListModel."""

import pytest
from unittest.mock import MagicMock, patch

from cleartxt.listmodel import ListModel, ModelEvent
from cleartxt.models import SAMPLE_TASKS, Task
from cleartxt.recovery import FileOperationError


def texts(model):
    return [t.text for t in model]


def view_texts(model):
    return [t.text for t in model.sorted_tasks()]


class TestSortedView:
    """Test the incomplete-then-completed projection."""

    def test_toggle_into_completed_group_keeps_storage_order(self, make_model, todo_path):
        """Once both are completed the view falls back to storage order."""
        model = make_model(("Buy milk", False), ("Pay rent", True))
        assert view_texts(model) == ["Buy milk", "Pay rent"]

        model.toggle_completed(0)

        assert view_texts(model) == ["Buy milk", "Pay rent"]
        assert texts(model) == ["Buy milk", "Pay rent"]
        assert todo_path.read_text(encoding="utf-8") == "0|1|Buy milk\n0|1|Pay rent\n"

    def test_toggle_regroups_view_not_storage(self, make_model):
        """Completing a task moves it below the open ones in the view only."""
        model = make_model(("A", False), ("B", True), ("C", False))
        assert view_texts(model) == ["A", "C", "B"]

        model.toggle_completed(0)

        assert view_texts(model) == ["C", "A", "B"]
        assert texts(model) == ["A", "B", "C"]

    def test_stable_partition(self, make_model):
        model = make_model(("a", True), ("b", False), ("c", True), ("d", False), ("e", False))
        assert model.sorted_view() == [1, 3, 4, 0, 2]

    def test_position_mapping(self, make_model):
        model = make_model(("a", True), ("b", False))
        assert model.visible_position(0) == 1
        assert model.storage_position(0) == 1
        assert model.storage_position(2) is None
        assert model.visible_position(7) is None


class TestMutations:
    """Test edits, deletes, toggles and reorders."""

    def test_toggle_twice_is_identity(self, make_model):
        model = make_model(("a", False), ("b", False), ("c", True))
        before = [t.model_copy() for t in model]
        model.toggle_completed(1)
        model.toggle_completed(1)
        assert list(model) == before

    def test_edit_persists_text(self, make_model, todo_path):
        model = make_model(("old", False))
        model.edit(0, "new\nline")
        assert texts(model) == ["new\nline"]
        assert todo_path.read_text(encoding="utf-8") == "0|0|new\\nline\n"

    def test_edit_to_empty_removes(self, make_model):
        model = make_model(("a", False), ("b", False))
        model.edit(0, "")
        assert texts(model) == ["b"]
        assert model.editing is None

    def test_delete_last_task_leaves_empty_editing_task(self, make_model, todo_path):
        """The list never goes empty; the replacement opens for editing."""
        model = make_model(("only", False))
        model.delete(0)
        assert len(model) == 1
        assert model[0].text == ""
        assert model.editing == 0
        assert todo_path.read_text(encoding="utf-8") == "0|0|\n"

    def test_edit_last_to_empty_refills(self, make_model):
        model = make_model(("only", False))
        model.edit(0, "")
        assert texts(model) == [""]
        assert model.editing == 0

    @pytest.mark.parametrize("src,dst", [(1, 1), (-1, 0), (0, 3), (3, 0), (0, -1)])
    def test_reorder_noop(self, make_model, src, dst):
        model = make_model(("a", False), ("b", False), ("c", False))
        listener = MagicMock()
        model.subscribe(listener)
        model.reorder(src, dst)
        assert texts(model) == ["a", "b", "c"]
        listener.assert_not_called()

    def test_reorder_moves(self, make_model, todo_path):
        model = make_model(("a", False), ("b", False), ("c", False))
        model.reorder(0, 2)
        assert texts(model) == ["b", "c", "a"]
        assert todo_path.read_text(encoding="utf-8") == "0|0|b\n0|0|c\n0|0|a\n"

    def test_out_of_range_is_silent(self, make_model):
        model = make_model(("a", False))
        listener = MagicMock()
        model.subscribe(listener)
        model.delete(5)
        model.toggle_completed(-1)
        model.edit(3, "x")
        model.open_editor(9)
        assert texts(model) == ["a"]
        assert model[0].completed is False
        listener.assert_not_called()

    def test_insert_at_head_opens_editor(self, make_model, todo_path):
        model = make_model(("a", False))
        events = []
        model.subscribe(lambda event, position: events.append((event, position)))

        model.insert_at_head("")

        assert texts(model) == ["", "a"]
        assert model.editing == 0
        assert model.draft == ""
        assert events == [(ModelEvent.CHANGED, 0), (ModelEvent.EDIT_OPENED, 0)]
        assert todo_path.read_text(encoding="utf-8") == "0|0|\n0|0|a\n"

    def test_insert_drops_abandoned_empty_row(self, make_model):
        """A second insert while the first new row is still empty replaces it."""
        model = make_model(("a", False))
        model.insert_at_head("")
        model.insert_at_head("")
        assert texts(model) == ["", "a"]
        assert model.editing == 0


class TestEditing:
    """Test the open/finish/cancel edit lifecycle."""

    def test_finish_commits_draft(self, make_model):
        model = make_model(("a", False), ("b", False))
        model.open_editor(1)
        assert model.draft == "b"
        model.draft = "b2"
        model.finish_editing()
        assert texts(model) == ["a", "b2"]
        assert model.editing is None

    def test_finish_with_empty_removes(self, make_model):
        model = make_model(("a", False), ("b", False))
        model.open_editor(0)
        model.finish_editing("")
        assert texts(model) == ["b"]

    def test_cancel_keeps_old_text(self, make_model, todo_path):
        model = make_model(("a", False))
        model.save()
        model.open_editor(0)
        model.draft = "typed but abandoned"
        model.cancel_editing()
        assert texts(model) == ["a"]
        assert model.editing is None
        assert todo_path.read_text(encoding="utf-8") == "0|0|a\n"

    def test_cancel_empty_removes(self, make_model):
        model = make_model(("a", False), ("b", False))
        model.open_editor(0)
        model.cancel_editing("")
        assert texts(model) == ["b"]

    def test_opening_another_commits_current(self, make_model):
        model = make_model(("a", False), ("b", False))
        model.open_editor(0)
        model.draft = "a2"
        model.open_editor(1)
        assert texts(model) == ["a2", "b"]
        assert model.editing == 1
        assert model.draft == "b"

    def test_opening_another_after_emptying_current(self, make_model):
        """Committing an emptied row shifts positions; the right task still opens."""
        model = make_model(("a", False), ("b", False))
        model.open_editor(0)
        model.draft = ""
        model.open_editor(1)
        assert texts(model) == ["b"]
        assert model.editing == 0

    def test_editing_tracks_identity(self, make_model):
        """Equal tasks are never confused with the one being edited."""
        model = make_model(("same", False), ("same", False))
        target = model[1]
        model.open_editor(1)
        model.reorder(1, 0)
        assert model.editing == 0
        assert model.editing_task is target

    def test_delete_discards_open_edit(self, make_model):
        model = make_model(("a", False), ("b", False))
        events = []
        model.subscribe(lambda event, position: events.append(event))
        model.open_editor(0)
        model.draft = "never saved"
        model.delete(0)
        assert texts(model) == ["b"]
        assert model.editing is None
        assert events == [ModelEvent.EDIT_OPENED, ModelEvent.EDIT_CLOSED, ModelEvent.DELETED]


class TestPersistence:
    """Test load/save and their error reporting."""

    def test_first_run_seeds_and_saves(self, store, notifier, todo_path):
        model = ListModel(store, notifier)
        assert model.load() is False
        assert texts(model) == SAMPLE_TASKS
        assert todo_path.read_text(encoding="utf-8").count("\n") == len(SAMPLE_TASKS)
        assert not notifier.visible

    def test_load_existing(self, store, todo_path):
        todo_path.write_text("0|1|done\njunk\n0|0|open\n", encoding="utf-8")
        model = ListModel(store)
        assert model.load() is True
        assert [(t.text, t.completed) for t in model] == [("done", True), ("open", False)]

    def test_nothing_valid_seeds(self, store, todo_path):
        todo_path.write_text("junk\n\n", encoding="utf-8")
        model = ListModel(store)
        assert model.load() is False
        assert texts(model) == SAMPLE_TASKS
        assert todo_path.read_text(encoding="utf-8").startswith("0|0|Welcome to Clear\n")

    def test_read_failure_notifies_and_keeps_file(self, store, notifier, todo_path):
        model = ListModel(store, notifier)
        with patch.object(store, "read", side_effect=FileOperationError("boom", todo_path)), \
             patch.object(store, "write") as mock_write:
            assert model.load() is False
        assert texts(model) == SAMPLE_TASKS
        assert notifier.message == f"Error reading file: {todo_path}"
        mock_write.assert_not_called()

    def test_save_failure_notifies_and_keeps_memory(self, make_model, store, notifier, scheduler, todo_path):
        model = make_model(("a", False))
        with patch.object(store, "write", side_effect=FileOperationError("disk full", todo_path)):
            model.toggle_completed(0)
        assert model[0].completed is True
        assert notifier.visible
        assert notifier.message == f"Failed to save file: {todo_path}"
        scheduler.advance(3.0)
        assert not notifier.visible

    def test_save_without_store(self):
        model = ListModel(tasks=[Task(text="x")])
        assert model.save() is True

    def test_load_resets_editing(self, make_model, todo_path):
        todo_path.write_text("0|0|fresh\n", encoding="utf-8")
        model = make_model(("a", False))
        model.open_editor(0)
        model.load()
        assert model.editing is None
        assert texts(model) == ["fresh"]

    def test_unrelated_save_keeps_undecodable_bytes(self, store, todo_path):
        """Toggling one task leaves a non-UTF-8 line of another byte-for-byte intact."""
        todo_path.write_bytes(b"0|0|caf\xe9 latin-1\n0|0|other\n")
        model = ListModel(store)
        assert model.load() is True
        model.toggle_completed(1)
        assert todo_path.read_bytes() == b"0|0|caf\xe9 latin-1\n0|1|other\n"

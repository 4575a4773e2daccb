"""Unit tests for the todo file line format."""

import pytest

from cleartxt.data.codec import decode, decode_line, encode, encode_task, escape_text, unescape_text
from cleartxt.models import Task


class TestEscaping:
    """Test escape_text / unescape_text."""

    def test_backslash_and_newline(self):
        """Backslashes are doubled before newlines are turned into \\n."""
        assert escape_text("a\\b") == "a\\\\b"
        assert escape_text("line1\nline2") == "line1\\nline2"
        assert escape_text("\\n") == "\\\\n"

    @pytest.mark.parametrize("text", ["", "plain", "a\\b", "x\ny", "\\n literal", "trailing\\", "\n\n", "a|b|c"])
    def test_unescape_inverts_escape(self, text):
        """Escaping then unescaping gives back the original text."""
        assert unescape_text(escape_text(text)) == text

    def test_unknown_escape_kept(self):
        """An escape before anything but n or backslash passes through."""
        assert unescape_text("a\\tb") == "a\\tb"

    def test_trailing_lone_escape_kept(self):
        """A backslash at the very end is kept as-is."""
        assert unescape_text("end\\") == "end\\"


class TestEncode:
    """Test encoding tasks."""

    def test_backslash_task(self):
        """The line for an open task whose text holds a backslash."""
        assert encode([Task(text="a\\b")]) == "0|0|a\\\\b\n"

    def test_completed_flag_and_legacy_field(self):
        """Completed is 1, and the legacy first field is always 0."""
        assert encode_task(Task(text="done", completed=True)) == "0|1|done"
        assert encode_task(Task(text="open")) == "0|0|open"

    def test_every_line_newline_terminated(self):
        """Each task gets exactly one line ending in a newline."""
        text = encode([Task(text="one"), Task(text="two\nlines"), Task(text="")])
        assert text == "0|0|one\n0|0|two\\nlines\n0|0|\n"
        assert text.count("\n") == 3

    def test_empty_list(self):
        assert encode([]) == ""


class TestDecode:
    """Test decoding the file contents."""

    def test_round_trip_preserves_order_and_state(self):
        """Text, completion and order survive a save/load cycle."""
        tasks = [Task(text="Buy milk"), Task(text="a|b", completed=True), Task(text="x\\ny\nz")]
        decoded, recovered = decode(encode(tasks))
        assert recovered is True
        assert decoded == tasks

    def test_legacy_field_ignored(self):
        """Whatever the first field holds, it doesn't matter."""
        tasks, _ = decode("7|1|old color index\n")
        assert tasks == [Task(text="old color index", completed=True)]

    def test_text_keeps_extra_separators(self):
        """Only the first two separators split fields."""
        task = decode_line("0|0|a|b|c")
        assert task.text == "a|b|c"

    def test_completed_only_when_one(self):
        """Any flag other than exactly 1 reads as incomplete."""
        assert decode_line("0|1|x").completed is True
        assert decode_line("0|true|x").completed is False
        assert decode_line("0||x").completed is False

    def test_malformed_and_blank_lines_skipped(self):
        """Lines with fewer than two separators are dropped."""
        tasks, recovered = decode("garbage\n\n0|0|keep\nonly|one\n\n")
        assert recovered is True
        assert [t.text for t in tasks] == ["keep"]

    def test_nothing_recovered(self):
        """No valid line tells the caller to seed."""
        assert decode("") == ([], False)
        assert decode("nothing here\nat all") == ([], False)

    def test_missing_final_newline(self):
        """The last line needs no terminator."""
        tasks, _ = decode("0|0|first\n0|1|second")
        assert [(t.text, t.completed) for t in tasks] == [("first", False), ("second", True)]

    def test_carriage_return_is_text(self):
        """Only \\n separates records."""
        tasks, _ = decode("0|0|a\r\n")
        assert tasks[0].text == "a\r"

    def test_empty_text_is_a_task(self):
        tasks, recovered = decode("0|0|\n")
        assert recovered is True
        assert tasks == [Task(text="")]

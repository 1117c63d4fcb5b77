"""
Unit tests for output_sink.py
"""

import gzip
import tempfile
from pathlib import Path

import pytest

from mysql_data_dump.errors import WriteError
from mysql_data_dump.output_sink import FileDestination, MemoryDestination, OutputSink


class TestFileDestination:
    """Tests for FileDestination."""

    def test_writes_lines(self):
        """Test each line is newline terminated."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "dump.sql"
            dest = FileDestination(path)
            dest.write_lines(["a", "b"])
            dest.close()

            assert path.read_text() == "a\nb\n"

    def test_appends_to_existing_file(self):
        """Test an existing file is extended, not truncated."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "dump.sql"
            path.write_text("existing\n")

            dest = FileDestination(path)
            dest.write_lines(["new"])
            dest.close()

            assert path.read_text() == "existing\nnew\n"

    def test_creates_parent_directory(self):
        """Test missing parent directories are created."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "dir" / "dump.sql"
            dest = FileDestination(path)
            dest.write_lines(["x"])
            dest.close()

            assert path.exists()

    def test_compressed(self):
        """Test gzip output gets a .gz suffix."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "dump.sql"
            dest = FileDestination(path, compress=True)
            dest.write_lines(["INSERT"])
            dest.close()

            assert dest.path == Path(str(path) + ".gz")
            with gzip.open(dest.path, "rt", encoding="utf-8") as f:
                assert f.read() == "INSERT\n"

    def test_close_without_writes(self):
        """Test closing an unused destination is a no-op."""
        with tempfile.TemporaryDirectory() as tmpdir:
            dest = FileDestination(Path(tmpdir) / "dump.sql")
            dest.close()
            assert not dest.path.exists()

    def test_unwritable_path(self):
        """Test an unopenable file raises WriteError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            dest = FileDestination(Path(tmpdir))
            with pytest.raises(WriteError):
                dest.write_lines(["x"])


class TestMemoryDestination:
    """Tests for MemoryDestination."""

    def test_take_hands_over_lines(self):
        """Test take returns lines and empties the buffer."""
        dest = MemoryDestination()
        dest.write_lines(["a", "b"])
        assert dest.take() == ["a", "b"]
        assert dest.lines == []

    def test_reset(self):
        """Test reset drops collected lines."""
        dest = MemoryDestination()
        dest.write_lines(["a"])
        dest.reset()
        assert dest.lines == []


class TestOutputSink:
    """Tests for OutputSink fan-out."""

    def test_for_options_none(self):
        """Test neither destination is required."""
        sink = OutputSink.for_options(None, return_from_function=False)
        assert sink.destinations == []
        sink.write("ignored")
        assert sink.finish_table() is None
        sink.close()

    def test_memory_only(self):
        """Test memory collection per table."""
        sink = OutputSink.for_options(None, return_from_function=True)
        sink.start_table()
        sink.write(["a", "b"])
        sink.write("c")
        assert sink.finish_table() == "a\nb\nc"

        sink.start_table()
        sink.write("d")
        assert sink.finish_table() == "d"

    def test_fan_out_to_file_and_memory(self):
        """Test the same lines reach both destinations."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "dump.sql"
            sink = OutputSink.for_options(path, return_from_function=True)

            sink.start_table()
            sink.write(["one", "two"])
            data = sink.finish_table()
            sink.start_table()
            sink.write("three")
            sink.close()

            assert data == "one\ntwo"
            # file writes are never reset between tables
            assert path.read_text() == "one\ntwo\nthree\n"

    def test_write_file_only(self):
        """Test in_memory=False leaves the memory destination untouched."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "dump.sql"
            sink = OutputSink.for_options(path, return_from_function=True)

            sink.start_table()
            sink.write("INSERT")
            assert sink.finish_table() == "INSERT"
            sink.write("", in_memory=False)
            sink.close()

            assert sink.memory.lines == []
            assert path.read_text() == "INSERT\n\n"

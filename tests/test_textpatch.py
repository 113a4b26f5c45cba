"""Tests for the idempotent text mutation helpers."""

from pathlib import Path

from memscape_setup.textpatch import (
    append_block,
    contains_marker,
    read_text_or_none,
    replace_or_append_line,
    write_text,
)


class TestAppendBlock:
    """Test marker-guarded appends."""

    def test_new_file_trims_leading_whitespace(self) -> None:
        """Test that a fresh file does not start with blank lines."""
        assert append_block(None, "\n\n## Heading\n") == "## Heading\n"

    def test_inserts_separator_when_missing(self) -> None:
        """Test that a line break is added before the block."""
        assert append_block("text", "more\n") == "text\nmore\n"

    def test_no_separator_when_present(self) -> None:
        """Test that an existing final newline is reused."""
        assert append_block("text\n", "more\n") == "text\nmore\n"

    def test_empty_existing_file(self) -> None:
        """Test that an empty file still gets a separator."""
        assert append_block("", "more\n") == "\nmore\n"


class TestReplaceOrAppendLine:
    """Test prefix-anchored line replacement."""

    def test_new_file(self) -> None:
        """Test that a missing file becomes a single line."""
        assert replace_or_append_line(None, "K=", "K=1") == "K=1\n"

    def test_replaces_first_match_only(self) -> None:
        """Test that only the first anchored line is rewritten."""
        content = "A=0\nK=old\nK=older\n"

        assert replace_or_append_line(content, "K=", "K=new") == "A=0\nK=new\nK=older\n"

    def test_anchor_must_start_line(self) -> None:
        """Test that mid-line occurrences are not anchors."""
        assert replace_or_append_line("# K=old\n", "K=", "K=1") == "# K=old\nK=1\n"

    def test_prefix_is_literal(self) -> None:
        """Test that regex metacharacters in the prefix are escaped."""
        assert replace_or_append_line("A.B=1\nAxB=2\n", "A.B=", "A.B=9") == "A.B=9\nAxB=2\n"

    def test_replacement_is_literal(self) -> None:
        """Test that backslashes in the new line are not treated as groups."""
        assert replace_or_append_line("K=old\n", "K=", r"K=\1\n") == "K=\\1\\n\n"


class TestContainsMarker:
    """Test marker lookups."""

    def test_none_content(self) -> None:
        """Test that a missing file has no marker."""
        assert not contains_marker(None, "## Memscape")

    def test_present(self) -> None:
        """Test a marker in the middle of content."""
        assert contains_marker("intro\n## Memscape\n", "## Memscape")


class TestReadWriteText:
    """Test byte-preserving file I/O."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file reads as None."""
        assert read_text_or_none(tmp_path / "absent") is None

    def test_non_utf8_bytes_survive(self, tmp_path: Path) -> None:
        """Test that undecodable bytes are written back unchanged."""
        path = tmp_path / "notes.md"
        path.write_bytes(b"caf\xe9\r\n")

        write_text(path, append_block(read_text_or_none(path), "## Memscape\n"))

        assert path.read_bytes() == b"caf\xe9\r\n## Memscape\n"

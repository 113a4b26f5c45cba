"""Idempotent text mutations anchored on a marker or a line prefix.

Both helpers take the current file content (``None`` when the file does not
exist) and return the new content. They never touch text outside the anchor
they manage, so user edits elsewhere in the file survive repeated runs.
"""

from __future__ import annotations

import re
from pathlib import Path


def read_text_or_none(path: Path) -> str | None:
    """Return the file content, or None when the file does not exist.

    Line endings are returned untranslated. Bytes that are not valid UTF-8
    are carried through as surrogate escapes so that :func:`write_text`
    restores them unchanged.
    """
    if not path.exists():
        return None
    with path.open(encoding="utf-8", errors="surrogateescape", newline="") as f:
        return f.read()


def write_text(path: Path, content: str) -> None:
    """Write content without translating line endings."""
    with path.open("w", encoding="utf-8", errors="surrogateescape", newline="") as f:
        f.write(content)


def contains_marker(content: str | None, marker: str) -> bool:
    """Check whether a marker substring appears anywhere in the content."""
    return content is not None and marker in content


def append_block(existing: str | None, block: str) -> str:
    """Append a block of text, keeping the existing content byte-for-byte.

    Args:
        existing: Current content, or None if the file is new
        block: Text to add

    Returns:
        New content. A new file gets the block with leading whitespace
        trimmed; an existing file gets a line break inserted first only
        when it does not already end with one.
    """
    if existing is None:
        return block.lstrip()

    separator = "" if existing.endswith("\n") else "\n"
    return existing + separator + block


def replace_or_append_line(existing: str | None, prefix: str, line: str) -> str:
    """Replace the first line starting with prefix, or append the line.

    Args:
        existing: Current content, or None if the file is new
        prefix: Anchor identifying the managed line (e.g. ``KEY=``)
        line: Full replacement line, without a line break

    Returns:
        New content with exactly the anchored line changed
    """
    if existing is None:
        return line + "\n"

    pattern = re.compile(rf"^{re.escape(prefix)}[^\r\n]*", re.MULTILINE)
    if pattern.search(existing):
        return pattern.sub(lambda _: line, existing, count=1)

    return append_block(existing, line + "\n")

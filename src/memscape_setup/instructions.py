"""Session-workflow snippets appended to each tool's instruction file."""

from __future__ import annotations

import json
import logging
import re
import tomllib
from pathlib import Path

from .models import Platform
from .textpatch import append_block, contains_marker, read_text_or_none, write_text

logger = logging.getLogger(__name__)

MEMSCAPE_MARKER = "## Memscape"

CLAUDE_MD_SNIPPET = """
## Memscape — Collective Memory

This project uses Memscape for persistent memory and collective knowledge.
MCP server: memscape (already configured)

**Session workflow:**
1. **Start:** Call `memscape_resume(scope: "{project_name}")` to load context from previous sessions. Then `memscape_query` about the task at hand — someone may have solved it.
2. **During work:** When you discover something worth remembering (a decision, preference, pitfall, or pattern), call `memscape_remember(scope: "{project_name}")`. When stuck >5 minutes, `memscape_query` to check if others have solved it.
3. **After solving:** If you solved a non-trivial problem (especially after failed attempts), call `memscape_contribute` to share the insight. Include what didn't work.
4. **When helped:** If a queried insight solved your problem, call `memscape_validate` on it.
5. **End:** Call `memscape_handoff(scope: "{project_name}")` with a summary of what you did, decisions made, and next steps.

**What to remember:** User preferences, architectural decisions (with rationale), pitfalls to avoid, project-specific patterns, workarounds discovered.

**What to contribute:** Solutions to non-trivial problems, failed approaches that wasted time, workarounds for tool/framework quirks, patterns that aren't in documentation.
"""

CURSOR_RULES_SNIPPET = """---
description: Memscape collective memory — query before hard problems, remember across sessions
globs:
alwaysApply: true
---

## Memscape Integration

This project uses Memscape for persistent memory and collective knowledge.

### When to Use Memscape Tools

- **Starting work:** Call `memscape_resume(scope: "{project_name}")` to load previous context
- **Stuck >5 minutes:** Call `memscape_query` with a description of your problem — someone may have solved it
- **Solved something hard:** Call `memscape_contribute` with your solution and failed approaches
- **An insight helped:** Call `memscape_validate` on it
- **Discovered a preference/decision/pitfall:** Call `memscape_remember(scope: "{project_name}")`
- **Ending work:** Call `memscape_handoff(scope: "{project_name}")` with a summary of what you accomplished

### What to Remember
User preferences, architectural decisions with rationale, pitfalls to avoid, project patterns, workarounds.

### What to Contribute
Non-trivial solutions, failed approaches, framework quirks, patterns not in documentation.
"""

WINDSURF_RULES_SNIPPET = """
## Memscape — Collective Memory

This project uses Memscape for persistent memory and collective agent knowledge.

Session workflow:
1. Start: `memscape_resume(scope: "{project_name}")` to load previous context
2. Stuck >5min: `memscape_query` to check if others have solved it
3. After solving hard problems: `memscape_contribute` with solution + failed approaches
4. Discovered something important: `memscape_remember(scope: "{project_name}")`
5. End: `memscape_handoff(scope: "{project_name}")` with summary and next steps

Remember: user preferences, decisions with rationale, pitfalls, project patterns.
Contribute: non-trivial solutions, failed approaches, undocumented workarounds.
"""

_INSTRUCTION_FILES = {
    Platform.CLAUDE_CODE: "CLAUDE.md",
    Platform.CURSOR: ".cursor/rules/memscape.mdc",
    Platform.WINDSURF: ".windsurfrules",
    Platform.GENERIC: "CLAUDE.md",
}

_SNIPPETS = {
    Platform.CLAUDE_CODE: CLAUDE_MD_SNIPPET,
    Platform.CURSOR: CURSOR_RULES_SNIPPET,
    Platform.WINDSURF: WINDSURF_RULES_SNIPPET,
    Platform.GENERIC: CLAUDE_MD_SNIPPET,
}


def has_existing_snippet(file_path: Path) -> bool:
    """Check whether the Memscape section is already in a file."""
    return contains_marker(read_text_or_none(Path(file_path)), MEMSCAPE_MARKER)


def instruction_file_name(platform: Platform) -> str:
    """Project-relative name of the platform's instruction file."""
    return _INSTRUCTION_FILES[platform]


def instruction_file_path(platform: Platform, cwd: Path) -> Path:
    return Path(cwd) / instruction_file_name(platform)


def render_snippet(platform: Platform, project_name: str) -> str:
    return _SNIPPETS[platform].format(project_name=project_name)


def add_instructions(platform: Platform, cwd: Path, project_name: str) -> Path:
    """Append the platform's session workflow to its instruction file.

    Does nothing when the Memscape marker is already present.

    Args:
        platform: Detected environment
        cwd: Project directory
        project_name: Scope name substituted into the snippet

    Returns:
        Path of the instruction file
    """
    file_path = instruction_file_path(platform, cwd)
    existing = read_text_or_none(file_path)

    if contains_marker(existing, MEMSCAPE_MARKER):
        logger.debug("Memscape section already present in %s", file_path)
        return file_path

    file_path.parent.mkdir(parents=True, exist_ok=True)
    write_text(file_path, append_block(existing, render_snippet(platform, project_name)))
    return file_path


def _name_from_package_json(cwd: Path) -> str | None:
    pkg_path = cwd / "package.json"
    if not pkg_path.exists():
        return None
    try:
        pkg = json.loads(pkg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable %s: %s", pkg_path, e)
        return None

    name = pkg.get("name") if isinstance(pkg, dict) else None
    if not isinstance(name, str) or not name:
        return None
    # @org/name -> name
    return re.sub(r"^@[^/]+/", "", name)


def _name_from_pyproject(cwd: Path) -> str | None:
    pyproject_path = cwd / "pyproject.toml"
    if not pyproject_path.exists():
        return None
    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable %s: %s", pyproject_path, e)
        return None

    project = data.get("project")
    name = project.get("name") if isinstance(project, dict) else None
    if not isinstance(name, str) or not name:
        return None
    return name


def derive_project_name(cwd: Path) -> str:
    """Pick the scope name used in snippets for this project.

    Prefers the ``name`` from ``package.json`` (without its ``@org/``
    prefix), then ``[project].name`` from ``pyproject.toml``, and finally
    the sanitized directory name.
    """
    cwd = Path(cwd)
    for reader in (_name_from_package_json, _name_from_pyproject):
        name = reader(cwd)
        if name:
            return name

    return re.sub(r"[^a-z0-9-]", "-", cwd.name.lower())

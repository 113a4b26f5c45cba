"""Detection of the AI coding assistant in use for a project."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .models import DetectionResult, Platform

logger = logging.getLogger(__name__)


def _exists(path: Path) -> bool:
    """Probe a path, treating permission and other OS errors as absence."""
    try:
        return path.exists()
    except OSError as e:
        logger.debug("Cannot probe %s: %s", path, e)
        return False


def _probes(cwd: Path, home: Path) -> list[tuple[Callable[[], bool], Platform]]:
    """Ordered detection predicates; the first one that holds wins."""
    return [
        (lambda: _exists(cwd / ".claude") or _exists(home / ".claude"), Platform.CLAUDE_CODE),
        (lambda: _exists(cwd / ".cursor"), Platform.CURSOR),
        (lambda: _exists(home / ".codeium" / "windsurf"), Platform.WINDSURF),
    ]


def detect_environment(cwd: Path, home: Path | None = None) -> DetectionResult:
    """Classify the working context into exactly one platform.

    Args:
        cwd: Project directory to inspect
        home: User home directory, defaults to ``Path.home()``

    Returns:
        Detection result for the highest-priority platform found, or
        the generic platform when no marker is present
    """
    if home is None:
        home = Path.home()

    for matches, platform in _probes(Path(cwd), Path(home)):
        if matches():
            logger.debug("Detected %s in %s", platform.label, cwd)
            return DetectionResult.for_platform(platform)

    return DetectionResult.for_platform(Platform.GENERIC)

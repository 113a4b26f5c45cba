"""API key validation and persistence in the project's ``.env.local``."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .models import API_KEY_ENV_VAR, API_KEY_LENGTH, API_KEY_PREFIX
from .textpatch import read_text_or_none, replace_or_append_line, write_text

logger = logging.getLogger(__name__)

ENV_FILE_NAME = ".env.local"

_KEY_LINE = re.compile(rf"^{API_KEY_ENV_VAR}=(.+)$", re.MULTILINE)


def is_valid_api_key_format(candidate: str) -> bool:
    """Check that a key has the Memscape prefix and total length."""
    return candidate.startswith(API_KEY_PREFIX) and len(candidate) == API_KEY_LENGTH


def env_file_path(cwd: Path) -> Path:
    """Location of the secret file for a project."""
    return Path(cwd) / ENV_FILE_NAME


def save_api_key(cwd: Path, api_key: str) -> Path:
    """Write the API key into ``.env.local``, replacing any previous value.

    Other lines in the file are left untouched and in order.

    Args:
        cwd: Project directory
        api_key: Key to persist

    Returns:
        Path of the secret file
    """
    env_path = env_file_path(cwd)
    existing = read_text_or_none(env_path)
    updated = replace_or_append_line(
        existing,
        f"{API_KEY_ENV_VAR}=",
        f"{API_KEY_ENV_VAR}={api_key}",
    )
    if updated != existing:
        write_text(env_path, updated)
    return env_path


def get_existing_api_key(cwd: Path) -> str | None:
    """Return the stored API key if present and well-formed.

    A malformed value is treated the same as a missing one.
    """
    try:
        content = read_text_or_none(env_file_path(cwd))
    except OSError as e:
        logger.debug("Cannot read %s: %s", ENV_FILE_NAME, e)
        return None

    if content is None:
        return None

    match = _KEY_LINE.search(content)
    if match is None:
        return None

    value = match.group(1).strip()
    if not is_valid_api_key_format(value):
        logger.debug("Ignoring malformed %s in %s", API_KEY_ENV_VAR, ENV_FILE_NAME)
        return None
    return value

"""Runtime settings for the Memscape service endpoints."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, ValidationError

from .exceptions import MemscapeSetupError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://www.memscape.org"
DEFAULT_MCP_URL = "https://www.memscape.org/api/mcp"


class Settings(BaseModel):
    """Endpoints and network limits used by the setup flow."""

    api_base: str = Field(default=DEFAULT_API_BASE, description="Registration API base URL")
    mcp_url: str = Field(default=DEFAULT_MCP_URL, description="MCP endpoint written into configs")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``MEMSCAPE_*`` environment variables.

    Args:
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        Settings with overrides applied

    Raises:
        MemscapeSetupError: If an override has an invalid value
    """
    if environ is None:
        environ = os.environ

    overrides: dict[str, str] = {}
    for field_name, var in (
        ("api_base", "MEMSCAPE_API_BASE"),
        ("mcp_url", "MEMSCAPE_MCP_URL"),
        ("timeout", "MEMSCAPE_TIMEOUT"),
    ):
        value = environ.get(var)
        if value:
            logger.debug("Using %s from %s", field_name, var)
            overrides[field_name] = value

    try:
        settings = Settings.model_validate(overrides)
    except ValidationError as e:
        msg = f"Invalid MEMSCAPE_* environment override: {e}"
        raise MemscapeSetupError(msg) from e

    settings.api_base = settings.api_base.rstrip("/")
    return settings

"""MCP configuration documents for each supported environment.

Every writer goes through :func:`upsert_server_entry`, which owns a single
named entry inside the ``mcpServers`` collection and leaves the rest of the
document as the user left it.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from .config import Settings
from .exceptions import ConfigurationError
from .models import API_KEY_ENV_VAR, SERVER_NAME, McpServerConfig, Platform, Scope

logger = logging.getLogger(__name__)

SERVERS_KEY = "mcpServers"
ENV_REFERENCE = f"${{{API_KEY_ENV_VAR}}}"

CLAUDE_CLI_DOCS = "https://docs.anthropic.com/en/docs/claude-code"


def load_config_document(path: Path) -> dict[str, Any]:
    """Read a JSON config document, falling back to an empty one.

    Missing, unreadable, corrupt and non-object documents all yield ``{}``
    so that the next write supersedes them.
    """
    if not path.exists():
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("Starting fresh, cannot parse %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.debug("Starting fresh, %s is not a JSON object", path)
        return {}
    return data


def render_config_document(document: dict[str, Any]) -> str:
    """Serialize a document with stable two-space indentation."""
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def upsert_server_entry(
    path: Path,
    server_name: str,
    server_config: dict[str, Any],
) -> None:
    """Install or replace one named entry in ``mcpServers``.

    Args:
        path: Config document to create or update
        server_name: Entry owned by this tool
        server_config: Value stored under the entry

    Raises:
        ConfigurationError: If the document cannot be written
    """
    document = load_config_document(path)

    servers = document.get(SERVERS_KEY)
    if not isinstance(servers, dict):
        servers = {}
    servers[server_name] = server_config
    document[SERVERS_KEY] = servers

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_config_document(document), encoding="utf-8")
    except OSError as e:
        msg = f"Failed to write {path}: {e}"
        raise ConfigurationError(msg) from e
    logger.debug("Wrote %s entry to %s", server_name, path)


def has_complete_entry(path: Path, server_name: str) -> bool:
    """Check whether an entry exists and carries an Authorization header."""
    servers = load_config_document(path).get(SERVERS_KEY)
    if not isinstance(servers, dict):
        return False
    entry = servers.get(server_name)
    if not isinstance(entry, dict):
        return False
    headers = entry.get("headers")
    return isinstance(headers, dict) and headers.get("Authorization") is not None


def _bearer(credential: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {credential}"}


def cursor_config_path(cwd: Path) -> Path:
    return Path(cwd) / ".cursor" / "mcp.json"


def windsurf_config_path(home: Path | None = None) -> Path:
    if home is None:
        home = Path.home()
    return Path(home) / ".codeium" / "windsurf" / "mcp_config.json"


def mcp_json_path(cwd: Path) -> Path:
    return Path(cwd) / ".mcp.json"


def configure_mcp(
    platform: Platform,
    cwd: Path,
    api_key: str,
    scope: Scope = Scope.PROJECT,
    *,
    settings: Settings | None = None,
    home: Path | None = None,
) -> Path | None:
    """Configure the Memscape MCP server for the detected platform.

    Args:
        platform: Detected environment
        cwd: Project directory
        api_key: Validated API key
        scope: Claude Code scope for the server entry
        settings: Endpoint settings, defaults to the built-in ones
        home: User home directory, defaults to ``Path.home()``

    Returns:
        Path of the written config document, or None when no file was
        written by this process

    Raises:
        ConfigurationError: If the Claude Code CLI is missing or fails, or
            the config document cannot be written
    """
    settings = settings or Settings()

    if platform == Platform.CLAUDE_CODE:
        _configure_claude_code(Path(cwd), scope, settings)
        return None

    if platform == Platform.CURSOR:
        path = cursor_config_path(cwd)
        entry = McpServerConfig(url=settings.mcp_url, headers=_bearer(ENV_REFERENCE))
    elif platform == Platform.WINDSURF:
        # Private user-level file, holds the literal key.
        path = windsurf_config_path(home)
        entry = McpServerConfig(url=settings.mcp_url, headers=_bearer(api_key))
    else:
        logger.debug("No automatic MCP configuration for %s", platform.label)
        return None

    upsert_server_entry(path, SERVER_NAME, entry.to_document())
    return path


def _configure_claude_code(cwd: Path, scope: Scope, settings: Settings) -> None:
    command = [
        "claude", "mcp", "add",
        "-t", "http",
        "-s", scope.value,
        SERVER_NAME, settings.mcp_url,
        "-e", API_KEY_ENV_VAR,
    ]
    logger.debug("Running %s", " ".join(command))

    try:
        subprocess.run(command, cwd=cwd, capture_output=True, text=True, check=True)
    except FileNotFoundError as e:
        msg = (
            f"Claude CLI not found. Install it first: {CLAUDE_CLI_DOCS}\n"
            f"  Then run: claude mcp add -t http -s {scope.value} "
            f"{SERVER_NAME} {settings.mcp_url} -e {API_KEY_ENV_VAR}"
        )
        raise ConfigurationError(msg) from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or e.stdout or "").strip() or f"exit status {e.returncode}"
        msg = f"claude mcp add failed: {detail}"
        raise ConfigurationError(msg, details={"returncode": e.returncode}) from e
    except OSError as e:
        msg = f"Failed to run claude: {e}"
        raise ConfigurationError(msg) from e


def generate_mcp_json(cwd: Path, settings: Settings | None = None) -> Path:
    """Write the shareable ``.mcp.json`` that references the key by env var."""
    settings = settings or Settings()
    path = mcp_json_path(cwd)
    entry = McpServerConfig(
        type="http",
        url=settings.mcp_url,
        headers=_bearer(ENV_REFERENCE),
    )
    upsert_server_entry(path, SERVER_NAME, entry.to_document())
    return path


def has_mcp_json(cwd: Path) -> bool:
    return has_complete_entry(mcp_json_path(cwd), SERVER_NAME)

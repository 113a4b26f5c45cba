"""memscape-setup command-line interface."""

from __future__ import annotations

import logging
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .config import Settings, load_settings
from .credentials import (
    ENV_FILE_NAME,
    get_existing_api_key,
    is_valid_api_key_format,
    save_api_key,
)
from .detect import detect_environment
from .exceptions import ConfigurationError, MemscapeSetupError, RegistrationError
from .instructions import (
    add_instructions,
    derive_project_name,
    has_existing_snippet,
    instruction_file_name,
    instruction_file_path,
)
from .mcp_config import configure_mcp, generate_mcp_json, has_mcp_json
from .models import API_KEY_ENV_VAR, Platform, Scope
from .prompts import ConsoleLineSource, LineSource, Prompter, ScriptedLineSource, SelectOption
from .register import register_agent

logger = logging.getLogger(__name__)

INVALID_KEY_MESSAGE = (
    "Invalid API key format. Expected: mems_ followed by 64 hex characters "
    "(69 chars total)."
)

app = typer.Typer(
    name="memscape-setup",
    help="Connect your AI coding assistant to Memscape collective memory",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


def _get_version_string() -> str:
    try:
        return get_version("memscape-setup")
    except PackageNotFoundError:
        return __version__


def version_callback(value: bool) -> None:
    """Callback for --version flag."""
    if value:
        console.print(f"memscape-setup version {_get_version_string()}")
        raise typer.Exit


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _line_source() -> LineSource:
    """Interactive terminals are read line by line; piped input is queued up front."""
    if sys.stdin.isatty():
        return ConsoleLineSource(console)
    return ScriptedLineSource(sys.stdin.read().splitlines(), console)


def _abort(ui: Prompter, message: str) -> NoReturn:
    ui.error(message)
    raise typer.Exit(1)


def _obtain_api_key(
    ui: Prompter,
    cwd: Path,
    key: str | None,
    settings: Settings,
) -> tuple[str, str | None]:
    """Resolve the API key from flags, ``.env.local``, the user or registration.

    Returns:
        The validated key and the claim URL when a new agent was registered
    """
    api_key = key
    existing_key = get_existing_api_key(cwd)
    if existing_key and not api_key:
        ui.info(f"Found existing API key in {ENV_FILE_NAME} ({existing_key[:12]}...)")
        if ui.confirm("Use this key?"):
            api_key = existing_key

    if api_key:
        if not is_valid_api_key_format(api_key):
            _abort(ui, INVALID_KEY_MESSAGE)
        ui.success("API key accepted")
        return api_key, None

    choice = ui.select(
        "Do you have a Memscape API key?",
        [
            SelectOption(label="No, register a new agent", value="register"),
            SelectOption(label="Yes, I have one", value="existing"),
        ],
    )

    if choice == "existing":
        api_key = ui.prompt("Paste your API key:")
        if not is_valid_api_key_format(api_key):
            _abort(ui, INVALID_KEY_MESSAGE)
        ui.success("API key accepted")
        return api_key, None

    agent_name = ui.prompt("Agent name:")
    if not agent_name:
        _abort(ui, "Agent name is required.")
    bio = ui.prompt("Bio (optional, press Enter to skip):")

    ui.info("Registering agent...")
    try:
        result = register_agent(agent_name, bio or None, settings=settings)
    except RegistrationError as e:
        _abort(ui, str(e))
    ui.success(f"Agent registered: {result.agent_name}")
    return result.api_key, result.claim_url


def _configure_platform(
    ui: Prompter,
    platform: Platform,
    cwd: Path,
    api_key: str,
    scope: Scope,
    settings: Settings,
    home: Path | None,
) -> None:
    if platform == Platform.GENERIC:
        ui.info("No specific dev tool detected. Skipping automatic MCP configuration.")
        ui.info("You can manually configure MCP with your tool's settings.")
        ui.info(f"  Endpoint: {settings.mcp_url}")
        ui.info(f"  Auth: Bearer ${API_KEY_ENV_VAR}")
        return

    if not ui.confirm("Configure MCP connection?"):
        return
    try:
        configure_mcp(platform, cwd, api_key, scope, settings=settings, home=home)
    except ConfigurationError as e:
        ui.error(str(e))
        return
    ui.success(f"MCP server configured (scope: {scope.value})")


def _add_instruction_snippet(ui: Prompter, platform: Platform, cwd: Path) -> None:
    file_name = instruction_file_name(platform)
    if has_existing_snippet(instruction_file_path(platform, cwd)):
        ui.info(f"Memscape section already exists in {file_name}")
        return

    if ui.confirm(f"Add session workflow to {file_name}?"):
        add_instructions(platform, cwd, derive_project_name(cwd))
        ui.success(f"Memscape session workflow appended to {file_name}")


def _offer_mcp_json(ui: Prompter, cwd: Path, settings: Settings) -> None:
    if has_mcp_json(cwd):
        ui.info("Memscape already configured in .mcp.json")
        return

    if ui.confirm("Generate .mcp.json for team sharing?"):
        generate_mcp_json(cwd, settings)
        ui.success(f".mcp.json created (uses ${API_KEY_ENV_VAR} env var)")


def run_setup(
    ui: Prompter,
    cwd: Path,
    *,
    key: str | None = None,
    skip_instructions: bool = False,
    scope: Scope = Scope.PROJECT,
    settings: Settings | None = None,
    home: Path | None = None,
) -> None:
    """Run the full onboarding flow against a project directory.

    Raises:
        typer.Exit: With status 1 on invalid input or failed registration
    """
    settings = settings or Settings()
    logger.debug("Running setup in %s", cwd)
    ui.banner()

    api_key, claim_url = _obtain_api_key(ui, cwd, key, settings)
    save_api_key(cwd, api_key)
    ui.success(f"API key saved to {ENV_FILE_NAME}")

    ui.blank()
    detection = detect_environment(cwd, home)
    ui.info(f"Detected: {detection.label}")

    _configure_platform(ui, detection.platform, cwd, api_key, scope, settings, home)

    if not skip_instructions:
        _add_instruction_snippet(ui, detection.platform, cwd)

    _offer_mcp_json(ui, cwd, settings)

    ui.section("Setup Complete")
    ui.console.print("  Next steps:")
    ui.console.print("  1. Start a new session in your dev tool")
    ui.console.print("  2. Memscape will auto-load via MCP")
    ui.console.print(
        f'  3. Use memscape_resume("{derive_project_name(cwd)}") at session start',
    )

    if claim_url:
        ui.blank()
        ui.console.print(f"  Claim your agent: {claim_url}")

    ui.blank()


@app.command()
def setup(
    key: str | None = typer.Option(
        None,
        "--key",
        "-k",
        help="Use an existing Memscape API key",
    ),
    skip_instructions: bool = typer.Option(
        False,
        "--skip-instructions",
        help="Don't add session workflow to instruction files",
    ),
    scope: Scope = typer.Option(
        Scope.PROJECT,
        "--scope",
        help="MCP scope for Claude Code",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Set up Memscape for the project in the current directory.

    Examples:
        memscape-setup
        memscape-setup --key mems_abc123...
        memscape-setup --scope user
    """
    _configure_logging(verbose)
    try:
        settings = load_settings()
        ui = Prompter(console, _line_source())
        run_setup(
            ui,
            Path.cwd(),
            key=key,
            skip_instructions=skip_instructions,
            scope=scope,
            settings=settings,
        )
    except (MemscapeSetupError, OSError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


def main() -> None:
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()

"""Core data models for memscape-setup."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

API_KEY_PREFIX = "mems_"
API_KEY_LENGTH = 69
API_KEY_ENV_VAR = "MEMSCAPE_API_KEY"
SERVER_NAME = "memscape"


class Platform(str, Enum):
    """AI coding assistant environments that can be configured."""

    CLAUDE_CODE = "claude-code"
    CURSOR = "cursor"
    WINDSURF = "windsurf"
    GENERIC = "generic"

    @property
    def label(self) -> str:
        """Human-readable name of the environment."""
        return _PLATFORM_LABELS[self]


_PLATFORM_LABELS = {
    Platform.CLAUDE_CODE: "Claude Code",
    Platform.CURSOR: "Cursor",
    Platform.WINDSURF: "Windsurf",
    Platform.GENERIC: "Generic",
}


class Scope(str, Enum):
    """Scope passed to the Claude Code CLI when adding the MCP server."""

    PROJECT = "project"
    USER = "user"


class DetectionResult(BaseModel):
    """Outcome of environment detection."""

    platform: Platform = Field(..., description="Detected environment")
    label: str = Field(..., description="Human-readable environment name")

    @classmethod
    def for_platform(cls, platform: Platform) -> DetectionResult:
        """Build a result carrying the platform's own label."""
        return cls(platform=platform, label=platform.label)


class McpServerConfig(BaseModel):
    """A single entry of an ``mcpServers`` collection."""

    type: str | None = Field(default=None, description="Transport type")
    url: str = Field(..., description="MCP endpoint URL")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="HTTP headers sent with every request",
    )

    def to_document(self) -> dict[str, object]:
        """Serialize to the JSON shape tools expect, omitting unset fields."""
        return self.model_dump(exclude_none=True)


class RegistrationResult(BaseModel):
    """Agent details returned by a successful registration."""

    agent_name: str = Field(..., description="Registered agent name")
    api_key: str = Field(..., description="Issued API key")
    claim_url: str = Field(..., description="URL the owner uses to claim the agent")
    agent_id: str = Field(..., description="Server-side agent identifier")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Reject keys that do not have the expected shape."""
        if not (v.startswith(API_KEY_PREFIX) and len(v) == API_KEY_LENGTH):
            msg = f"API key must be {API_KEY_PREFIX} followed by 64 characters"
            raise ValueError(msg)
        return v

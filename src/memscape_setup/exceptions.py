"""Custom exceptions for memscape-setup."""

from typing import Any


class MemscapeSetupError(Exception):
    """Base exception for all memscape-setup errors.

    ``details`` carries machine-readable context such as an HTTP status code
    or a subprocess return code.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}


class RegistrationError(MemscapeSetupError):
    """Raised when the registration API rejects a request or is unreachable."""


class ConfigurationError(MemscapeSetupError):
    """Raised when an MCP configuration step cannot be completed."""

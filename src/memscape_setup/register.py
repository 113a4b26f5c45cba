"""Agent registration against the Memscape API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .config import Settings
from .exceptions import RegistrationError
from .models import RegistrationResult

logger = logging.getLogger(__name__)

REGISTER_PATH = "/api/v1/agents/register"


def _error_message(response: httpx.Response) -> str:
    """Pick the user-facing message for a failed registration."""
    if response.status_code == 409:
        return "An agent with this name already exists. Try a different name."
    if response.status_code == 429:
        return "Rate limited. Please wait a moment and try again."

    message = f"Registration failed (HTTP {response.status_code})"
    try:
        payload = response.json()
    except ValueError:
        return message

    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return message


def _parse_result(payload: Any) -> RegistrationResult:
    try:
        agent = payload["agent"]
        return RegistrationResult(
            agent_name=agent["name"],
            api_key=payload["apiKey"],
            claim_url=payload["claimUrl"],
            agent_id=str(agent["id"]),
        )
    except (KeyError, TypeError, ValidationError) as e:
        msg = f"Unexpected registration response: {e}"
        raise RegistrationError(msg) from e


def register_agent(
    name: str,
    bio: str | None = None,
    *,
    settings: Settings | None = None,
    client: httpx.Client | None = None,
) -> RegistrationResult:
    """Register a new agent and return its credentials.

    Args:
        name: Agent name
        bio: Optional short description
        settings: Endpoint settings, defaults to the built-in ones
        client: HTTP client to use, a short-lived one is created if omitted

    Returns:
        Registration details including the issued API key

    Raises:
        RegistrationError: On network failure or any non-201 response
    """
    settings = settings or Settings()
    body: dict[str, str] = {"name": name}
    if bio:
        body["bio"] = bio

    url = f"{settings.api_base}{REGISTER_PATH}"
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=settings.timeout)

    try:
        logger.debug("POST %s", url)
        response = client.post(url, json=body)
    except httpx.RequestError as e:
        msg = f"Network error: {e}. Check your internet connection."
        raise RegistrationError(msg) from e
    finally:
        if owns_client:
            client.close()

    logger.debug("Registration returned HTTP %s", response.status_code)
    if response.status_code != 201:
        raise RegistrationError(
            _error_message(response),
            details={"status_code": response.status_code},
        )

    try:
        payload = response.json()
    except ValueError as e:
        msg = f"Unexpected registration response: {e}"
        raise RegistrationError(msg) from e
    return _parse_result(payload)

"""Shared configuration helpers for Credit Calculator."""

import os
from typing import Optional

from dotenv import load_dotenv

from src.shared.errors import ConfigurationError

DEFAULT_RELAY_URL = "http://localhost:3000/api/agent"
DEFAULT_AGENT_ID = "695bb57dc2dad05ba69ad552"


def load_environment() -> None:
    """Load environment variables from .env if present."""
    load_dotenv()


def get_relay_url() -> str:
    """Return the agent relay endpoint with a sensible default."""
    return os.getenv("AGENT_RELAY_URL", DEFAULT_RELAY_URL)


def get_agent_id() -> str:
    """Return the routing identifier of the credit calculator manager agent."""
    return os.getenv("CREDIT_AGENT_ID", DEFAULT_AGENT_ID)


def get_relay_timeout() -> Optional[float]:
    """
    Return the relay timeout in seconds.

    Returns None when AGENT_RELAY_TIMEOUT is unset or invalid, in which case
    the HTTP client's own default applies.
    """
    raw = os.getenv("AGENT_RELAY_TIMEOUT")
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def get_flask_secret() -> str:
    """Return the Flask secret key or raise if missing."""
    secret = os.getenv("FLASK_SECRET_KEY")
    if not secret:
        raise ConfigurationError(
            "FLASK_SECRET_KEY environment variable is not set. Set a strong value for production."
        )
    return secret


def get_port(default: int = 8000) -> int:
    """Return the desired port for local hosting."""
    try:
        return int(os.getenv("PORT", default))
    except ValueError:
        return default

"""
Environment configuration for the Langdock A2A server

Settings come from environment variables, optionally seeded from a local
.env file. AGENT_URL is required; everything else has a default.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Fixed listening address
PORT = 3333
HOST = "0.0.0.0"

TRUTHY_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """
    Server configuration.

    Attributes:
        agent_url (str): Externally reachable base URL advertised in the agent card
        variant (str): Which executor to serve, "langdock" or "canned"
        debug (bool): Whether to log at DEBUG level
    """

    agent_url: str
    variant: str = "langdock"
    debug: bool = False

    @property
    def agent_card_url(self) -> str:
        return f"{self.agent_url.rstrip('/')}/.well-known/agent-card.json"


def load_settings() -> Settings:
    """
    Load settings from the environment.

    Returns:
        Settings: The server configuration

    Raises:
        RuntimeError: If AGENT_URL is missing or empty
    """
    load_dotenv()

    agent_url = os.getenv("AGENT_URL")
    if not agent_url:
        raise RuntimeError("AGENT_URL environment variable is required")

    return Settings(
        agent_url=agent_url,
        variant=os.getenv("AGENT_VARIANT", "langdock"),
        debug=os.getenv("DEBUG", "").strip().lower() in TRUTHY_VALUES,
    )

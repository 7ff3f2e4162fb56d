# src/tally_governance/mcp/config.py
"""Runtime configuration for the Tally MCP server.

Values come from the environment, optionally seeded from ``.env`` and
``.env.local`` in the working directory:

    TALLY_API_KEY     (required)
    TALLY_API_URL     default https://api.tally.xyz/query
    TALLY_TIMEOUT     seconds, default 30
    TALLY_USER_AGENT  default tally-governance-mcp/1.0
    TALLY_LOG_LEVEL   default INFO (read by the server module)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from tally_governance.mcp.errors import ConfigError

DEFAULT_BASE_URL = "https://api.tally.xyz/query"
DEFAULT_TIMEOUT = 30
DEFAULT_USER_AGENT = "tally-governance-mcp/1.0"


def load_env_files(root: Optional[Path] = None) -> None:
    """Load .env (no override) and then .env.local (override) if present."""
    base = Path(root) if root else Path.cwd()
    dotenv_path = base / ".env"
    dotenv_local = base / ".env.local"
    if dotenv_path.exists():
        load_dotenv(dotenv_path=dotenv_path, override=False)
    if dotenv_local.exists():
        load_dotenv(dotenv_path=dotenv_local, override=True)


@dataclass(frozen=True)
class TallyConfig:
    """Connection settings handed to the transport at construction."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if not (self.api_key or "").strip():
            raise ConfigError("TALLY_API_KEY environment variable is required")

    @classmethod
    def from_env(cls, root: Optional[Path] = None) -> "TallyConfig":
        load_env_files(root)
        timeout_raw = os.getenv("TALLY_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = int(timeout_raw)
        except ValueError:
            raise ConfigError(f"TALLY_TIMEOUT must be an integer, got {timeout_raw!r}")
        return cls(
            api_key=os.getenv("TALLY_API_KEY", ""),
            base_url=os.getenv("TALLY_API_URL", DEFAULT_BASE_URL),
            timeout=timeout,
            user_agent=os.getenv("TALLY_USER_AGENT", DEFAULT_USER_AGENT),
        )

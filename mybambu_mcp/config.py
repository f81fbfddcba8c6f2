"""
Runtime configuration for the MyBambu MCP server.

Values come from the process environment (optionally seeded from a .env file)
and are read once at startup into an immutable Settings value that is passed
explicitly to the transfer service and the tool server.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger("mybambu.config")

DEFAULT_WISE_API_URL = "https://api.sandbox.transferwise.tech"


class Mode(Enum):
    DEMO = "DEMO"
    PRODUCTION = "PRODUCTION"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Mode":
        value = (raw or cls.DEMO.value).strip().upper()
        try:
            return cls(value)
        except ValueError:
            logger.warning("Unknown MODE=%r; falling back to DEMO", raw)
            return cls.DEMO


@dataclass(frozen=True)
class Settings:
    mode: Mode = Mode.DEMO
    wise_api_key: str = ""
    wise_profile_id: str = ""
    wise_api_url: str = DEFAULT_WISE_API_URL
    wise_request_timeout: float = 30.0
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    mcp_transport: str = "stdio"
    mcp_host: str = "127.0.0.1"
    mcp_port: int = 9100

    @property
    def use_real_provider(self) -> bool:
        # Real transfers need both PRODUCTION mode and an API key.
        return self.mode is Mode.PRODUCTION and bool(self.wise_api_key)

    def describe(self) -> dict:
        """Loggable view of the settings; never includes the API key itself."""
        return {
            "mode": self.mode.value,
            "wise_api_url": self.wise_api_url,
            "api_key_present": bool(self.wise_api_key),
            "profile_id_present": bool(self.wise_profile_id),
            "transport": self.mcp_transport,
        }


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from `env`, or from os.environ after loading .env.

    Variables already present in the environment win over the .env file.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    return Settings(
        mode=Mode.parse(env.get("MODE")),
        wise_api_key=env.get("WISE_API_KEY", "").strip(),
        wise_profile_id=env.get("WISE_PROFILE_ID", "").strip(),
        wise_api_url=env.get("WISE_API_URL", DEFAULT_WISE_API_URL).rstrip("/"),
        wise_request_timeout=float(env.get("WISE_REQUEST_TIMEOUT", "30")),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
        log_dir=Path(env.get("LOG_DIR", "logs")),
        mcp_transport=env.get("MCP_TRANSPORT", "stdio"),
        mcp_host=env.get("MCP_HOST", "127.0.0.1"),
        mcp_port=int(env.get("MCP_PORT", "9100")),
    )

"""
Runtime configuration for the Clubhouse team manager.

Values come from environment variables so the same code can run against a
local data file in development and a configured sync service elsewhere.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import DEFAULT_DATA_FILE, DEFAULT_SYNC_TIMEOUT_S


@dataclass
class AppConfig:
    """
    Application settings.

    Attributes:
        data_file: Path of the persisted snapshot document
        sync_url: Base URL of the remote sync service (None disables sync)
        sync_timeout: Timeout in seconds for remote sync requests
        log_level: Logging level name for the root logger
        host: Interface the web API binds to
        port: Port the web API listens on
    """
    data_file: str = DEFAULT_DATA_FILE
    sync_url: Optional[str] = None
    sync_timeout: float = DEFAULT_SYNC_TIMEOUT_S
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 7122

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            AppConfig with defaults for unset variables

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        return cls(
            data_file=env.get("CLUBHOUSE_DATA_FILE", DEFAULT_DATA_FILE),
            sync_url=env.get("CLUBHOUSE_SYNC_URL") or None,
            sync_timeout=float(env.get("CLUBHOUSE_SYNC_TIMEOUT", DEFAULT_SYNC_TIMEOUT_S)),
            log_level=env.get("CLUBHOUSE_LOG_LEVEL", "INFO").upper(),
            host=env.get("CLUBHOUSE_HOST", "127.0.0.1"),
            port=int(env.get("CLUBHOUSE_PORT", "7122")),
        )

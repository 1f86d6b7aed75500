"""Configuration for termfeed.

Values come from defaults, then environment variables, then explicit
overrides (normally the CLI flags):

    TERMFEED_DATA_DIR       directory for bookmarks/categories/read state
    TERMFEED_LOG_LEVEL      logging level name (default INFO)
    TERMFEED_FETCH_TIMEOUT  per-feed HTTP timeout in seconds (default 15)
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional


def _default_data_dir() -> Path:
    """Get the data directory, respecting TERMFEED_DATA_DIR for testing."""
    env_path = os.environ.get("TERMFEED_DATA_DIR")
    if env_path:
        return Path(env_path)
    return Path.home() / ".termfeed"


@dataclass
class AppConfig:
    """Runtime configuration for the reader."""

    name: str = "termfeed"
    data_dir: Path = field(default_factory=_default_data_dir)
    log_level: str = "INFO"
    log_file: str = "termfeed.log"
    fetch_timeout: float = 15.0
    dashboard_limit: int = 100
    error_display_seconds: float = 3.0
    tick_seconds: float = 0.1
    wrap_width: int = 80

    @property
    def log_path(self) -> Path:
        return self.data_dir / self.log_file


def load_config(**overrides: Any) -> AppConfig:
    """Build a configuration from the environment plus explicit overrides.

    Args:
        **overrides: Field values that win over the environment. ``None``
            values are ignored so optional CLI flags can be passed straight
            through.

    Returns:
        A new AppConfig instance
    """
    config = AppConfig()

    log_level = os.environ.get("TERMFEED_LOG_LEVEL")
    if log_level:
        config.log_level = log_level.upper()

    timeout = os.environ.get("TERMFEED_FETCH_TIMEOUT")
    if timeout:
        try:
            config.fetch_timeout = float(timeout)
        except ValueError:
            raise ValueError(f"Invalid TERMFEED_FETCH_TIMEOUT: {timeout}") from None

    overrides = {k: v for k, v in overrides.items() if v is not None}
    if "data_dir" in overrides:
        overrides["data_dir"] = Path(overrides["data_dir"]).expanduser()
    if "log_level" in overrides:
        overrides["log_level"] = str(overrides["log_level"]).upper()

    return replace(config, **overrides)


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create the process-wide configuration."""
    global _config

    if _config is None:
        _config = load_config()
    return _config


def set_config(config: AppConfig) -> None:
    """Install ``config`` as the process-wide configuration."""
    global _config
    _config = config

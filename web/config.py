"""
Web application configuration for BOATMRP.

Settings come from BOATMRP_* environment variables; anything unset
falls back to the defaults below.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from boatmrp import __version__
from boatmrp.config.schema import PlannerConfig, get_default_config


@dataclass
class WebConfig:
    """Configuration for the BOATMRP web application."""

    # Application settings
    app_name: str = "BOATMRP"
    app_version: str = __version__
    debug: bool = False

    # Database settings
    database_url: str = "sqlite:///./data/boatmrp.db"

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8000

    # Planner configuration file (defaults used if None)
    planner_config_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "WebConfig":
        """Create config from environment variables."""
        planner_config = os.getenv("BOATMRP_PLANNER_CONFIG", "")
        return cls(
            debug=os.getenv("BOATMRP_DEBUG", "").lower() in ("true", "1", "yes"),
            database_url=os.getenv("BOATMRP_DATABASE_URL", "sqlite:///./data/boatmrp.db"),
            host=os.getenv("BOATMRP_HOST", "127.0.0.1"),
            port=int(os.getenv("BOATMRP_PORT", "8000")),
            planner_config_path=Path(planner_config) if planner_config else None,
        )

    def planner_config(self) -> PlannerConfig:
        """Load the planner configuration the web app runs with."""
        if self.planner_config_path is None:
            return get_default_config()
        return PlannerConfig.from_file(self.planner_config_path)


def get_config() -> WebConfig:
    """Read a fresh configuration from the environment."""
    return WebConfig.from_env()


# Global config instance (lazy initialization)
_config: Optional[WebConfig] = None


def get_settings() -> WebConfig:
    """Return the process-wide configuration, reading it on first use."""
    global _config
    if _config is None:
        _config = get_config()
    return _config

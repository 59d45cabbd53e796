"""Configuration and logging setup."""

from lifeintel.config.log_config import configure_logging
from lifeintel.config.settings import Settings, settings

__all__ = ["Settings", "configure_logging", "settings"]

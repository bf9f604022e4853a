"""Process configuration: settings and logging."""

from ptoledger.config.logging import configure_logging, get_logger
from ptoledger.config.settings import Settings, get_settings

__all__ = ["Settings", "configure_logging", "get_logger", "get_settings"]

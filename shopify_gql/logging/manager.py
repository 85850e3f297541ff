"""
Logging manager for shopify_gql.

This module provides centralized logging configuration and management.
"""

import logging
import sys
from typing import Dict, Optional

from ..config.models import LoggingConfig, LogLevel
from .filters import SensitiveDataFilter
from .formatters import ColoredFormatter, StructuredFormatter

PACKAGE_LOGGER = "shopify_gql"


class LoggingManager:
    """
    Centralized logging manager.

    Handlers are attached to the ``shopify_gql`` package logger, so the
    host application's root logger is left alone.
    """

    def __init__(self, logger_name: str = PACKAGE_LOGGER) -> None:
        """Initialize logging manager."""
        self.logger_name = logger_name
        self._configured = False
        self._handlers: Dict[str, logging.Handler] = {}

    def setup_logging(self, config: LoggingConfig) -> None:
        """
        Setup logging based on configuration.

        Args:
            config: Logging configuration
        """
        if self._configured:
            self.cleanup()

        package_logger = logging.getLogger(self.logger_name)
        package_logger.setLevel(getattr(logging, config.level.value))

        # Setup console handler
        if config.enable_console:
            self._setup_console_handler(config)

        self._configured = True

        logging.getLogger(__name__).debug("Logging system configured")

    def _setup_console_handler(self, config: LoggingConfig) -> None:
        """Setup console logging handler."""
        handler = logging.StreamHandler(sys.stdout)

        formatter: logging.Formatter
        if config.enable_structured:
            formatter = StructuredFormatter()
        else:
            formatter = ColoredFormatter(config.format)

        handler.setFormatter(formatter)
        handler.setLevel(getattr(logging, config.level.value))

        if config.mask_credentials:
            handler.addFilter(SensitiveDataFilter())

        self.add_handler("console", handler)

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get logger for specific component.

        Args:
            name: Logger name

        Returns:
            Logger instance
        """
        return logging.getLogger(name)

    def set_level(self, level: LogLevel, component: Optional[str] = None) -> None:
        """
        Set logging level.

        Args:
            level: New logging level
            component: Specific component (None for the package logger)
        """
        log_level = getattr(logging, level.value)

        if component:
            logging.getLogger(component).setLevel(log_level)
        else:
            logging.getLogger(self.logger_name).setLevel(log_level)

            # Update all handlers
            for handler in self._handlers.values():
                handler.setLevel(log_level)

    def add_handler(self, name: str, handler: logging.Handler) -> None:
        """
        Add custom logging handler.

        Args:
            name: Handler name
            handler: Logging handler
        """
        logging.getLogger(self.logger_name).addHandler(handler)
        self._handlers[name] = handler

    def remove_handler(self, name: str) -> None:
        """
        Remove logging handler.

        Args:
            name: Handler name
        """
        if name in self._handlers:
            handler = self._handlers.pop(name)
            logging.getLogger(self.logger_name).removeHandler(handler)
            handler.close()

    def cleanup(self) -> None:
        """Remove and close every handler this manager added."""
        for name in list(self._handlers):
            self.remove_handler(name)
        self._configured = False

    def is_configured(self) -> bool:
        """Check if logging is configured."""
        return self._configured


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config: LoggingConfig) -> None:
    """
    Setup logging with configuration.

    Args:
        config: Logging configuration
    """
    _logging_manager.setup_logging(config)


def get_logger(name: str) -> logging.Logger:
    """
    Get logger for component.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return _logging_manager.get_logger(name)


def cleanup_logging() -> None:
    """Cleanup logging system."""
    _logging_manager.cleanup()

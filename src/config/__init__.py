"""
Configuration module for the subscription relay.

Provides settings, constants, and logging configuration.
"""

from config.settings import get_settings, Settings
from config.logging_config import (
    setup_structured_logging,
    setup_cli_logging,
)

__all__ = [
    # Settings
    'get_settings',
    'Settings',
    # Logging
    'setup_structured_logging',
    'setup_cli_logging',
]

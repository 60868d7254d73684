"""
Core module for the subscription relay.

Exports the exception hierarchy for easy access.
"""

from core.exceptions import (
    RelayError,
    ConfigurationError,
    ValidationError,
    AuthError,
    GatewayError,
    GatewayTimeoutError,
    ForwardingError,
    ProxyError,
    ProxyNotConfiguredError,
)

__all__ = [
    'RelayError',
    'ConfigurationError',
    'ValidationError',
    'AuthError',
    'GatewayError',
    'GatewayTimeoutError',
    'ForwardingError',
    'ProxyError',
    'ProxyNotConfiguredError',
]

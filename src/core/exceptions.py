"""
Custom exception hierarchy for the subscription relay.

Provides a consistent error handling approach across all modules.
Every error carries the HTTP status it maps to at the API boundary.
"""


class RelayError(Exception):
    """
    Base exception for all subscription relay errors.

    All custom exceptions should inherit from this class.
    """

    http_status: int = 500

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ==================== Configuration Errors ====================

class ConfigurationError(RelayError):
    """
    Error in system configuration.

    Raised when required configuration is missing or invalid.
    """
    pass


# ==================== Request Errors ====================

class ValidationError(RelayError):
    """
    Raised when a required input field is missing.

    Always detected before any network call. Never retried.
    """

    http_status = 400


# ==================== Provider Errors ====================

class AuthError(RelayError):
    """Raised when the PayPal OAuth token exchange fails."""
    pass


class GatewayError(RelayError):
    """
    Raised on any non-2xx or transport failure from the billing API.

    Attributes:
        status_code: Upstream HTTP status, None for transport failures
        retryable: Whether the caller may safely try again
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retryable: bool = False,
        details: dict | None = None
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.retryable = retryable


class GatewayTimeoutError(GatewayError):
    """
    Raised when a billing API call exceeds the outbound timeout.

    Answered with 500 like every gateway failure; retryable is always set.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=None, retryable=True, details=details)


# ==================== Side-channel Errors ====================

class ForwardingError(RelayError):
    """
    Raised when delivery to the automation endpoint fails.

    Logged only, never surfaced to any caller.
    """
    pass


class ProxyError(RelayError):
    """Raised when the AI completion upstream fails."""

    http_status = 502


class ProxyNotConfiguredError(ProxyError):
    """Raised when no AI upstream key is configured."""

    http_status = 503

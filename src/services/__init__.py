"""
Services module for auxiliary relay features.

This module contains service classes that encapsulate business logic
and can be reused across the API and CLI.
"""

from services.ai_proxy import CompletionProxy

__all__ = ["CompletionProxy"]

"""
API module for the subscription relay.

Provides the FastAPI application and routes.
"""

from api.app import create_app, app

__all__ = ['create_app', 'app']

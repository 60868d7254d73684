"""FastAPI dependencies resolving the per-process collaborators built in create_app()."""

from fastapi import Request

from billing.notifier import AutomationNotifier
from billing.service import SubscriptionService
from config.settings import Settings
from services.ai_proxy import CompletionProxy


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_subscription_service(request: Request) -> SubscriptionService:
    return request.app.state.subscription_service


def get_notifier(request: Request) -> AutomationNotifier:
    return request.app.state.notifier


def get_completion_proxy(request: Request) -> CompletionProxy:
    return request.app.state.completion_proxy

"""Client-side helpers: relay API client and local subscription state cache."""

from client.relay_client import RelayClient, RelayClientError, SubscriptionStatusReport
from client.state_cache import CachedSubscription, SubscriptionCache

__all__ = [
    'RelayClient',
    'RelayClientError',
    'SubscriptionStatusReport',
    'CachedSubscription',
    'SubscriptionCache',
]

"""
Tests for the local subscription state cache.
"""

import json

import pytest

from client.state_cache import SubscriptionCache
from core.exceptions import ConfigurationError


@pytest.fixture
def cache(tmp_path):
    return SubscriptionCache(tmp_path / "state")


def test_missing_file_is_empty(cache):
    snapshot = cache.load()

    assert snapshot.subscription_id is None
    assert snapshot.status is None


def test_update_merges_and_persists(cache):
    cache.update(subscription_id="I-1", created_at="2026-01-01T00:00:00+00:00")
    cache.update(status="ACTIVE")

    reloaded = SubscriptionCache(cache.cache_dir).load()
    assert reloaded.subscription_id == "I-1"
    assert reloaded.status == "ACTIVE"
    assert reloaded.created_at == "2026-01-01T00:00:00+00:00"
    assert not cache.path.with_suffix(".tmp").exists()


def test_unknown_field_rejected(cache):
    with pytest.raises(ValueError, match="plan"):
        cache.update(plan="P-1")


def test_clear(cache):
    cache.update(subscription_id="I-1", status="ACTIVE", data={"id": "I-1"})
    cleared = cache.clear()

    assert cleared.model_dump() == {
        "subscription_id": None,
        "status": None,
        "data": None,
        "created_at": None,
        "validated_at": None,
    }
    assert cache.load() == cleared


def test_corrupted_file(cache):
    cache.cache_dir.mkdir(parents=True)
    cache.path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        cache.load()


def test_file_is_plain_json(cache):
    cache.update(subscription_id="I-1")

    assert json.loads(cache.path.read_text(encoding="utf-8"))["subscription_id"] == "I-1"

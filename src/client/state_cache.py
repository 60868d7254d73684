"""
Local subscription state cache.

The relay keeps nothing between requests, so this file is the only place the
last known subscription id and status live. It holds a snapshot with no
freshness guarantee beyond "the last time validate was called".

Layout:
    {cache_dir}/
    ├── subscription_state.json   # id, status, last fetched object
    └── .state.lock               # flock target for writers
"""

import fcntl
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from config.constants import CLIENT_CACHE_FILE
from core.exceptions import ConfigurationError


class CachedSubscription(BaseModel):
    """Denormalized snapshot of the last known subscription."""

    subscription_id: Optional[str] = None
    status: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    validated_at: Optional[str] = None


class SubscriptionCache:
    """JSON file cache with exclusive-lock writes."""

    def __init__(self, cache_dir: str | Path):
        self.cache_dir = Path(cache_dir).expanduser()
        self.path = self.cache_dir / CLIENT_CACHE_FILE
        self._lock_path = self.cache_dir / ".state.lock"

    def load(self) -> CachedSubscription:
        """Read the snapshot; a missing file is an empty snapshot."""
        if not self.path.exists():
            return CachedSubscription()

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return CachedSubscription.model_validate(data)
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise ConfigurationError(f"Subscription cache is corrupted: {self.path}", {"error": str(e)})

    def update(self, **fields: Any) -> CachedSubscription:
        """Merge fields into the snapshot under an exclusive lock."""
        unknown = set(fields) - set(CachedSubscription.model_fields)
        if unknown:
            raise ValueError(f"Unknown cache fields: {', '.join(sorted(unknown))}")

        self.cache_dir.mkdir(parents=True, exist_ok=True)

        lock_fd = None
        try:
            lock_fd = os.open(str(self._lock_path), os.O_CREAT | os.O_WRONLY, 0o600)
            try:
                fcntl.flock(lock_fd, fcntl.LOCK_EX)

                current = self.load().model_dump()
                current.update(fields)
                snapshot = CachedSubscription.model_validate(current)

                # Write to temp, then rename (atomic on POSIX)
                temp_file = self.path.with_suffix('.tmp')
                with open(temp_file, 'w', encoding='utf-8') as f:
                    json.dump(snapshot.model_dump(), f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                temp_file.replace(self.path)
            finally:
                fcntl.flock(lock_fd, fcntl.LOCK_UN)
        finally:
            if lock_fd is not None:
                os.close(lock_fd)

        return snapshot

    def clear(self) -> CachedSubscription:
        """Forget every cached field."""
        return self.update(**{name: None for name in CachedSubscription.model_fields})

"""Local JSON cache of chosen installations."""

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ValidationError, field_validator

from .core.models import Installation, InstallSource, Repository, ensure_utc


logger = logging.getLogger(__name__)


class CacheEntry(BaseModel):
    """A repository's installation as of ``updated_at``."""

    updated_at: Optional[datetime] = None
    source: InstallSource
    lazy: str
    vimpack: str

    @field_validator('updated_at')
    @classmethod
    def validate_updated_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    def to_installation(self) -> Installation:
        return Installation(source=self.source, lazy=self.lazy, vimpack=self.vimpack)


class InstallationCache:
    """Installations keyed by repository full name.

    An entry is fresh when the repository has not been updated since the
    entry was written.
    """

    def __init__(self, cache_file: Optional[Path] = None):
        self.cache_file = cache_file
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._dirty = False

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, full_name: str) -> bool:
        return full_name in self._entries

    def load(self) -> "InstallationCache":
        """Read entries from ``cache_file``; a missing file is an empty cache."""
        if self.cache_file is None or not self.cache_file.exists():
            return self

        with open(self.cache_file, 'r', encoding='utf-8') as f:
            raw = json.load(f)

        entries = {}
        for full_name, data in raw.items():
            try:
                entries[full_name] = CacheEntry.model_validate(data)
            except ValidationError as e:
                logger.warning(f"[{full_name}] Ignoring invalid cache entry: {e.error_count()} error(s)")

        with self._lock:
            self._entries = entries
            self._dirty = False
        logger.debug(f"Loaded {len(entries)} cached installations from {self.cache_file}")
        return self

    def save(self) -> None:
        if self.cache_file is None:
            raise ValueError("Cache has no file to save to")

        with self._lock:
            data = {name: entry.model_dump(mode='json') for name, entry in sorted(self._entries.items())}
            self._dirty = False

        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.cache_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        logger.debug(f"Saved {len(data)} cached installations to {self.cache_file}")

    @property
    def dirty(self) -> bool:
        return self._dirty

    def get(self, full_name: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(full_name)

    def set(self, repository: Repository, installation: Installation) -> CacheEntry:
        entry = CacheEntry(
            updated_at=repository.updated_at,
            source=installation.source,
            lazy=installation.lazy,
            vimpack=installation.vimpack,
        )
        with self._lock:
            self._entries[repository.full_name] = entry
            self._dirty = True
        return entry

    def is_fresh(self, repository: Repository) -> bool:
        """True iff the repository's update time is not after the entry's.

        Without a timestamp on either side freshness cannot be shown, so the
        entry counts as stale.
        """
        entry = self.get(repository.full_name)
        if entry is None or entry.updated_at is None or repository.updated_at is None:
            return False
        return repository.updated_at <= entry.updated_at

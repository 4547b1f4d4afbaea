"""
Provider color palette cache.

Palettes are keyed by provider session (the access token) and expire after a
TTL. One instance is owned by the application and handed to each provider.
Concurrent requests may both miss and both fetch; the last write wins.
"""

import logging
import time
from typing import Callable, Dict, Optional

from calendar_assistant.providers.dto import EventColor

logger = logging.getLogger(__name__)

Palette = Dict[str, EventColor]


class ColorCache:

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, dict] = {}

    def get(self, session_key: str) -> Optional[Palette]:
        cached = self._entries.get(session_key)
        if cached is None:
            return None
        if self._clock() - cached["timestamp"] >= self.ttl_seconds:
            self._entries.pop(session_key, None)
            return None
        return cached["palette"]

    def put(self, session_key: str, palette: Palette) -> None:
        now = self._clock()
        self._evict_expired(now)
        self._entries[session_key] = {"palette": palette, "timestamp": now}

    def _evict_expired(self, now: float) -> None:
        # Rotated access tokens are never read again, so stale keys go here.
        expired = [key for key, entry in self._entries.items() if now - entry["timestamp"] >= self.ttl_seconds]
        for key in expired:
            del self._entries[key]

    def get_or_fetch(self, session_key: str, fetch: Callable[[], Palette]) -> Palette:
        palette = self.get(session_key)
        if palette is not None:
            return palette

        palette = fetch()
        if palette:
            self.put(session_key, palette)
            logger.info(f"Cached {len(palette)} event colors")
        return palette

    def invalidate(self, session_key: Optional[str] = None) -> None:
        """Drop one session's palette, or every palette when no key is given."""
        if session_key is None:
            self._entries.clear()
        else:
            self._entries.pop(session_key, None)

    def __len__(self) -> int:
        return len(self._entries)

from unittest.mock import MagicMock

from calendar_assistant.providers.color_cache import ColorCache
from calendar_assistant.providers.dto import EventColor


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


PALETTE = {"1": EventColor(id="1", background="#a4bdfc", foreground="#1d1d1d")}


class TestColorCache:

    def test_fetches_once_per_session(self):
        cache = ColorCache(ttl_seconds=60, clock=FakeClock())
        fetch = MagicMock(return_value=PALETTE)

        assert cache.get_or_fetch("token-a", fetch) == PALETTE
        assert cache.get_or_fetch("token-a", fetch) == PALETTE
        assert fetch.call_count == 1

    def test_sessions_are_isolated(self):
        cache = ColorCache(ttl_seconds=60, clock=FakeClock())
        fetch = MagicMock(return_value=PALETTE)

        cache.get_or_fetch("token-a", fetch)
        cache.get_or_fetch("token-b", fetch)
        assert fetch.call_count == 2
        assert len(cache) == 2

    def test_entries_expire_after_ttl(self):
        clock = FakeClock()
        cache = ColorCache(ttl_seconds=60, clock=clock)
        cache.put("token-a", PALETTE)

        clock.now = 59
        assert cache.get("token-a") == PALETTE
        clock.now = 60
        assert cache.get("token-a") is None
        assert len(cache) == 0

    def test_empty_palette_is_not_cached(self):
        cache = ColorCache(ttl_seconds=60, clock=FakeClock())
        fetch = MagicMock(return_value={})

        cache.get_or_fetch("token-a", fetch)
        cache.get_or_fetch("token-a", fetch)
        assert fetch.call_count == 2

    def test_invalidate(self):
        cache = ColorCache(ttl_seconds=60, clock=FakeClock())
        cache.put("token-a", PALETTE)
        cache.put("token-b", PALETTE)

        cache.invalidate("token-a")
        assert cache.get("token-a") is None
        assert cache.get("token-b") == PALETTE

        cache.invalidate()
        assert len(cache) == 0

    def test_rotated_tokens_do_not_accumulate(self):
        clock = FakeClock()
        cache = ColorCache(ttl_seconds=10, clock=clock)
        fetch = MagicMock(return_value=PALETTE)

        for i in range(1000):
            cache.get_or_fetch(f"token-{i}", fetch)
            clock.now += 1

        assert len(cache) <= 10
        assert cache.get("token-999") == PALETTE

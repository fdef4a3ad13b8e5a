from route_optimizer.services.routing.cache import TTLCache


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_entry_is_served_until_it_expires():
    clock = FakeClock()
    cache = TTLCache(clock=clock)

    cache.set(("matrix", "drive"), {"value": 1}, ttl_seconds=60)

    clock.advance(59)
    assert cache.get(("matrix", "drive")) == {"value": 1}
    clock.advance(1)
    assert cache.get(("matrix", "drive")) is None


def test_missing_key_is_none():
    cache = TTLCache(clock=FakeClock())

    assert cache.get("nope") is None


def test_expired_entry_is_overwritten_on_next_set():
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    cache.set("k", "old", ttl_seconds=10)

    clock.advance(30)
    assert cache.get("k") is None
    assert len(cache) == 1

    cache.set("k", "new", ttl_seconds=10)
    assert cache.get("k") == "new"
    assert len(cache) == 1


def test_empty_list_is_a_cache_hit():
    cache = TTLCache(clock=FakeClock())
    cache.set("autocomplete", [], ttl_seconds=10)

    assert cache.get("autocomplete") == []


def test_clear_drops_all_entries():
    cache = TTLCache(clock=FakeClock())
    cache.set("a", 1, ttl_seconds=10)
    cache.set("b", 2, ttl_seconds=10)

    cache.clear()

    assert len(cache) == 0
    assert cache.get("a") is None

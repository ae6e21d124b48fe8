import asyncio

import orjson

from lookup.cache import NOT_FOUND, DetailsCache
from lookup.prefetch import clamp_batch, prefetch_upcoming, warm_cache

NOW = 1_700_000_000.0


class FakeLookup:
    def __init__(self, missing=(), broken=()):
        self.calls = []
        self.missing = set(missing)
        self.broken = set(broken)
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, word):
        self.calls.append(word)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if word in self.broken:
                raise RuntimeError("service down")
            if word in self.missing:
                return NOT_FOUND
            return {"word": word}
        finally:
            self.in_flight -= 1


def test_prefetch_three_new_words_ahead_five():
    progress = {"known": {"review_count": 2, "interval": 3, "next_review_ts": NOW + 3 * 86400}}
    before = orjson.dumps(progress)
    lookup = FakeLookup()
    cache = DetailsCache(10)

    asyncio.run(prefetch_upcoming(["alpha", "beta", "gamma"], progress, lookup, cache, 5, now=NOW))

    assert len(lookup.calls) <= 3
    assert all(cache.has(w) for w in ("alpha", "beta", "gamma"))
    assert orjson.dumps(progress) == before


def test_prefetch_skips_cached_words():
    cache = DetailsCache(10)
    cache.set("alpha", {"word": "alpha"})
    lookup = FakeLookup()

    asyncio.run(prefetch_upcoming(["alpha", "beta"], {}, lookup, cache, 2, now=NOW))

    assert lookup.calls == ["beta"]


def test_prefetch_swallows_failures_and_does_not_cache_them():
    cache = DetailsCache(10)
    lookup = FakeLookup(missing={"qwxz"}, broken={"flaky"})

    asyncio.run(prefetch_upcoming(["flaky", "qwxz", "solid"], {}, lookup, cache, 3, now=NOW))

    assert not cache.has("flaky")
    assert cache.get("qwxz") is NOT_FOUND
    assert cache.get("solid") == {"word": "solid"}


def test_warm_cache_caps_concurrency_per_batch():
    words = [f"w{i}" for i in range(11)]
    cache = DetailsCache(20)
    lookup = FakeLookup()
    seen = []

    asyncio.run(warm_cache(words, lookup, cache, batch_size=3,
                           progress_cb=lambda d, t: seen.append((d, t))))

    assert lookup.max_in_flight <= 3
    assert cache.size() == 11
    assert seen == [(3, 11), (6, 11), (9, 11), (11, 11)]


def test_warm_cache_nothing_to_do():
    cache = DetailsCache(2)
    cache.set("a", {"word": "a"})
    lookup = FakeLookup()

    assert asyncio.run(warm_cache(["a", "a"], lookup, cache)) == []
    assert lookup.calls == []


def test_clamp_batch():
    assert clamp_batch(0) == 1
    assert clamp_batch(4) == 4
    assert clamp_batch(50) == 10


def test_warm_cache_stores_none_result_as_not_found():
    cache = DetailsCache(4)

    async def lookup(word):
        return None

    asyncio.run(warm_cache(["ghost"], lookup, cache))

    assert cache.get("ghost") is NOT_FOUND

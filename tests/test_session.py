import asyncio
import copy

from lookup.cache import NOT_FOUND, DetailsCache
from study.progress_store import ProgressStore
from study.session import StudySession

NOW = 1_700_000_000.0

SRT = """1
00:00:01,000 --> 00:00:02,000
The Harbor lights were dim.

2
00:00:03,000 --> 00:00:04,000
We walked along the harbor at midnight.
"""


class FakeLookup:
    def __init__(self, missing=(), broken=()):
        self.calls = []
        self.missing = set(missing)
        self.broken = set(broken)

    async def __call__(self, word):
        self.calls.append(word)
        if word in self.broken:
            raise RuntimeError("timeout")
        if word in self.missing:
            return NOT_FOUND
        return {"word": word, "meanings": []}


def test_details_uses_cache_after_first_lookup():
    lookup = FakeLookup()
    session = StudySession("c", ["harbor"], lookup)

    first = asyncio.run(session.details("harbor"))
    second = asyncio.run(session.details("harbor"))

    assert first == second == {"word": "harbor", "meanings": []}
    assert lookup.calls == ["harbor"]


def test_not_found_is_cached_but_errors_are_not():
    lookup = FakeLookup(missing={"qwxz"}, broken={"flaky"})
    session = StudySession("c", ["qwxz", "flaky"], lookup)

    assert asyncio.run(session.details("qwxz")) is None
    assert asyncio.run(session.details("qwxz")) is None
    assert asyncio.run(session.details("flaky")) is None
    assert asyncio.run(session.details("flaky")) is None

    assert lookup.calls == ["qwxz", "flaky", "flaky"]
    assert session.cache.get("qwxz") is NOT_FOUND
    assert not session.cache.has("flaky")


def test_record_updates_progress_and_persists(tmp_path):
    store = ProgressStore(tmp_path)
    session = StudySession("movie", ["harbor", "quiet"], FakeLookup(), store=store)

    assert session.next_word(now=NOW) == "harbor"
    state = session.record("Easy", now=NOW)

    assert state["review_count"] == 1
    assert session.progress["harbor"] == state
    assert store.load_state("movie")["harbor"] == state
    assert session.next_word(now=NOW) == "quiet"

    reloaded = StudySession("movie", ["harbor", "quiet"], FakeLookup(), store=store)
    assert reloaded.progress["harbor"]["ease_factor"] == state["ease_factor"]


def test_record_without_current_word_is_a_noop():
    session = StudySession("c", [], FakeLookup())

    assert session.next_word(now=NOW) is None
    assert session.record("Good") is None
    assert session.progress == {}


def test_prefetch_warms_cache_without_touching_progress():
    lookup = FakeLookup()
    session = StudySession("c", ["a", "b", "c", "d"], lookup, cache=DetailsCache(10), prefetch_ahead=2)
    session.record("Good", word="d", now=NOW)
    before = copy.deepcopy(session.progress)

    asyncio.run(session.prefetch(now=NOW))

    assert session.cache.has("a") and session.cache.has("b")
    assert not session.cache.has("c")
    assert session.progress == before


def test_schedule_prefetch_and_close():
    lookup = FakeLookup()
    session = StudySession("c", ["a", "b"], lookup)

    async def go():
        task = session.schedule_prefetch()
        await task
        await session.close()

    asyncio.run(go())
    assert session.cache.has("a") and session.cache.has("b")


def test_from_srt_builds_word_list():
    session = StudySession.from_srt("ep1", SRT, FakeLookup(), by_frequency=True)

    assert session.words[0] == "harbor"
    assert session.display_of("harbor") == "Harbor"
    assert session.example_for("midnight") == "We walked along the harbor at midnight."
    assert session.stats(now=NOW)["new_words"] == len(session.words)


def test_record_schedules_prefetch_inside_event_loop():
    lookup = FakeLookup()
    session = StudySession("c", ["a", "b"], lookup)

    async def go():
        session.current = "a"
        session.record("Good")
        assert session._prefetch_task is not None
        await session._prefetch_task
        await session.close()

    asyncio.run(go())
    assert session.cache.has("b")


def test_record_lowercases_explicit_word():
    session = StudySession("c", ["harbor"], FakeLookup())

    session.record("Good", word="Harbor", now=NOW)

    assert set(session.progress) == {"harbor"}


def test_none_lookup_result_is_cached_as_not_found():
    calls = []

    async def lookup(word):
        calls.append(word)
        return None

    session = StudySession("c", ["x"], lookup)

    assert asyncio.run(session.details("x")) is None
    assert asyncio.run(session.details("x")) is None
    assert calls == ["x"]
    assert session.cache.get("x") is NOT_FOUND

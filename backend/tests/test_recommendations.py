import asyncio

from stickerverse.services.recommendations import RecommendationDebouncer, cart_digest


class RecordingFetch:
    def __init__(self):
        self.calls = []

    async def __call__(self, names):
        self.calls.append(list(names))
        return [f"More like {n}" for n in names]


def test_digest_depends_on_order_and_content():
    assert cart_digest(["Cat", "Dog"]) == cart_digest(["Cat", "Dog"])
    assert cart_digest(["Cat", "Dog"]) != cart_digest(["Dog", "Cat"])
    assert cart_digest(["Cat"]) != cart_digest(["Cat", "Dog"])


def test_superseded_caller_gets_newer_result():
    fetch = RecordingFetch()

    async def scenario():
        debouncer = RecommendationDebouncer(fetch, delay=0.05)
        first = asyncio.create_task(debouncer.recommend("user-1", ["Cat"]))
        await asyncio.sleep(0)
        second = await debouncer.recommend("user-1", ["Cat", "Dog"])
        return await first, second

    first, second = asyncio.run(scenario())
    assert first == second == ["More like Cat", "More like Dog"]
    assert fetch.calls == [["Cat", "Dog"]]


def test_rapid_edits_issue_one_call():
    fetch = RecordingFetch()

    async def scenario():
        debouncer = RecommendationDebouncer(fetch, delay=0.05)
        waiting = []
        for names in (["A"], ["A", "B"], ["A", "B", "C"]):
            waiting.append(asyncio.create_task(debouncer.recommend("user-1", names)))
            await asyncio.sleep(0)
        return await asyncio.gather(*waiting)

    results = asyncio.run(scenario())
    assert fetch.calls == [["A", "B", "C"]]
    assert all(r == results[-1] for r in results)


def test_empty_cart_cancels_in_flight_call():
    fetch = RecordingFetch()

    async def scenario():
        debouncer = RecommendationDebouncer(fetch, delay=0.05)
        pending = asyncio.create_task(debouncer.recommend("user-1", ["Cat"]))
        await asyncio.sleep(0)
        emptied = await debouncer.recommend("user-1", [])
        return await pending, emptied

    pending, emptied = asyncio.run(scenario())
    assert pending == [] and emptied == []
    assert fetch.calls == []


def test_same_cart_joins_in_flight_call():
    fetch = RecordingFetch()

    async def scenario():
        debouncer = RecommendationDebouncer(fetch, delay=0.01)
        return await asyncio.gather(
            debouncer.recommend("user-1", ["Cat"]),
            debouncer.recommend("user-1", ["Cat"]),
        )

    a, b = asyncio.run(scenario())
    assert a == b == ["More like Cat"]
    assert fetch.calls == [["Cat"]]


def test_finished_call_is_not_reused():
    fetch = RecordingFetch()

    async def scenario():
        debouncer = RecommendationDebouncer(fetch, delay=0)
        await debouncer.recommend("user-1", ["Cat"])
        await debouncer.recommend("user-1", ["Cat"])

    asyncio.run(scenario())
    assert fetch.calls == [["Cat"], ["Cat"]]


def test_failed_fetch_is_retried_for_same_cart():
    calls = []

    async def flaky(names):
        calls.append(list(names))
        # first call behaves like a transport failure
        return [] if len(calls) == 1 else ["Space Dog"]

    async def scenario():
        debouncer = RecommendationDebouncer(flaky, delay=0)
        first = await debouncer.recommend("user-1", ["Cat"])
        retry = await debouncer.recommend("user-1", ["Cat"])
        return first, retry

    first, retry = asyncio.run(scenario())
    assert first == []
    assert retry == ["Space Dog"]
    assert calls == [["Cat"], ["Cat"]]


def test_finished_owners_are_dropped():
    fetch = RecordingFetch()

    async def scenario():
        debouncer = RecommendationDebouncer(fetch, delay=0)
        await asyncio.gather(*(debouncer.recommend(f"anon:{i}", ["Cat"]) for i in range(200)))
        return len(debouncer)

    assert asyncio.run(scenario()) == 0
    assert len(fetch.calls) == 200


def test_superseded_call_leaves_no_entry():
    fetch = RecordingFetch()

    async def scenario():
        debouncer = RecommendationDebouncer(fetch, delay=0.01)
        first = asyncio.create_task(debouncer.recommend("user-1", ["Cat"]))
        await asyncio.sleep(0)
        await debouncer.recommend("user-1", ["Dog"])
        await first
        return len(debouncer)

    assert asyncio.run(scenario()) == 0


def test_owners_are_independent():
    fetch = RecordingFetch()

    async def scenario():
        debouncer = RecommendationDebouncer(fetch, delay=0.01)
        return await asyncio.gather(
            debouncer.recommend("user-1", ["Cat"]),
            debouncer.recommend("anon:10.0.0.1", ["Dog"]),
        )

    one, two = asyncio.run(scenario())
    assert one == ["More like Cat"]
    assert two == ["More like Dog"]
    assert sorted(fetch.calls) == [["Cat"], ["Dog"]]

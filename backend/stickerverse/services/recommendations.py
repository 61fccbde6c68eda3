"""
stickerverse/services/recommendations.py - Debounced, cancellable recommendation refetch.

Each owner (signed-in principal or anonymous cart session) has at most one outstanding call,
keyed by a content hash of its cart:

- same hash as the in-flight call -> join it,
- different hash -> cancel the in-flight call, wait out the debounce window, then fetch,
- empty cart -> cancel whatever is in flight and return [] without calling out.

A caller whose call was superseded gets the result of the call that replaced it. Finished
calls are forgotten, so the next request for the same cart fetches again.
"""
import asyncio
import hashlib
import json
import logging
from functools import lru_cache
from typing import Awaitable, Callable, Dict, List, Sequence

from stickerverse.config import settings
from stickerverse.integrations.ai_helpers import recommend_stickers

logger = logging.getLogger("stickerverse.cart")

Fetch = Callable[[List[str]], Awaitable[List[str]]]


def cart_digest(names: Sequence[str]) -> str:
    return hashlib.sha256(json.dumps(list(names)).encode("utf-8")).hexdigest()


class _Call:
    """One scheduled fetch. `result` is shared with the calls that supersede it."""

    def __init__(self, digest: str, task: asyncio.Task, result: asyncio.Future):
        self.digest = digest
        self.task = task
        self.result = result


class RecommendationDebouncer:
    def __init__(self, fetch: Fetch, delay: float = 0.4):
        self._fetch = fetch
        self._delay = delay
        self._calls: Dict[str, _Call] = {}

    def __len__(self) -> int:
        return len(self._calls)

    async def _run(self, names: List[str]) -> List[str]:
        if self._delay:
            await asyncio.sleep(self._delay)
        return await self._fetch(names)

    def _finish(self, owner: str, call: _Call, task: asyncio.Task) -> None:
        if task.cancelled():
            # superseded or emptied; whoever cancelled it settles `result`
            return
        if self._calls.get(owner) is call:
            del self._calls[owner]
        if call.result.done():
            return
        exc = task.exception()
        if exc is not None:
            call.result.set_exception(exc)
        else:
            call.result.set_result(task.result())

    def cancel(self, owner: str) -> None:
        call = self._calls.pop(owner, None)
        if call is None:
            return
        call.task.cancel()
        if not call.result.done():
            call.result.set_result([])

    async def recommend(self, owner: str, names: Sequence[str]) -> List[str]:
        names = [n for n in names if n]
        if not names:
            self.cancel(owner)
            return []

        digest = cart_digest(names)
        call = self._calls.get(owner)
        if call is None or call.digest != digest:
            if call is not None and not call.task.done():
                logger.debug("Superseding recommendation call for %s", owner)
                call.task.cancel()
                result = call.result
            else:
                result = asyncio.get_running_loop().create_future()
            task = asyncio.create_task(self._run(names))
            call = _Call(digest, task, result)
            self._calls[owner] = call
            task.add_done_callback(lambda t, c=call: self._finish(owner, c, t))

        return await asyncio.shield(call.result)


@lru_cache(maxsize=1)
def get_recommender() -> RecommendationDebouncer:
    return RecommendationDebouncer(recommend_stickers, delay=settings.recommendation_debounce_ms / 1000)

# -*- coding: utf-8 -*-
import asyncio
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

import structlog

from config import DEFAULT_BATCH_SIZE, MAX_BATCH_SIZE
from study.sampler import project_upcoming
from .cache import DetailsCache, NOT_FOUND

log = structlog.get_logger(__name__)

LookupFn = Callable[[str], Awaitable[object]]


def clamp_batch(batch_size: int) -> int:
    return max(1, min(MAX_BATCH_SIZE, int(batch_size)))


async def _lookup_into(word: str, lookup_fn: LookupFn, cache: DetailsCache) -> bool:
    try:
        result = await lookup_fn(word)
    except Exception as ex:
        # 预取是尽力而为：失败不缓存、不上抛
        log.debug("prefetch_failed", word=word, error=str(ex))
        return False
    cache.set(word, NOT_FOUND if result is None else result)
    return True


async def warm_cache(words: Iterable[str], lookup_fn: LookupFn, cache: DetailsCache,
                     batch_size: int = DEFAULT_BATCH_SIZE,
                     progress_cb: Optional[Callable[[int, int], None]] = None) -> List[str]:
    """
    把 words 中还没缓存的词分批查好放进 cache。
    批与批之间串行；批内并发，整批完成后才开始下一批。
    返回实际发起查询的词。
    """
    todo = [w for w in dict.fromkeys(words) if not cache.has(w)]
    if not todo:
        return []
    size = clamp_batch(batch_size)
    done = ok = 0
    for i in range(0, len(todo), size):
        batch = todo[i:i + size]
        results = await asyncio.gather(*(_lookup_into(w, lookup_fn, cache) for w in batch))
        ok += sum(results)
        done += len(batch)
        if progress_cb:
            progress_cb(done, len(todo))
    log.debug("warm_done", requested=len(todo), ok=ok, cache_size=cache.size())
    return todo


async def prefetch_upcoming(words: Iterable[str], progress: Dict[str, dict], lookup_fn: LookupFn,
                            cache: DetailsCache, ahead_count: int,
                            batch_size: int = DEFAULT_BATCH_SIZE,
                            now: float | None = None) -> List[str]:
    """按调度器预测的接下来 ahead_count 个词预热缓存；不修改 progress。"""
    upcoming = project_upcoming(words, progress, ahead_count, now=now)
    return await warm_cache(upcoming, lookup_fn, cache, batch_size=batch_size)

# -*- coding: utf-8 -*-
"""
一次学习会话：一个集合（电影/字幕）+ 它的词表、进度、详情缓存和查询函数。
"""
import asyncio
import contextlib
from typing import Dict, List, Optional

import structlog

from config import DEFAULT_BATCH_SIZE, DEFAULT_PREFETCH_AHEAD
from extractor.srt_extract import (parse_srt, extract_vocabulary, word_frequency,
                                   sort_by_frequency, find_example_sentence)
from lookup.cache import DetailsCache, NOT_FOUND
from lookup.prefetch import LookupFn, prefetch_upcoming
from .progress_store import ProgressStore
from .sampler import select_next, collection_stats
from .srs import record_feedback

log = structlog.get_logger(__name__)


def _loop_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class StudySession:

    def __init__(self, collection_id: str, words: List[str], lookup_fn: LookupFn,
                 store: Optional[ProgressStore] = None,
                 cache: Optional[DetailsCache] = None,
                 display: Optional[Dict[str, str]] = None,
                 sentences: Optional[List[str]] = None,
                 prefetch_ahead: int = DEFAULT_PREFETCH_AHEAD,
                 batch_size: int = DEFAULT_BATCH_SIZE):
        self.collection_id = collection_id
        self.words = [w.lower() for w in words]
        self.display = display or {}
        self.sentences = sentences or []
        self.lookup_fn = lookup_fn
        self.store = store
        self.cache = cache if cache is not None else DetailsCache()
        self.prefetch_ahead = prefetch_ahead
        self.batch_size = batch_size
        self.progress: Dict[str, dict] = store.load_state(collection_id) if store else {}
        self.current: Optional[str] = None
        self._prefetch_task: Optional[asyncio.Task] = None

    @classmethod
    def from_srt(cls, collection_id: str, content: str, lookup_fn: LookupFn,
                 by_frequency: bool = False, **kw) -> "StudySession":
        sentences = parse_srt(content)
        words, display = extract_vocabulary(sentences)
        if by_frequency:
            words = sort_by_frequency(words, word_frequency(sentences))
        return cls(collection_id, words, lookup_fn, display=display, sentences=sentences, **kw)

    def display_of(self, word: str) -> str:
        return self.display.get(word, word)

    def next_word(self, now: float | None = None) -> Optional[str]:
        self.current = select_next(self.words, self.progress, now=now)
        return self.current

    async def details(self, word: str) -> Optional[dict]:
        """缓存命中直接返回；否则查询并写缓存。查不到或出错返回 None。"""
        cached = self.cache.get(word)
        if cached is NOT_FOUND:
            return None
        if cached is not None:
            return cached
        try:
            result = await self.lookup_fn(word)
        except Exception as ex:
            # 临时错误不缓存，下次还会再查
            log.warning("details_unavailable", word=word, error=str(ex))
            return None
        if result is None:
            result = NOT_FOUND
        self.cache.set(word, result)
        return None if result is NOT_FOUND else result

    def record(self, feedback, word: Optional[str] = None, now: float | None = None) -> Optional[dict]:
        """
        记录当前词（或指定词）的反馈并持久化；没有当前词时什么都不做。
        在事件循环里调用时顺便在后台预取接下来的词。
        """
        word = (word or self.current or "").lower()
        if not word:
            return None
        state = record_feedback(self.progress.get(word), feedback, now=now)
        self.progress[word] = state
        if self.store:
            self.store.save_state(self.collection_id, word, state)
        if _loop_running():
            self.schedule_prefetch()
        return state

    async def prefetch(self, now: float | None = None) -> List[str]:
        return await prefetch_upcoming(self.words, self.progress, self.lookup_fn, self.cache,
                                       self.prefetch_ahead, batch_size=self.batch_size, now=now)

    def schedule_prefetch(self) -> asyncio.Task:
        """在后台预取（需要在运行中的事件循环里调用）；上一次没跑完的会被取消。"""
        if self._prefetch_task and not self._prefetch_task.done():
            self._prefetch_task.cancel()
        self._prefetch_task = asyncio.get_running_loop().create_task(self.prefetch())
        return self._prefetch_task

    def stats(self, now: float | None = None) -> dict:
        return collection_stats(self.words, self.progress, now=now)

    def example_for(self, word: str) -> Optional[str]:
        return find_example_sentence(word, self.sentences)

    async def close(self):
        task, self._prefetch_task = self._prefetch_task, None
        if task and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

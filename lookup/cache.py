# -*- coding: utf-8 -*-
from collections import OrderedDict
from typing import Any, Optional

from config import DEFAULT_CACHE_SIZE


class _NotFound:
    """词典明确查不到的标记；缓存它可以避免重复的无用请求。"""
    _inst = None

    def __new__(cls):
        if cls._inst is None:
            cls._inst = super().__new__(cls)
        return cls._inst

    def __bool__(self):
        return False

    def __repr__(self):
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


class DetailsCache:
    """
    固定容量的 LRU 缓存：word -> details（或 NOT_FOUND）。
    get/set 会把 key 移到“最近使用”；has 不影响顺序。
    只在插入新 key 且已满时淘汰最久未使用的一项。
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE):
        if int(max_size) < 1:
            raise ValueError("max_size must be >= 1")
        self.max_size = int(max_size)
        self._data: "OrderedDict[str, Any]" = OrderedDict()

    def get(self, word: str) -> Optional[Any]:
        if word not in self._data:
            return None
        self._data.move_to_end(word)
        return self._data[word]

    def set(self, word: str, details: Any):
        if word in self._data:
            self._data.move_to_end(word)
        elif len(self._data) >= self.max_size:
            self._data.popitem(last=False)
        self._data[word] = details

    def has(self, word: str) -> bool:
        return word in self._data

    def delete(self, word: str) -> bool:
        if word not in self._data:
            return False
        del self._data[word]
        return True

    def clear(self):
        self._data.clear()

    def size(self) -> int:
        return len(self._data)

    def keys(self):
        # 从最久未使用到最近使用
        return list(self._data.keys())

    def __len__(self):
        return len(self._data)

    def __contains__(self, word):
        return word in self._data

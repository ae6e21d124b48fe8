# -*- coding: utf-8 -*-
from copy import deepcopy
from typing import Dict, Iterable, List, Optional
from .srs import now_ts, is_due


def _state_of(progress: Dict[str, dict], word: str) -> dict | None:
    s = progress.get(word)
    return s if isinstance(s, dict) else None


def select_next(words: Iterable[str], progress: Dict[str, dict], now: float | None = None) -> Optional[str]:
    """
    选下一个要学的词（纯函数，不改 progress）：
    1) 先取到期的词，interval 小的优先（最容易忘）；
    2) 没有到期的，取第一个从未学过的词（按调用方给的顺序）；
    3) 都学过且都没到期，取 next_review_ts 最早的；
    4) 词表为空返回 None。
    """
    tnow = now_ts() if now is None else now
    words = list(words)
    if not words:
        return None

    pool_due = []
    pool_new = []
    for w in words:
        s = _state_of(progress, w)
        if s is None:
            pool_new.append(w)
        elif is_due(s, tnow):
            pool_due.append((int(s.get("interval") or 0), w))

    if pool_due:
        # sort 稳定：同 interval 保持原顺序
        pool_due.sort(key=lambda t: t[0])
        return pool_due[0][1]
    if pool_new:
        return pool_new[0]
    return min(words, key=lambda w: float(_state_of(progress, w).get("next_review_ts") or 0.0))


def project_upcoming(words: Iterable[str], progress: Dict[str, dict], count: int,
                     now: float | None = None) -> List[str]:
    """
    预测接下来 count 个会出现的词（给预取用）。
    在 progress 的深拷贝上反复 select_next，选中的词标记为“刚复习过”；
    这个标记只存在于草稿里，绝不写回真实进度。
    """
    tnow = now_ts() if now is None else now
    words = list(words)
    scratch = deepcopy(progress)
    picked: List[str] = []
    for _ in range(max(0, int(count))):
        # 草稿标记的词 next_review_ts=now 仍算到期，所以把已选的词排除掉
        w = select_next([x for x in words if x not in picked], scratch, tnow)
        if w is None:
            break
        picked.append(w)
        scratch[w] = {"review_count": 1, "next_review_ts": tnow}
    return picked


def collection_stats(words: Iterable[str], progress: Dict[str, dict], now: float | None = None) -> dict:
    """一个集合（一部电影/一套字幕）的学习统计。"""
    tnow = now_ts() if now is None else now
    words = list(words)
    hist = {"beginner": 0, "intermediate": 0, "advanced": 0}
    learned = new = due = 0
    for w in words:
        s = _state_of(progress, w)
        if s is None:
            new += 1
            continue
        if s.get("proficiency"):
            learned += 1
            hist[s["proficiency"]] = hist.get(s["proficiency"], 0) + 1
        if is_due(s, tnow):
            due += 1
    return {"total_words": len(words), "learned_words": learned,
            "new_words": new, "due_words": due, "proficiency": hist}

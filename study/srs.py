# -*- coding: utf-8 -*-
import time
import math
from copy import deepcopy
from enum import Enum
from .srs_policy import POLICY as P

SECONDS_PER_DAY = 86400.0


class Feedback(str, Enum):
    HARD = "Hard"
    GOOD = "Good"
    EASY = "Easy"


class Proficiency(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


def now_ts() -> float:
    return time.time()


def round_half_up(x: float) -> int:
    # 内置 round() 是银行家舍入（2.5 -> 2），这里要 2.5 -> 3
    return int(math.floor(x + 0.5))


def normalize_feedback(feedback) -> Feedback:
    """
    'hard' / 'Hard' / Feedback.HARD 都可以；
    其它任何值一律按 Good 处理，绝不抛异常，不打断学习流程。
    """
    if isinstance(feedback, Feedback):
        return feedback
    if isinstance(feedback, str):
        key = feedback.strip().capitalize()
        for fb in Feedback:
            if fb.value == key:
                return fb
    return Feedback.GOOD


def ensure_state(raw: dict | None) -> dict:
    """
    统一的单词复习状态结构。兼容老数据并补默认值。
    """
    s = deepcopy(raw) if isinstance(raw, dict) else {}
    s.setdefault("review_count", 0)
    s.setdefault("ease_factor", P["init_ease"])
    s.setdefault("interval", 0)
    s.setdefault("next_review_ts", 0.0)
    s.setdefault("proficiency", None)
    s.setdefault("last_ts", 0.0)
    return s


def is_due(state: dict | None, now: float | None = None) -> bool:
    if not isinstance(state, dict):
        return False
    tnow = now_ts() if now is None else now
    return float(state.get("next_review_ts") or 0.0) <= tnow


def _proficiency(review_count: int, fb: Feedback) -> str:
    if review_count >= P["advanced_reviews"] and fb is Feedback.EASY:
        return Proficiency.ADVANCED.value
    if review_count >= P["intermediate_reviews"] and fb in (Feedback.GOOD, Feedback.EASY):
        return Proficiency.INTERMEDIATE.value
    return Proficiency.BEGINNER.value


def record_feedback(state_in: dict | None, feedback, now: float | None = None) -> dict:
    """
    提交一次反馈（Hard / Good / Easy），返回新的状态；不修改传入的 state。
    先调 ease，再算 interval：
    - Hard：ease -= 0.15（下限 1.3），间隔减半
    - Good：间隔 *= ease
    - Easy：ease += 0.15，间隔 *= ease * 1.3
    interval=0（新词）时三者都是 1 天；结果间隔至少 1 天。
    """
    tnow = now_ts() if now is None else now
    fb = normalize_feedback(feedback)
    s = ensure_state(state_in)

    rc = int(s.get("review_count") or 0) + 1
    ease = max(P["min_ease"], float(s.get("ease_factor") or P["init_ease"]))
    interval = max(0, int(s.get("interval") or 0))
    first = P["first_interval_days"]

    if fb is Feedback.HARD:
        ease = max(P["min_ease"], ease - P["hard_ease_delta"])
        interval = first if interval == 0 else max(1, round_half_up(interval * P["hard_interval_factor"]))
    elif fb is Feedback.EASY:
        ease += P["easy_ease_delta"]
        interval = first if interval == 0 else round_half_up(interval * ease * P["easy_bonus"])
    else:
        interval = first if interval == 0 else round_half_up(interval * ease)

    interval = max(1, interval)

    s["review_count"] = rc
    s["ease_factor"] = ease
    s["interval"] = interval
    s["next_review_ts"] = tnow + interval * SECONDS_PER_DAY
    s["proficiency"] = _proficiency(rc, fb)
    s["last_ts"] = tnow
    return s

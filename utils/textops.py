# -*- coding: utf-8 -*-
import re
CN_RE = re.compile(r"[\u3400-\u9FFF\uF900-\uFAFF]")
TAG_RE = re.compile(r"<[^>]*>")
SOUND_CUE_RE = re.compile(r"\([^)]*\)")
MUSIC_CUE_RE = re.compile(r"\[.*?\]")

def has_chinese(s: str) -> bool:
    return bool(CN_RE.search(s or ""))

def normalize_spaces(s: str) -> str:
    return re.sub(r"\s{2,}", " ", (s or "").replace("\r", "\n").replace("\n", " ")).strip()

def strip_cues(s: str) -> str:
    """去掉 HTML 标签、(音效) 和 [音乐] 标记"""
    s = TAG_RE.sub("", s or "")
    s = SOUND_CUE_RE.sub("", s)
    return MUSIC_CUE_RE.sub("", s)

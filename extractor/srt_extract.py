# -*- coding: utf-8 -*-
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import re

from utils.textops import normalize_spaces, strip_cues

WORD_RE = re.compile(r"[a-zA-Z]+")
_BLOCK_SPLIT = re.compile(r"\n\s*\n")

MIN_WORD_LEN = 3

# 常见的无意义词汇 + 字幕里高频但没学习价值的动词
STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by", "is", "are", "was", "were",
    "be", "been", "have", "has", "had", "do", "does", "did", "will", "would", "could", "should", "may", "might", "must",
    "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them", "my", "your", "his", "its", "our", "their",
    "myself", "yourself", "himself", "herself", "itself", "ourselves", "yourselves", "themselves",
    "am", "get", "got", "let", "go", "went", "come", "came", "see", "saw",
    "take", "took", "make", "made", "know", "knew", "think", "thought",
    "say", "said", "tell", "told", "ask", "asked", "give", "gave", "find",
    "found", "put", "leave", "left", "feel", "felt", "seem", "seemed",
    "try", "tried", "turn", "turned", "start", "started", "begin", "began",
    "stop", "stopped", "keep", "kept", "hold", "held", "bring", "brought",
    "happen", "happened", "become", "became", "show", "showed", "hear",
    "heard", "play", "played", "run", "ran", "move", "moved", "live", "lived",
    "believe", "believed", "hurt", "call", "called", "work", "worked",
})


def parse_srt(content: str) -> List[str]:
    """
    SRT -> 字幕句子列表。
    每块：序号 / 时间轴 / 一行或多行文本；不足 3 行的块跳过。
    """
    text = (content or "").lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n").strip()
    if not text:
        return []
    sentences = []
    for block in _BLOCK_SPLIT.split(text):
        lines = block.split("\n")
        if len(lines) < 3:
            continue
        s = normalize_spaces(strip_cues(" ".join(lines[2:])))
        if s:
            sentences.append(s)
    return sentences


def load_srt(path: Path) -> List[str]:
    return parse_srt(Path(path).read_text(encoding="utf-8", errors="replace"))


def extract_vocabulary(sentences: List[str]) -> Tuple[List[str], Dict[str, str]]:
    """
    返回 (words, display)：
    - words：小写、去重（保持首次出现顺序）、去停用词、长度 >= 3
    - display：小写词 -> 首次出现时的原始大小写（仅用于展示）
    """
    words: List[str] = []
    display: Dict[str, str] = {}
    for raw in WORD_RE.findall(" ".join(sentences)):
        w = raw.lower()
        if w in display or len(w) < MIN_WORD_LEN or w in STOP_WORDS:
            continue
        display[w] = raw
        words.append(w)
    return words, display


def extract_words(sentences: List[str]) -> List[str]:
    return extract_vocabulary(sentences)[0]


def word_frequency(sentences: List[str]) -> Dict[str, int]:
    freq: Dict[str, int] = {}
    for s in sentences:
        for raw in WORD_RE.findall(s):
            w = raw.lower()
            freq[w] = freq.get(w, 0) + 1
    return freq


def sort_by_frequency(words: List[str], frequency: Dict[str, int]) -> List[str]:
    # sorted 是稳定的：同频次保持原顺序
    return sorted(words, key=lambda w: -frequency.get(w, 0))


def find_example_sentence(word: str, sentences: List[str]) -> Optional[str]:
    """优先找较长（> 20 字符）的完整句子，再退回到全部句子。"""
    if not word:
        return None
    pat = re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)
    for s in sentences:
        if len(s) > 20 and pat.search(s):
            return s
    for s in sentences:
        if pat.search(s):
            return s
    return None

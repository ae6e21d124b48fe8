# -*- coding: utf-8 -*-
from pathlib import Path
from typing import Any, Optional
import orjson


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def dump_json_atomic(path: Path, obj: Any):
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_bytes(orjson.dumps(obj, option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS))
    tmp.replace(path)


def try_load_dict(path: Path) -> Optional[dict]:
    """文件不存在返回 None；内容损坏或不是对象时抛 ValueError。"""
    if not path.exists():
        return None
    try:
        data = load_json(path)
    except orjson.JSONDecodeError as ex:
        raise ValueError(f"bad json in {path}: {ex}") from ex
    if not isinstance(data, dict):
        raise ValueError(f"{path} must hold a JSON object")
    return data


def load_word_list(path: Path) -> list[str]:
    """兼容两种输入：数组 或 {words:[...]} / {entries:[{word}...]}"""
    data = load_json(path)
    if isinstance(data, dict):
        data = data.get("words") or data.get("entries") or []
    if not isinstance(data, list):
        raise ValueError("input JSON must be an array or {words:[...]}")
    out = []
    for e in data:
        w = e.get("word") if isinstance(e, dict) else e
        if isinstance(w, str) and w.strip():
            out.append(w.strip().lower())
    return out

# -*- coding: utf-8 -*-
import hashlib
import re
from pathlib import Path
from typing import Dict, List

import structlog

from utils.jsonio import dump_json_atomic, try_load_dict
from .srs import ensure_state

log = structlog.get_logger(__name__)

_SAFE_ID = re.compile(r"[^A-Za-z0-9._-]+")
_SUFFIX = ".progress.json"


class ProgressStore:
    """
    每个集合（collection_id，一部电影/一套字幕）一个 JSON 文件：
    {"collection": id, "progress": {word: state, ...}}
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, collection_id: str) -> Path:
        # 文件名 = 清洗后的 id + 原始 id 的短哈希，不同 id 不会落到同一个文件
        raw = str(collection_id)
        safe = _SAFE_ID.sub("_", raw).strip("._") or "default"
        digest = hashlib.sha1(raw.encode("utf-8")).hexdigest()[:8]
        return self.root / f"{safe}-{digest}{_SUFFIX}"

    def load_state(self, collection_id: str) -> Dict[str, dict]:
        path = self.path_for(collection_id)
        try:
            data = try_load_dict(path)
        except ValueError as ex:
            # 文件损坏：当作空进度，下次保存会覆盖
            log.warning("progress_load_failed", collection=collection_id, error=str(ex))
            return {}
        if not data:
            return {}
        raw = data.get("progress")
        if not isinstance(raw, dict):
            return {}
        return {str(w).lower(): ensure_state(s) for w, s in raw.items() if isinstance(s, dict)}

    def save_all(self, collection_id: str, progress: Dict[str, dict]):
        dump_json_atomic(self.path_for(collection_id),
                         {"collection": str(collection_id), "progress": progress})

    def save_state(self, collection_id: str, word: str, state: dict):
        progress = self.load_state(collection_id)
        progress[word] = state
        self.save_all(collection_id, progress)
        log.debug("progress_saved", collection=collection_id, word=word)

    def delete_collection(self, collection_id: str) -> bool:
        """删除一个集合的全部进度；文件原本存在返回 True。"""
        path = self.path_for(collection_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        log.info("progress_deleted", collection=collection_id)
        return True

    def list_collections(self) -> List[str]:
        if not self.root.exists():
            return []
        out = []
        for p in sorted(self.root.glob(f"*{_SUFFIX}")):
            try:
                data = try_load_dict(p) or {}
            except ValueError:
                continue
            out.append(str(data.get("collection") or p.name[:-len(_SUFFIX)]))
        return out

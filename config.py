# -*- coding: utf-8 -*-
import os
from pathlib import Path

# === 建议：优先用环境变量设置 ===
#  PowerShell:
#   $env:SUBVOCAB_LLM_API_KEY="sk-xxxxxxxx"
#  Linux/macOS:
#   export SUBVOCAB_LLM_API_KEY="sk-xxxxxxxx"

# 免费词典 + 翻译接口
DICTIONARY_API_URL = os.getenv(
    "SUBVOCAB_DICTIONARY_API_URL") or "https://api.dictionaryapi.dev/api/v2/entries/en"
TRANSLATE_API_URL = os.getenv(
    "SUBVOCAB_TRANSLATE_API_URL") or "https://api.mymemory.translated.net/get"
TRANSLATE_LANGPAIR = os.getenv("SUBVOCAB_TRANSLATE_LANGPAIR") or "en|zh"

# 可选：词典查不到时用 LLM 兜底（不设 key 则关闭）
LLM_API_KEY = os.getenv("SUBVOCAB_LLM_API_KEY") or ""
LLM_BASE_URL = os.getenv("SUBVOCAB_LLM_BASE_URL") or "https://api.openai.com/v1"
MODEL_NAME = os.getenv("SUBVOCAB_MODEL_NAME") or "gpt-4o-mini"

# 缓存 / 预取默认值（可在 CLI 覆盖）
DEFAULT_CACHE_SIZE = 200
DEFAULT_BATCH_SIZE = 4
MAX_BATCH_SIZE = 10
DEFAULT_PREFETCH_AHEAD = 5
DEFAULT_TIMEOUT = 15

DATA_DIR = Path(os.getenv("SUBVOCAB_DATA_DIR") or Path.cwd() / "data")

LOG_LEVEL = os.getenv("SUBVOCAB_LOG_LEVEL") or "INFO"
LOG_JSON = (os.getenv("SUBVOCAB_LOG_JSON") or "").lower() in ("1", "true", "yes")

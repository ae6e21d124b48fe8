# -*- coding: utf-8 -*-
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import asyncio
import json
import random

import httpx
import openai
import structlog

from config import DICTIONARY_API_URL, TRANSLATE_API_URL, TRANSLATE_LANGPAIR, MODEL_NAME
from utils.textops import has_chinese
from .cache import NOT_FOUND

log = structlog.get_logger(__name__)

MAX_DEFINITIONS = 3

SYSTEM_DEFINE = (
    "你是一名双语英语词典，负责给出单词的释义。"
    "输出必须是严格的 JSON 对象（不要额外文字），字段："
    "{"
    "\"word\":\"英文原词\","
    "\"phonetic\":\"IPA 音标，没有就留空\","
    "\"meanings\":[{\"part_of_speech\":\"词性\",\"definitions\":[\"英文释义，最多3条\"]}],"
    "\"translation\":\"简体中文释义（精炼）\""
    "}"
    "如果这不是一个真实的英文单词，返回 {\"word\":\"原词\",\"meanings\":[]}。"
)


class LookupFailed(Exception):
    """临时性失败（网络、5xx、LLM 调用异常）；不应被缓存。"""

    def __init__(self, word: str, reason: str):
        super().__init__(f"lookup failed for {word!r}: {reason}")
        self.word = word
        self.reason = reason


def parse_dictionary_entry(data: Any) -> Optional[Dict[str, Any]]:
    """dictionaryapi.dev 的响应 -> details；结构不对返回 None。"""
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return None
    entry = data[0]
    phonetics = [p for p in entry.get("phonetics") or [] if isinstance(p, dict)]
    phonetic = entry.get("phonetic") or next((p["text"] for p in phonetics if p.get("text")), "")
    audio = next((p["audio"] for p in phonetics if p.get("audio")), "")

    meanings: List[Dict[str, Any]] = []
    for m in entry.get("meanings") or []:
        if not isinstance(m, dict):
            continue
        defs = [d.get("definition") for d in m.get("definitions") or []
                if isinstance(d, dict) and d.get("definition")]
        meanings.append({"part_of_speech": m.get("partOfSpeech") or "unknown",
                         "definitions": defs[:MAX_DEFINITIONS] or ["暂无释义"]})
    return {"word": entry.get("word") or "", "phonetic": phonetic, "audio": audio,
            "meanings": meanings, "translation": "", "source": "dictionary"}


def _extract_json_object(txt: str) -> Optional[dict]:
    s, e = txt.find("{"), txt.rfind("}")
    if s != -1 and e != -1 and e > s:
        txt = txt[s:e+1]
    try:
        obj = json.loads(txt)
    except ValueError:
        return None
    return obj if isinstance(obj, dict) else None


async def fetch_dictionary(client: httpx.AsyncClient, word: str) -> Optional[Dict[str, Any]]:
    """404 -> None；其它非 2xx 或网络错误 -> LookupFailed。"""
    url = f"{DICTIONARY_API_URL.rstrip('/')}/{quote(word)}"
    try:
        resp = await client.get(url)
    except httpx.HTTPError as ex:
        raise LookupFailed(word, f"dictionary request error: {ex}") from ex
    if resp.status_code == 404:
        return None
    if resp.status_code >= 400:
        raise LookupFailed(word, f"dictionary HTTP {resp.status_code}")
    try:
        return parse_dictionary_entry(resp.json())
    except ValueError as ex:
        raise LookupFailed(word, f"dictionary returned bad json: {ex}") from ex


async def fetch_translation(client: httpx.AsyncClient, word: str) -> str:
    """中文翻译；失败只记日志返回空串，不影响主流程。"""
    try:
        resp = await client.get(TRANSLATE_API_URL, params={"q": word, "langpair": TRANSLATE_LANGPAIR})
        resp.raise_for_status()
        text = ((resp.json() or {}).get("responseData") or {}).get("translatedText") or ""
    except (httpx.HTTPError, ValueError, AttributeError) as ex:
        log.warning("translation_failed", word=word, error=str(ex))
        return ""
    text = str(text).strip()
    return text if has_chinese(text) else ""


async def define_with_llm(llm, word: str) -> Optional[Dict[str, Any]]:
    """词典查不到时的 LLM 兜底；模型认为不是单词时返回 None。"""
    user = {"role": "user", "content": f"单词：{word}\n请按指定 JSON 模板返回。"}
    try:
        resp = await llm.chat.completions.create(model=MODEL_NAME, temperature=0.2,
                                                 messages=[{"role": "system", "content": SYSTEM_DEFINE}, user])
    except openai.OpenAIError as ex:
        raise LookupFailed(word, f"llm error: {ex}") from ex
    obj = _extract_json_object(resp.choices[0].message.content or "{}")
    if not obj or not obj.get("meanings"):
        return None
    meanings = []
    for m in obj["meanings"]:
        if not isinstance(m, dict):
            continue
        defs = [str(d) for d in m.get("definitions") or [] if d][:MAX_DEFINITIONS]
        meanings.append({"part_of_speech": m.get("part_of_speech") or "unknown",
                         "definitions": defs or ["暂无释义"]})
    if not meanings:
        return None
    translation = str(obj.get("translation") or "")
    return {"word": obj.get("word") or word, "phonetic": obj.get("phonetic") or "", "audio": "",
            "meanings": meanings, "translation": translation if has_chinese(translation) else "",
            "source": "llm"}


async def _backoff(i: int):
    await asyncio.sleep(min(8.0, 0.6*(2**i)+random.uniform(0, 0.25)))


class DictionaryLookup:
    """
    lookup(word) -> details | NOT_FOUND，失败抛 LookupFailed。
    词典 -> (404 时) LLM 兜底 -> 附加中文翻译。
    """

    def __init__(self, client: httpx.AsyncClient, llm=None, retries: int = 1, translate: bool = True):
        self.client = client
        self.llm = llm
        self.retries = max(0, int(retries))
        self.translate = translate

    async def _fetch(self, word: str) -> Optional[Dict[str, Any]]:
        for attempt in range(self.retries + 1):
            try:
                details = await fetch_dictionary(self.client, word)
                if details is None and self.llm is not None:
                    details = await define_with_llm(self.llm, word)
                return details
            except LookupFailed as ex:
                if attempt == self.retries:
                    raise
                log.info("lookup_retry", word=word, attempt=attempt + 1, reason=ex.reason)
                await _backoff(attempt)
        return None

    async def lookup(self, word: str):
        details = await self._fetch(word)
        if details is None:
            log.info("word_not_found", word=word)
            return NOT_FOUND
        if self.translate and not details.get("translation"):
            details["translation"] = await fetch_translation(self.client, word)
        if details["translation"] and details["meanings"]:
            details["meanings"][0]["translation"] = details["translation"]
        return details

    __call__ = lookup

    async def aclose(self):
        await self.client.aclose()
        if self.llm is not None:
            await self.llm.close()

# -*- coding: utf-8 -*-
import os
import httpx
from openai import AsyncOpenAI
from config import LLM_API_KEY, LLM_BASE_URL, DEFAULT_TIMEOUT

_HEADERS = {"User-Agent": "subvocab/0.1"}


def _drop_socks_proxy():
    # 清理 socks 代理，httpx 默认不带 socks 支持
    for var in ("ALL_PROXY", "all_proxy"):
        os.environ.pop(var, None)


def setup_http_client(timeout: float = DEFAULT_TIMEOUT,
                      transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """词典/翻译接口共用的异步 HTTP 客户端。transport 仅供测试注入。"""
    _drop_socks_proxy()
    return httpx.AsyncClient(timeout=timeout, headers=_HEADERS,
                             transport=transport, follow_redirects=True)


def setup_llm_client(api_key: str | None = None, timeout: float = DEFAULT_TIMEOUT) -> AsyncOpenAI | None:
    key = api_key if api_key is not None else LLM_API_KEY
    if not key:
        return None
    _drop_socks_proxy()
    http_client = httpx.AsyncClient(timeout=timeout)
    return AsyncOpenAI(api_key=key, base_url=LLM_BASE_URL, http_client=http_client)

# -*- coding: utf-8 -*-
import argparse
import asyncio
from pathlib import Path

import orjson
from tqdm import tqdm

from api_client import setup_http_client, setup_llm_client
from config import DATA_DIR, DEFAULT_BATCH_SIZE, DEFAULT_CACHE_SIZE, DEFAULT_PREFETCH_AHEAD
from extractor.srt_extract import load_srt, extract_vocabulary, word_frequency, sort_by_frequency
from lookup.cache import DetailsCache, NOT_FOUND
from lookup.dictionary import DictionaryLookup
from lookup.prefetch import warm_cache
from study.progress_store import ProgressStore
from study.sampler import collection_stats
from study.session import StudySession
from study.srs import Feedback
from utils.jsonio import dump_json_atomic, load_word_list
from utils.log import configure_logging

_KEYS = {"h": Feedback.HARD, "g": Feedback.GOOD, "e": Feedback.EASY}


def _dumps(obj) -> str:
    return orjson.dumps(obj, option=orjson.OPT_INDENT_2).decode("utf-8")


def _make_lookup(no_llm: bool = False) -> DictionaryLookup:
    return DictionaryLookup(setup_http_client(), llm=None if no_llm else setup_llm_client())


def format_details(word: str, details: dict | None, example: str | None = None) -> str:
    lines = [word]
    if details is None:
        lines.append("  （未找到该单词的详细信息，可能是专有名词或拼写错误）")
    else:
        if details.get("phonetic"):
            lines[0] += f"  {details['phonetic']}"
        if details.get("translation"):
            lines.append(f"  {details['translation']}")
        for m in details.get("meanings") or []:
            lines.append(f"  [{m['part_of_speech']}]")
            lines.extend(f"    - {d}" for d in m["definitions"])
    if example:
        lines.append(f"  例句：{example}")
    return "\n".join(lines)


async def _lookup_cmd(words, no_llm: bool):
    lookup = _make_lookup(no_llm)
    try:
        for w in words:
            res = await lookup(w.lower())
            print(_dumps({"word": w, "details": None if res is NOT_FOUND else res}))
    finally:
        await lookup.aclose()


async def _warm_cmd(words, out: Path | None, batch_size: int, cache_size: int, no_llm: bool):
    lookup = _make_lookup(no_llm)
    cache = DetailsCache(max(cache_size, len(words)))
    pbar = tqdm(total=0, desc="Looking up")

    def progress(d, t):
        pbar.n = d
        pbar.total = t
        pbar.refresh()
    try:
        await warm_cache(words, lookup, cache, batch_size=batch_size, progress_cb=progress)
    finally:
        pbar.close()
        await lookup.aclose()
    found = {w: cache.get(w) for w in cache.keys() if cache.get(w) is not NOT_FOUND}
    if out:
        dump_json_atomic(out, {"meta": {"count": len(found), "requested": len(words)}, "details": found})
        print(f"✓ Saved {len(found)}/{len(words)} details -> {out}")
    else:
        print(f"✓ Cached {len(found)}/{len(words)} words")


async def _study_cmd(args):
    lookup = _make_lookup(args.no_llm)
    store = ProgressStore(args.data_dir)
    session = StudySession.from_srt(
        args.collection or args.srt.stem, args.srt.read_text(encoding="utf-8", errors="replace"),
        lookup, by_frequency=args.by_frequency, store=store,
        cache=DetailsCache(args.cache_size), prefetch_ahead=args.ahead, batch_size=args.batch_size)
    try:
        session.schedule_prefetch()
        while True:
            word = session.next_word()
            if word is None:
                print("恭喜！没有可以学习的单词了。")
                break
            details = await session.details(word)
            print()
            print(format_details(session.display_of(word), details, session.example_for(word)))
            ans = (await asyncio.to_thread(input, "[h]ard / [g]ood / [e]asy / [q]uit > ")).strip().lower()
            if ans.startswith("q"):
                break
            state = session.record(_KEYS.get(ans[:1], Feedback.GOOD))
            print(f"  -> {state['interval']} 天后复习（{state['proficiency']}）")
    finally:
        await session.close()
        await lookup.aclose()
    print(_dumps(session.stats()))


def cli():
    ap = argparse.ArgumentParser(description="Subtitle vocabulary trainer (SRS + dictionary cache)")
    ap.add_argument("--data-dir", type=Path, default=DATA_DIR)
    sub = ap.add_subparsers(dest="cmd")

    p_x = sub.add_parser("extract", help="SRT -> words.json")
    p_x.add_argument("srt", type=Path)
    p_x.add_argument("out", type=Path)
    p_x.add_argument("--by-frequency", action="store_true")

    p_l = sub.add_parser("lookup", help="查询单词详情")
    p_l.add_argument("words", nargs="+")
    p_l.add_argument("--no-llm", action="store_true")

    p_w = sub.add_parser("warm", help="words.json -> details.json（批量查询）")
    p_w.add_argument("words_json", type=Path)
    p_w.add_argument("--out", type=Path)
    p_w.add_argument("--batch-size", type=int, default=DEFAULT_BATCH_SIZE)
    p_w.add_argument("--cache-size", type=int, default=DEFAULT_CACHE_SIZE)
    p_w.add_argument("--no-llm", action="store_true")

    p_s = sub.add_parser("study", help="按 SRS 学习字幕里的单词")
    p_s.add_argument("srt", type=Path)
    p_s.add_argument("--collection")
    p_s.add_argument("--by-frequency", action="store_true")
    p_s.add_argument("--ahead", type=int, default=DEFAULT_PREFETCH_AHEAD)
    p_s.add_argument("--batch-size", type=int, default=DEFAULT_BATCH_SIZE)
    p_s.add_argument("--cache-size", type=int, default=DEFAULT_CACHE_SIZE)
    p_s.add_argument("--no-llm", action="store_true")

    p_t = sub.add_parser("stats", help="查看学习统计")
    p_t.add_argument("srt", type=Path)
    p_t.add_argument("--collection")

    p_f = sub.add_parser("forget", help="删除一个集合的学习进度")
    p_f.add_argument("collection")

    args = ap.parse_args()
    configure_logging()
    if args.cmd is None:
        ap.print_help()
    elif args.cmd == "extract":
        sentences = load_srt(args.srt)
        words, display = extract_vocabulary(sentences)
        if args.by_frequency:
            words = sort_by_frequency(words, word_frequency(sentences))
        dump_json_atomic(args.out, {"meta": {"source": str(args.srt.resolve()), "count": len(words),
                                             "sentences": len(sentences)},
                                    "words": words, "display": display})
        print(f"✓ Saved {len(words)} words -> {args.out}")
    elif args.cmd == "lookup":
        asyncio.run(_lookup_cmd(args.words, args.no_llm))
    elif args.cmd == "warm":
        asyncio.run(_warm_cmd(load_word_list(args.words_json), args.out,
                              args.batch_size, args.cache_size, args.no_llm))
    elif args.cmd == "study":
        asyncio.run(_study_cmd(args))
    elif args.cmd == "stats":
        words, _ = extract_vocabulary(load_srt(args.srt))
        progress = ProgressStore(args.data_dir).load_state(args.collection or args.srt.stem)
        print(_dumps(collection_stats(words, progress)))
    elif args.cmd == "forget":
        if ProgressStore(args.data_dir).delete_collection(args.collection):
            print(f"✓ Deleted progress for {args.collection}")
        else:
            print(f"No progress saved for {args.collection}")


if __name__ == "__main__":
    cli()

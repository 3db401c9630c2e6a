"""Normalise backend word timestamps and read/write them as JSON."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Iterable, Mapping

from kidsafe.core.models import WordTimestamp

# Assumed when a backend reports no per-word probability
DEFAULT_CONFIDENCE = 0.9

_NON_WORD_RE = re.compile(r"[^\w]")


def clean_word(text: str) -> str:
    """Lowercase and strip everything but word characters ("Damn!" -> "damn")."""
    return _NON_WORD_RE.sub("", text.lower())


def normalize_words(raw: Iterable[Mapping | object]) -> list[WordTimestamp]:
    """Convert backend word records to WordTimestamps.

    Accepts dicts or objects exposing ``word``, ``start``, ``end`` and an
    optional ``probability``/``confidence``. Words that are empty after
    cleaning are dropped; input order is kept.
    """
    words = []
    for item in raw:
        text = clean_word(str(_get(item, "word", "") or ""))
        if not text:
            continue
        start = float(_get(item, "start", 0.0) or 0.0)
        end = float(_get(item, "end", start) or start)
        confidence = _get(item, "probability", None)
        if confidence is None:
            confidence = _get(item, "confidence", None)
        words.append(
            WordTimestamp(
                word=text,
                start=start,
                end=max(start, end),
                confidence=DEFAULT_CONFIDENCE if confidence is None else float(confidence),
            )
        )
    return words


def _get(obj: Mapping | object, key: str, default: object = None) -> object:
    """Get attribute from object or key from dict."""
    if isinstance(obj, Mapping):
        return obj.get(key, default)
    return getattr(obj, key, default)


def save_words(words: Iterable[WordTimestamp], path: Path) -> Path:
    """Write words as a JSON array of {word, start, end, confidence}."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = [
        {"word": w.word, "start": w.start, "end": w.end, "confidence": w.confidence}
        for w in words
    ]
    path.write_text(json.dumps(data, ensure_ascii=False, indent=1), encoding="utf-8")
    return path


def load_words(path: Path) -> list[WordTimestamp]:
    """Read a words JSON file written by ``save_words`` (or by hand).

    Raises:
        ValueError: If the file is not a JSON array of word objects, or a
            word ends before it starts.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of words")
    words = []
    for i, item in enumerate(data):
        word = WordTimestamp(
            word=str(item["word"]),
            start=float(item["start"]),
            end=float(item["end"]),
            confidence=float(item.get("confidence", DEFAULT_CONFIDENCE)),
        )
        if word.end < word.start:
            raise ValueError(
                f"{path}: word {i} ({word.word!r}) ends at {word.end:.3f}s "
                f"before it starts at {word.start:.3f}s"
            )
        words.append(word)
    return words

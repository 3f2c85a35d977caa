"""Turn raw generator output into an ordered sequence of content blocks.

The input is nominally a JSON object, but it may carry leading or trailing
chatter, be markdown, be plain text, or be empty. ``normalize`` never raises:
every failure degrades to a weaker structural guess and, at worst, to the raw
text wrapped in paragraphs. Text-mode paragraphs are kept short enough to fit
on one page.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from .blocks import SPACER, ContentBlock, collapse_spacers, heading, list_item, paragraph, subheading
from .shapes import (
    format_key_name,
    is_empty,
    match_item,
    match_object,
    numbered,
    split_paragraphs,
    stringify,
)

logger = logging.getLogger(__name__)

MAX_ARRAY_ITEMS = 50
MAX_NESTED_ITEMS = 20
MAX_FALLBACK_CHARS = 5000
# About a dozen wrapped body lines, so a text-mode paragraph always fits on one page.
MAX_PARAGRAPH_CHARS = 1200
EMPTY_CONTENT_TEXT = "No content was generated."

# Preferred section order. A key is split into words and takes the rank of the
# first stem spelled by a run of whole words (a trailing "s" is allowed), so
# "impressionsGoal" does not match "press". Unmatched keys keep their natural
# order after every matched key.
KEY_PRIORITY: Tuple[str, ...] = (
    "executivesummary",
    "summary",
    "overview",
    "targetmarket",
    "marketanalysis",
    "positioning",
    "competitor",
    "pricing",
    "priceposition",
    "budget",
    "gotomarket",
    "channel",
    "launch",
    "timeline",
    "phase",
    "email",
    "twitter",
    "linkedin",
    "social",
    "producthunt",
    "press",
    "partnership",
    "successmetrics",
    "keymetrics",
    "metrics",
    "risk",
)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_LIST_MARKER = re.compile(r"^(?:(?:\d+\.|[-*])\s+|•)")
_KEY_WORD = re.compile(r"[a-z]+|\d+")


def normalize(raw: Optional[str]) -> List[ContentBlock]:
    """Parse ``raw`` into blocks; always returns at least one block."""

    text = _CONTROL_CHARS.sub("", raw or "")

    data = _extract_json_object(text)
    if data is not None:
        blocks = _blocks_from_json(data)
        if any(not b.is_spacer for b in blocks):
            logger.debug("normalized_json", extra={"blocks": len(blocks), "keys": len(data)})
            return blocks
        logger.debug("normalized_json_empty_fallthrough")

    # plain text with no heading lines is held to the same cap as the raw fallback
    structured = any(line.lstrip().startswith("#") for line in text.splitlines())
    blocks = _blocks_from_markdown(text if structured else text.strip()[:MAX_FALLBACK_CHARS])
    if blocks:
        logger.debug("normalized_markdown", extra={"blocks": len(blocks)})
        return blocks

    logger.debug("normalized_raw_fallback", extra={"chars": len(text)})
    fallback = text.strip()[:MAX_FALLBACK_CHARS] or EMPTY_CONTENT_TEXT
    return [paragraph(chunk) for chunk in _chunk(fallback)]


# --------------------------------------------------------------------------------------
# JSON mode
# --------------------------------------------------------------------------------------

def _extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        data = json.loads(text[start : end + 1])
    except (ValueError, RecursionError):
        return None
    return data if isinstance(data, dict) else None


def _priority(key: str) -> int:
    words = _KEY_WORD.findall(format_key_name(key).lower())
    # every run of whole words, joined: "goToMarketChannels" -> "gotomarket", "channels", ...
    runs = {"".join(words[i:j]) for i in range(len(words)) for j in range(i + 1, len(words) + 1)}
    for rank, stem in enumerate(KEY_PRIORITY):
        if stem in runs or stem + "s" in runs:
            return rank
    return len(KEY_PRIORITY)


def ordered_keys(data: Dict[str, Any]) -> List[str]:
    # sorted() is stable, so equal ranks keep document order
    return sorted(data.keys(), key=_priority)


def _blocks_from_json(data: Dict[str, Any]) -> List[ContentBlock]:
    blocks: List[ContentBlock] = []
    for key in ordered_keys(data):
        value = data[key]
        if not str(key).strip() or is_empty(value):
            continue
        blocks.append(heading(format_key_name(key)))
        blocks.extend(_value_blocks(value))
        blocks.append(SPACER)
    return collapse_spacers(blocks)


def _value_blocks(value: Any) -> List[ContentBlock]:
    if isinstance(value, str):
        return [paragraph(p) for p in split_paragraphs(value)]
    if isinstance(value, list):
        return _array_blocks(value)
    if isinstance(value, dict):
        return _object_blocks(value)
    text = stringify(value)
    return [paragraph(text)] if text else []


def _array_blocks(items: List[Any]) -> List[ContentBlock]:
    blocks: List[ContentBlock] = []
    for idx, item in enumerate(items[:MAX_ARRAY_ITEMS]):
        if is_empty(item):
            continue
        if isinstance(item, dict):
            blocks.extend(match_item(item, idx + 1))
        else:
            text = stringify(item)
            if text:
                blocks.append(list_item(numbered(idx + 1, text)))
    return blocks


def _object_blocks(value: Dict[str, Any]) -> List[ContentBlock]:
    shaped = match_object(value)
    if shaped is not None:
        return shaped

    blocks: List[ContentBlock] = []
    for sub_key, sub_value in value.items():
        if not str(sub_key).strip() or is_empty(sub_value):
            continue
        title = subheading(format_key_name(sub_key))
        if isinstance(sub_value, list):
            entries = [stringify(v) for v in sub_value if not is_empty(v)]
            entries = [e for e in entries if e][:MAX_NESTED_ITEMS]
            if entries:
                blocks.append(title)
                blocks.extend(list_item(numbered(i + 1, e)) for i, e in enumerate(entries))
        elif isinstance(sub_value, dict):
            lines = [
                f"{format_key_name(k)}: {stringify(v)}"
                for k, v in sub_value.items()
                if stringify(v)
            ]
            if lines:
                blocks.append(title)
                blocks.extend(paragraph(line) for line in lines)
        else:
            paras = split_paragraphs(stringify(sub_value), suppress_placeholders=False)
            if paras:
                blocks.append(title)
                blocks.extend(paragraph(p) for p in paras)
    return blocks


# --------------------------------------------------------------------------------------
# Markdown / plain-text mode
# --------------------------------------------------------------------------------------

def _blocks_from_markdown(text: str) -> List[ContentBlock]:
    blocks: List[ContentBlock] = []
    running: List[str] = []

    def flush() -> None:
        if running:
            blocks.extend(paragraph(chunk) for chunk in _chunk(" ".join(running)))
            running.clear()

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            flush()
            continue
        if stripped.startswith("#"):
            flush()
            title = stripped.lstrip("#").strip()
            if title:
                if stripped.startswith("##"):
                    blocks.append(subheading(title))
                else:
                    blocks.append(heading(title))
            continue
        if _LIST_MARKER.match(stripped):
            flush()
            blocks.append(list_item(stripped))
            continue
        running.append(stripped)
    flush()
    return blocks


def _chunk(text: str, limit: int = MAX_PARAGRAPH_CHARS) -> List[str]:
    """Split ``text`` on word boundaries into pieces of at most ``limit`` chars."""

    chunks: List[str] = []
    current = ""
    for word in text.split():
        while len(word) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(word[:limit])
            word = word[limit:]
        if not word:
            continue
        candidate = f"{current} {word}" if current else word
        if len(candidate) > limit:
            chunks.append(current)
            current = word
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks

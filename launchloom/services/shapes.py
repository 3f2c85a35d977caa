"""Shape matchers for the JSON layouts the upstream generator has produced.

The generator has no fixed output schema: emails arrive as
``emailSequence``/``emailSequences``/``emailTemplates``, social posts as flat
lists or as ``twitterStrategy.posts``, budgets as nested objects, and so on.
Each matcher pairs a predicate with an extractor and the tables below are
tried in order, so tolerating a new shape means adding one row.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from .blocks import ContentBlock, list_item, paragraph, subheading

MAX_POSTS = 30

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_LEADING_NUMBER = re.compile(r"^\d+\.\s*")
_BLANK_LINES = re.compile(r"\n\s*\n")


# --------------------------------------------------------------------------------------
# Text helpers
# --------------------------------------------------------------------------------------

def format_key_name(key: str) -> str:
    """``launchTimeline`` / ``launch_timeline`` -> ``Launch Timeline``."""

    spaced = _CAMEL_BOUNDARY.sub(" ", str(key)).replace("_", " ").replace("-", " ")
    words = [w[:1].upper() + w[1:] for w in spaced.split()]
    return " ".join(words)


def is_placeholder(text: str) -> bool:
    """True for empty, punctuation-only, or too-short (<5 chars) fragments."""

    stripped = text.strip()
    return len(stripped) < 5 or not any(ch.isalnum() for ch in stripped)


def split_paragraphs(text: str, *, suppress_placeholders: bool = True) -> List[str]:
    parts = [p.strip() for p in _BLANK_LINES.split(text.replace("\r\n", "\n"))]
    if suppress_placeholders:
        return [p for p in parts if not is_placeholder(p)]
    return [p for p in parts if p and any(ch.isalnum() for ch in p)]


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def stringify(value: Any) -> str:
    """Flatten any JSON value to one readable line (never raw JSON)."""

    if is_empty(value):
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        parts = [
            f"{format_key_name(k)}: {stringify(v)}" for k, v in value.items() if not is_empty(v)
        ]
        return ", ".join(p for p in parts if not p.endswith(": "))
    if isinstance(value, (list, tuple)):
        return "; ".join(s for s in (stringify(v) for v in value) if s)
    return str(value).strip()


def labelled_lines(item: Dict[str, Any], skip: Sequence[str] = ()) -> List[str]:
    lines = []
    for key, value in item.items():
        if key in skip or is_empty(value):
            continue
        text = stringify(value)
        if text:
            lines.append(f"{format_key_name(key)}: {text}")
    return lines


def numbered(index: int, text: str) -> str:
    return f"{index}. {_LEADING_NUMBER.sub('', text.strip())}"


def _first_present(item: Dict[str, Any], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        if not is_empty(item.get(key)):
            return key
    return None


def _post_text(post: Any) -> str:
    if isinstance(post, dict):
        content = post.get("content") or post.get("text") or post.get("post")
        if not is_empty(post.get("day")) and not is_empty(content):
            return f"{_day_label(post['day'])}: {stringify(content)}"
        if not is_empty(content):
            return stringify(content)
    return stringify(post)


def _day_label(day: Any) -> str:
    if isinstance(day, (int, float)) and not isinstance(day, bool):
        return f"Day {day}"
    text = stringify(day)
    return f"Day {text}" if text.isdigit() else text


def post_items(posts: Sequence[Any], limit: int = MAX_POSTS) -> List[ContentBlock]:
    blocks = []
    for idx, post in enumerate(p for p in posts[:limit] if not is_empty(p)):
        text = _post_text(post)
        if text:
            blocks.append(list_item(numbered(idx + 1, text)))
    return blocks


# --------------------------------------------------------------------------------------
# Matcher table types
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class ShapeMatcher:
    """A recognisable JSON shape and how to turn it into blocks."""

    name: str
    applies: Callable[[Dict[str, Any]], bool]
    extract: Callable[[Dict[str, Any], int], List[ContentBlock]]


# --------------------------------------------------------------------------------------
# Array-item shapes
# --------------------------------------------------------------------------------------

_EMAIL_BODY_KEYS = ("body", "content", "copy")
_EMAIL_EXTRA_KEYS = ("tone", "purpose", "goal", "audience")
_DATED_TEXT_KEYS = ("content", "actions", "task", "text", "action")


def _is_email(item: Dict[str, Any]) -> bool:
    return not is_empty(item.get("subject")) and _first_present(item, _EMAIL_BODY_KEYS) is not None


def _email_blocks(item: Dict[str, Any], index: int) -> List[ContentBlock]:
    blocks = [paragraph(stringify(item["subject"]), bold=True)]
    body = stringify(item[_first_present(item, _EMAIL_BODY_KEYS)])
    for para in split_paragraphs(body, suppress_placeholders=False):
        blocks.append(paragraph(para))
    for key in _EMAIL_EXTRA_KEYS:
        if not is_empty(item.get(key)):
            blocks.append(paragraph(f"{format_key_name(key)}: {stringify(item[key])}"))
    return blocks


def _is_platform_post(item: Dict[str, Any]) -> bool:
    return not is_empty(item.get("platform"))


def _platform_blocks(item: Dict[str, Any], index: int) -> List[ContentBlock]:
    blocks = [subheading(f"{stringify(item['platform'])} (Post {index})")]
    for key, value in item.items():
        if key == "platform" or is_empty(value):
            continue
        if isinstance(value, list):
            blocks.extend(post_items(value))
        else:
            text = stringify(value)
            if text:
                blocks.append(paragraph(text))
    return blocks


def _is_dated(item: Dict[str, Any]) -> bool:
    return not is_empty(item.get("day")) and _first_present(item, _DATED_TEXT_KEYS) is not None


def _dated_blocks(item: Dict[str, Any], index: int) -> List[ContentBlock]:
    text_key = _first_present(item, _DATED_TEXT_KEYS)
    lines = [f"{_day_label(item['day'])}: {stringify(item[text_key])}"]
    lines.extend(labelled_lines(item, skip=("day", text_key)))
    return [list_item("\n".join(lines))]


def _generic_blocks(item: Dict[str, Any], index: int) -> List[ContentBlock]:
    content = "\n".join(labelled_lines(item))
    if len(content) > 5:
        return [list_item(numbered(index, content))]
    return []


ITEM_MATCHERS: List[ShapeMatcher] = [
    ShapeMatcher("email", _is_email, _email_blocks),
    ShapeMatcher("platform_post", _is_platform_post, _platform_blocks),
    ShapeMatcher("dated_entry", _is_dated, _dated_blocks),
    ShapeMatcher("generic", lambda item: True, _generic_blocks),
]


# --------------------------------------------------------------------------------------
# Object-value shapes (``twitterStrategy``, ``budgetBreakdown`` ...)
# --------------------------------------------------------------------------------------

_BUDGET_TOTAL_KEYS = ("totalBudget", "total")
_BUDGET_AMOUNT_KEYS = ("allocation", "amount", "percentage", "budget")
_BUDGET_GROUP_KEYS = ("categories", "breakdown", "allocations")


def _has_posts(value: Dict[str, Any]) -> bool:
    return isinstance(value.get("posts"), list) and any(not is_empty(p) for p in value["posts"])


def _strategy_blocks(value: Dict[str, Any], index: int) -> List[ContentBlock]:
    blocks = [paragraph(line) for line in labelled_lines(value, skip=("posts",))]
    posts = post_items(value["posts"])
    if posts:
        blocks.append(subheading("Posts"))
        blocks.extend(posts)
    return blocks


def _has_budget_total(value: Dict[str, Any]) -> bool:
    return _first_present(value, _BUDGET_TOTAL_KEYS) is not None


def _budget_categories(value: Dict[str, Any]):
    for key, category in value.items():
        if key in _BUDGET_TOTAL_KEYS or is_empty(category):
            continue
        # {"categories": {"Paid Ads": {...}}} nests the categories one level down
        if key in _BUDGET_GROUP_KEYS and isinstance(category, dict):
            yield from ((k, v) for k, v in category.items() if not is_empty(v))
        else:
            yield key, category


def _budget_blocks(value: Dict[str, Any], index: int) -> List[ContentBlock]:
    total_key = _first_present(value, _BUDGET_TOTAL_KEYS)
    blocks = [paragraph(f"Total Budget: {stringify(value[total_key])}", bold=True)]
    for key, category in _budget_categories(value):
        if not isinstance(category, dict):
            blocks.append(paragraph(f"{format_key_name(key)}: {stringify(category)}"))
            continue
        blocks.append(subheading(format_key_name(key)))
        amount_key = _first_present(category, _BUDGET_AMOUNT_KEYS)
        if amount_key:
            blocks.append(paragraph(f"Allocation: {stringify(category[amount_key])}"))
        if not is_empty(category.get("description")):
            blocks.append(paragraph(stringify(category["description"])))
        tactics = category.get("tactics")
        if isinstance(tactics, list):
            blocks.extend(list_item(f"- {stringify(t)}") for t in tactics if stringify(t))
        for line in labelled_lines(category, skip=(amount_key or "", "description", "tactics")):
            blocks.append(paragraph(line))
    return blocks


OBJECT_MATCHERS: List[ShapeMatcher] = [
    ShapeMatcher("strategy_with_posts", _has_posts, _strategy_blocks),
    ShapeMatcher("budget_breakdown", _has_budget_total, _budget_blocks),
]


def match_item(item: Dict[str, Any], index: int) -> List[ContentBlock]:
    """Blocks for one array element that is a JSON object."""

    for matcher in ITEM_MATCHERS:
        if matcher.applies(item):
            return matcher.extract(item, index)
    return []


def match_object(value: Dict[str, Any]) -> Optional[List[ContentBlock]]:
    """Blocks for a known object shape, or ``None`` to use the generic walk."""

    for matcher in OBJECT_MATCHERS:
        if matcher.applies(value):
            return matcher.extract(value, 0)
    return None

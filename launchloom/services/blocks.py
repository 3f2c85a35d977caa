"""Typed content blocks shared by the normalizer and the layout engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List


class BlockKind(str, Enum):
    HEADING = "heading"
    SUBHEADING = "subheading"
    PARAGRAPH = "paragraph"
    LIST_ITEM = "list_item"
    SPACER = "spacer"


@dataclass(frozen=True)
class ContentBlock:
    """One unit of normalized document content.

    ``text`` is always human-readable; nested JSON is flattened before a
    block is built. ``bold`` marks emphasised paragraphs such as email
    subject lines.
    """

    kind: BlockKind
    text: str = ""
    bold: bool = False

    @property
    def is_spacer(self) -> bool:
        return self.kind is BlockKind.SPACER


def heading(text: str) -> ContentBlock:
    return ContentBlock(BlockKind.HEADING, text)


def subheading(text: str) -> ContentBlock:
    return ContentBlock(BlockKind.SUBHEADING, text)


def paragraph(text: str, bold: bool = False) -> ContentBlock:
    return ContentBlock(BlockKind.PARAGRAPH, text, bold=bold)


def list_item(text: str) -> ContentBlock:
    return ContentBlock(BlockKind.LIST_ITEM, text)


SPACER = ContentBlock(BlockKind.SPACER)


def collapse_spacers(blocks: Iterable[ContentBlock]) -> List[ContentBlock]:
    """Drop leading spacers and merge runs of consecutive spacers into one."""

    out: List[ContentBlock] = []
    for block in blocks:
        if block.is_spacer and (not out or out[-1].is_spacer):
            continue
        out.append(block)
    return out

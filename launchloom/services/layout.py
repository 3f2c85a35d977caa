"""Layout engine: place content blocks onto fixed-size pages.

Vertical positions are measured downward from the top edge of the page, so a
``Cursor`` starts at the top margin and grows. The emitter converts to PDF
coordinates. Text is wrapped here with the same ReportLab font metrics the
emitter draws with, and the wrapped lines travel with each instruction, so
pagination can never disagree with what ends up on the page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth

from .blocks import BlockKind, ContentBlock
from .tiers import NEUTRAL_COLOR, Tier, TierPolicy, coerce_tier, policy_for

logger = logging.getLogger(__name__)

BODY_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"

SPACER_GAP = 8.0
LIST_INDENT = 14.0
COVER_GAP = 18.0

# Characters outside WinAnsi that the generator likes to emit.
_GLYPH_SUBSTITUTES = {
    "→": "->",
    "←": "<-",
    "✓": "-",
    "✔": "-",
    "✅": "-",
    "≤": "<=",
    "≥": ">=",
    "\t": "    ",
    "\u00a0": " ",
}


# --------------------------------------------------------------------------------------
# Geometry, document contract, styles
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class PageGeometry:
    width: float = A4[0]
    height: float = A4[1]
    top: float = 40.0
    bottom: float = 40.0
    left: float = 40.0
    right: float = 40.0

    @property
    def content_width(self) -> float:
        return self.width - self.left - self.right

    @property
    def usable_height(self) -> float:
        return self.height - self.top - self.bottom

    @property
    def bottom_limit(self) -> float:
        return self.height - self.bottom


@dataclass(frozen=True)
class DocumentSpec:
    """Rendering contract for one output document."""

    title: str
    tier: Tier
    geometry: PageGeometry = field(default_factory=PageGeometry)
    generated_on: date = field(default_factory=date.today)
    subtitle: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tier", coerce_tier(self.tier))

    @property
    def policy(self) -> TierPolicy:
        return policy_for(self.tier)

    @property
    def palette(self) -> Dict[str, str]:
        return self.policy.palette


@dataclass(frozen=True)
class TextStyle:
    font: str
    size: float
    leading: float
    color: str
    indent: float = 0.0
    space_after: float = 5.0
    underline: bool = False
    align: str = "left"
    rule_below: bool = False


def _color(palette: Dict[str, str], role: str) -> str:
    return palette.get(role) or NEUTRAL_COLOR


def style_for(kind: BlockKind, palette: Dict[str, str], bold: bool = False) -> TextStyle:
    """Type style determined only by block kind and tier palette."""

    if kind is BlockKind.HEADING:
        return TextStyle(BOLD_FONT, 16, 20, _color(palette, "primary"), space_after=8, underline=True)
    if kind is BlockKind.SUBHEADING:
        return TextStyle(BOLD_FONT, 13, 16, _color(palette, "secondary"), space_after=8)
    if kind is BlockKind.LIST_ITEM:
        return TextStyle(BODY_FONT, 11, 14, _color(palette, "text"), indent=LIST_INDENT)
    return TextStyle(BOLD_FONT if bold else BODY_FONT, 11, 14, _color(palette, "text"))


# --------------------------------------------------------------------------------------
# Text measurement
# --------------------------------------------------------------------------------------

def to_drawable(text: str) -> str:
    """Map text onto what the standard PDF fonts can draw."""

    for src, dst in _GLYPH_SUBSTITUTES.items():
        text = text.replace(src, dst)
    return text.encode("cp1252", "ignore").decode("cp1252")


def _fit_prefix(word: str, font: str, size: float, width: float) -> int:
    cut = 1
    while cut < len(word) and stringWidth(word[: cut + 1], font, size) <= width:
        cut += 1
    return cut


def wrap_text(text: str, font: str, size: float, width: float) -> List[str]:
    """Greedy word wrap using real font metrics; explicit newlines are kept."""

    lines: List[str] = []
    for raw_line in text.split("\n"):
        current = ""
        for word in raw_line.split():
            candidate = f"{current} {word}" if current else word
            if stringWidth(candidate, font, size) <= width:
                current = candidate
                continue
            if current:
                lines.append(current)
            while len(word) > 1 and stringWidth(word, font, size) > width:
                cut = _fit_prefix(word, font, size, width)
                lines.append(word[:cut])
                word = word[cut:]
            current = word
        if current:
            lines.append(current)
    return lines or [""]


# --------------------------------------------------------------------------------------
# Cursor and pages
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Cursor:
    """Vertical write position; a new value is returned on every move."""

    y: float
    top: float
    limit: float

    @classmethod
    def for_geometry(cls, geometry: PageGeometry) -> "Cursor":
        return cls(y=geometry.top, top=geometry.top, limit=geometry.bottom_limit)

    @property
    def at_top(self) -> bool:
        return self.y <= self.top

    def fits(self, height: float) -> bool:
        return self.y + height <= self.limit

    def advance(self, dy: float) -> "Cursor":
        return replace(self, y=self.y + dy)

    def reset(self) -> "Cursor":
        return replace(self, y=self.top)


@dataclass(frozen=True)
class DrawInstruction:
    block: ContentBlock
    y: float
    style: TextStyle
    lines: Tuple[str, ...]

    @property
    def height(self) -> float:
        return len(self.lines) * self.style.leading

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class Page:
    number: int
    instructions: List[DrawInstruction] = field(default_factory=list)

    @property
    def content_bottom(self) -> float:
        return max((ins.bottom for ins in self.instructions), default=0.0)


# --------------------------------------------------------------------------------------
# Layout pass
# --------------------------------------------------------------------------------------

def _instruction(block: ContentBlock, cursor: Cursor, style: TextStyle, width: float) -> DrawInstruction:
    lines = wrap_text(to_drawable(block.text), style.font, style.size, width - style.indent)
    return DrawInstruction(block=block, y=cursor.y, style=style, lines=tuple(lines))


def cover_blocks(spec: DocumentSpec) -> List[Tuple[ContentBlock, TextStyle]]:
    """Fixed first-page template: title, tier label, date stamp, audience."""

    palette = spec.palette
    stamp = f"Generated {spec.generated_on.strftime('%B')} {spec.generated_on.day}, {spec.generated_on.year}"
    items = [
        (
            ContentBlock(BlockKind.HEADING, f"{spec.title} Launch Playbook"),
            TextStyle(BOLD_FONT, 28, 32, _color(palette, "text"), space_after=6, align="center"),
        ),
        (
            ContentBlock(BlockKind.PARAGRAPH, spec.policy.label),
            TextStyle(BOLD_FONT, 12, 16, _color(palette, "primary"), space_after=4, align="center"),
        ),
        (
            ContentBlock(BlockKind.PARAGRAPH, stamp),
            TextStyle(BODY_FONT, 10, 14, _color(palette, "muted"), space_after=4, align="center"),
        ),
    ]
    if spec.subtitle:
        items.append(
            (
                ContentBlock(BlockKind.PARAGRAPH, f"For: {spec.subtitle}"),
                TextStyle(BODY_FONT, 11, 14, _color(palette, "secondary"), space_after=4, align="center"),
            )
        )
    block, style = items[-1]
    items[-1] = (block, replace(style, rule_below=True, space_after=COVER_GAP))
    return items


def layout(blocks: Iterable[ContentBlock], spec: DocumentSpec) -> List[Page]:
    """Assign every block to a page and a vertical position.

    A page break is taken before a block whose height would cross the bottom
    margin; blocks are never split. A block taller than a whole page is drawn
    at the top of a fresh page and allowed to overflow.
    """

    geometry = spec.geometry
    palette = spec.palette
    width = geometry.content_width
    pages = [Page(number=1)]
    cursor = Cursor.for_geometry(geometry)

    for block, style in cover_blocks(spec):
        ins = _instruction(block, cursor, style, width)
        pages[-1].instructions.append(ins)
        cursor = cursor.advance(ins.height + style.space_after)

    for block in blocks:
        if block.is_spacer:
            if not cursor.at_top:
                cursor = cursor.advance(SPACER_GAP)
            continue

        style = style_for(block.kind, palette, block.bold)
        ins = _instruction(block, cursor, style, width)
        needed = ins.height
        if block.kind in (BlockKind.HEADING, BlockKind.SUBHEADING):
            # keep a heading together with at least one line of what follows
            needed += style.space_after + style_for(BlockKind.PARAGRAPH, palette).leading

        if not cursor.fits(needed) and not cursor.at_top:
            pages.append(Page(number=len(pages) + 1))
            cursor = cursor.reset()
            ins = replace(ins, y=cursor.y)

        if not cursor.fits(ins.height):
            logger.warning(
                "layout_block_overflow",
                extra={"page": pages[-1].number, "height": ins.height, "usable": geometry.usable_height},
            )

        pages[-1].instructions.append(ins)
        cursor = cursor.advance(ins.height + style.space_after)

    logger.debug("layout_complete", extra={"pages": len(pages)})
    return pages

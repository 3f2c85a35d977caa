import json

import pytest

from launchloom.services.blocks import BlockKind, ContentBlock
from launchloom.services.normalizer import (
    EMPTY_CONTENT_TEXT,
    MAX_ARRAY_ITEMS,
    MAX_FALLBACK_CHARS,
    MAX_PARAGRAPH_CHARS,
    normalize,
    ordered_keys,
)


def _content(blocks):
    return [b for b in blocks if not b.is_spacer]


def test_single_string_key_becomes_heading_and_paragraph():
    blocks = normalize('{"executiveSummary": "Short pitch."}')
    assert _content(blocks) == [
        ContentBlock(BlockKind.HEADING, "Executive Summary"),
        ContentBlock(BlockKind.PARAGRAPH, "Short pitch."),
    ]


def test_email_sequence_renders_bold_subject_then_body():
    blocks = _content(normalize('{"emailSequence": [{"subject":"Hi","body":"Hello there"}]}'))
    assert blocks[0] == ContentBlock(BlockKind.HEADING, "Email Sequence")
    assert blocks[1].kind is BlockKind.PARAGRAPH
    assert blocks[1].bold is True
    assert blocks[1].text == "Hi"
    assert blocks[2] == ContentBlock(BlockKind.PARAGRAPH, "Hello there")
    assert len(blocks) == 3


def test_plain_text_becomes_single_paragraph():
    assert normalize("not json at all") == [ContentBlock(BlockKind.PARAGRAPH, "not json at all")]


def test_empty_object_falls_back_to_raw_text():
    assert normalize("{}") == [ContentBlock(BlockKind.PARAGRAPH, "{}")]


@pytest.mark.parametrize("raw", ["", None, "   \n\n  "])
def test_empty_input_yields_placeholder_paragraph(raw):
    assert normalize(raw) == [ContentBlock(BlockKind.PARAGRAPH, EMPTY_CONTENT_TEXT)]


def test_json_is_found_inside_surrounding_chatter():
    raw = 'Sure! Here is your plan:\n```json\n{"positioning": "Fastest way to ship."}\n```\nGood luck!'
    blocks = _content(normalize(raw))
    assert blocks == [
        ContentBlock(BlockKind.HEADING, "Positioning"),
        ContentBlock(BlockKind.PARAGRAPH, "Fastest way to ship."),
    ]


@pytest.mark.parametrize(
    "raw",
    [
        '{"a": ',
        "}{",
        "[1, 2, 3]",
        '{"a": [' * 5000,
        "\x00\x01\x02",
        '{"x": {"y": {"z": [null, {}, [], ""]}}}',
        "# \n## \n- \n",
        "{" + "a" * 10000 + "}",
    ],
)
def test_never_raises_and_never_empty(raw):
    blocks = normalize(raw)
    assert blocks
    assert any(not b.is_spacer for b in blocks)


def test_valid_json_with_content_yields_non_spacer_blocks():
    raw = json.dumps({"keyMetrics": ["Signups: 500", "Open rate: 45%"]})
    blocks = _content(normalize(raw))
    assert blocks[0] == ContentBlock(BlockKind.HEADING, "Key Metrics")
    assert [b.text for b in blocks[1:]] == ["1. Signups: 500", "2. Open rate: 45%"]
    assert all(b.kind is BlockKind.LIST_ITEM for b in blocks[1:])


def test_normalization_is_deterministic():
    raw = json.dumps(
        {
            "launch5DayPlan": [{"day": 1, "actions": "Tease the launch"}],
            "executiveSummary": "Why now.\n\nWhy us.",
            "budgetBreakdown": {"totalBudget": "$5,000", "ads": {"allocation": "$2,000"}},
        }
    )
    assert normalize(raw) == normalize(raw)


def test_priority_order_puts_summary_first_and_keeps_unknown_keys_last():
    data = {"zebraFacts": "x", "keyMetrics": [], "emailSequence": [], "executiveSummary": "", "otherNotes": ""}
    assert ordered_keys(data) == ["executiveSummary", "emailSequence", "keyMetrics", "zebraFacts", "otherNotes"]


def test_empty_values_are_skipped():
    raw = json.dumps({"executiveSummary": "A real summary.", "risks": [], "notes": "  ", "extra": None})
    headings = [b.text for b in normalize(raw) if b.kind is BlockKind.HEADING]
    assert headings == ["Executive Summary"]


def test_placeholder_fragments_are_suppressed():
    raw = json.dumps({"positioning": "Clear and simple.\n\n...\n\nok"})
    texts = [b.text for b in _content(normalize(raw))]
    assert texts == ["Positioning", "Clear and simple."]


def test_no_consecutive_or_leading_spacers():
    raw = json.dumps({"a": "First section text.", "b": [], "c": "Second section text."})
    blocks = normalize(raw)
    assert not blocks[0].is_spacer
    for prev, cur in zip(blocks, blocks[1:]):
        assert not (prev.is_spacer and cur.is_spacer)


def test_array_is_capped():
    raw = json.dumps({"ideas": [f"Idea number {i}" for i in range(MAX_ARRAY_ITEMS + 25)]})
    items = [b for b in normalize(raw) if b.kind is BlockKind.LIST_ITEM]
    assert len(items) == MAX_ARRAY_ITEMS


def test_nested_object_gets_subheadings():
    raw = json.dumps(
        {
            "goToMarket": {
                "primaryChannel": "Product Hunt launch",
                "channels": ["Email", "LinkedIn"],
                "owner": {"name": "Sam", "role": "Founder"},
            }
        }
    )
    blocks = _content(normalize(raw))
    assert blocks[0] == ContentBlock(BlockKind.HEADING, "Go To Market")
    assert ContentBlock(BlockKind.SUBHEADING, "Primary Channel") in blocks
    assert ContentBlock(BlockKind.LIST_ITEM, "1. Email") in blocks
    assert ContentBlock(BlockKind.PARAGRAPH, "Name: Sam") in blocks
    assert all("{" not in b.text for b in blocks)


def test_markdown_input_is_structured():
    raw = "# Launch Plan\nShip it.\nThen tell people.\n\n## Week 1\n- Email the list\n2. Post on LinkedIn\n"
    assert normalize(raw) == [
        ContentBlock(BlockKind.HEADING, "Launch Plan"),
        ContentBlock(BlockKind.PARAGRAPH, "Ship it. Then tell people."),
        ContentBlock(BlockKind.SUBHEADING, "Week 1"),
        ContentBlock(BlockKind.LIST_ITEM, "- Email the list"),
        ContentBlock(BlockKind.LIST_ITEM, "2. Post on LinkedIn"),
    ]


def test_unparseable_json_uses_text_mode_not_raw_json_heading():
    blocks = normalize('{"executiveSummary": "unterminated')
    assert blocks == [ContentBlock(BlockKind.PARAGRAPH, '{"executiveSummary": "unterminated')]


def test_raw_fallback_is_truncated():
    # a single line of markdown-looking-but-empty headings falls through to raw text
    long_text = "#" * (MAX_FALLBACK_CHARS + 100)
    blocks = normalize(long_text)
    assert all(b.kind is BlockKind.PARAGRAPH for b in blocks)
    assert all(len(b.text) <= MAX_PARAGRAPH_CHARS for b in blocks)
    assert sum(len(b.text) for b in blocks) == MAX_FALLBACK_CHARS


def test_long_plain_text_is_capped_and_split():
    raw = "\n".join(f"Sentence number {i} about the launch plan for this week." for i in range(400))
    blocks = normalize(raw)
    assert len(blocks) > 1
    assert all(b.kind is BlockKind.PARAGRAPH for b in blocks)
    assert all(len(b.text) <= MAX_PARAGRAPH_CHARS for b in blocks)
    assert sum(len(b.text) for b in blocks) <= MAX_FALLBACK_CHARS
    assert blocks[0].text.startswith("Sentence number 0 about")


def test_long_plain_text_stays_inside_the_page():
    pytest.importorskip("reportlab")
    from launchloom.services.layout import DocumentSpec, layout

    raw = "\n".join(f"Sentence number {i} about the launch plan for this week." for i in range(400))
    spec = DocumentSpec(title="Acme", tier="standard")
    pages = layout(normalize(raw), spec)
    for page in pages:
        for ins in page.instructions:
            assert ins.bottom <= spec.geometry.bottom_limit


def test_markdown_paragraph_is_split_at_word_boundaries():
    raw = "# Notes\n" + "\n".join(["word"] * 1000)
    blocks = normalize(raw)
    assert blocks[0] == ContentBlock(BlockKind.HEADING, "Notes")
    paras = blocks[1:]
    assert len(paras) > 1
    assert all(len(b.text) <= MAX_PARAGRAPH_CHARS for b in paras)
    assert all(set(b.text.split()) == {"word"} for b in paras)


def test_priority_matches_whole_words_only():
    data = {"impressionsGoal": "a", "pressRelease": "b", "launch5DayPlan": "c", "goToMarketChannels": "d"}
    assert ordered_keys(data) == ["goToMarketChannels", "launch5DayPlan", "pressRelease", "impressionsGoal"]

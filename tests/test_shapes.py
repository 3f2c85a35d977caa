import json

from launchloom.services.blocks import BlockKind, ContentBlock
from launchloom.services.shapes import (
    ITEM_MATCHERS,
    MAX_POSTS,
    format_key_name,
    is_placeholder,
    match_item,
    match_object,
    numbered,
    stringify,
)


def test_format_key_name():
    assert format_key_name("executiveSummary") == "Executive Summary"
    assert format_key_name("launch_timeline") == "Launch Timeline"
    assert format_key_name("launch5DayPlan") == "Launch5 Day Plan"
    assert format_key_name("ROIEstimate") == "ROI Estimate"


def test_is_placeholder():
    assert is_placeholder("...")
    assert is_placeholder("TBD")
    assert is_placeholder("----------")
    assert not is_placeholder("Ship it")


def test_stringify_never_returns_raw_json():
    assert stringify({"channel": "Email", "budget": 200, "notes": ""}) == "Channel: Email, Budget: 200"
    assert stringify(["a", "", None, "b"]) == "a; b"
    assert stringify(True) == "Yes"
    assert stringify(None) == ""


def test_numbered_replaces_existing_number():
    assert numbered(3, "1. Launch on Tuesday") == "3. Launch on Tuesday"


def test_item_matchers_evaluated_in_order():
    names = [m.name for m in ITEM_MATCHERS]
    assert names == ["email", "platform_post", "dated_entry", "generic"]


def test_email_item_with_tone():
    blocks = match_item({"subject": "Launch day", "content": "We are live.", "tone": "Excited"}, 1)
    assert blocks == [
        ContentBlock(BlockKind.PARAGRAPH, "Launch day", bold=True),
        ContentBlock(BlockKind.PARAGRAPH, "We are live."),
        ContentBlock(BlockKind.PARAGRAPH, "Tone: Excited"),
    ]


def test_platform_item_becomes_subheading_with_posts():
    blocks = match_item({"platform": "Twitter", "posts": ["First post", "Second post"]}, 2)
    assert blocks[0] == ContentBlock(BlockKind.SUBHEADING, "Twitter (Post 2)")
    assert [b.text for b in blocks[1:]] == ["1. First post", "2. Second post"]


def test_dated_item_numeric_day_gets_prefix():
    blocks = match_item({"day": 3, "actions": "Email the list", "owner": "Sam"}, 1)
    assert blocks == [ContentBlock(BlockKind.LIST_ITEM, "Day 3: Email the list\nOwner: Sam")]


def test_dated_item_keeps_text_day_label():
    blocks = match_item({"day": "Day 5 (Launch)", "actions": "Go live"}, 5)
    assert blocks == [ContentBlock(BlockKind.LIST_ITEM, "Day 5 (Launch): Go live")]


def test_generic_item_joins_fields():
    blocks = match_item({"metric": "Signups", "target": 500}, 4)
    assert blocks == [ContentBlock(BlockKind.LIST_ITEM, "4. Metric: Signups\nTarget: 500")]


def test_generic_item_too_short_is_dropped():
    assert match_item({"a": ""}, 1) == []


def test_strategy_with_posts_object():
    value = {
        "approach": "Build in public",
        "posts": [{"day": 1, "content": "Teaser"}, "Launch thread"] + ["extra"] * 40,
    }
    blocks = match_object(value)
    assert blocks[0] == ContentBlock(BlockKind.PARAGRAPH, "Approach: Build in public")
    assert blocks[1] == ContentBlock(BlockKind.SUBHEADING, "Posts")
    assert blocks[2] == ContentBlock(BlockKind.LIST_ITEM, "1. Day 1: Teaser")
    assert blocks[3] == ContentBlock(BlockKind.LIST_ITEM, "2. Launch thread")
    assert len(blocks) == 2 + MAX_POSTS


def test_budget_breakdown_object():
    value = {
        "totalBudget": "$5,000",
        "paidAds": {"allocation": "$2,000", "description": "LinkedIn tests", "tactics": ["Retargeting"]},
        "contingency": "$500",
    }
    blocks = match_object(value)
    assert blocks == [
        ContentBlock(BlockKind.PARAGRAPH, "Total Budget: $5,000", bold=True),
        ContentBlock(BlockKind.SUBHEADING, "Paid Ads"),
        ContentBlock(BlockKind.PARAGRAPH, "Allocation: $2,000"),
        ContentBlock(BlockKind.PARAGRAPH, "LinkedIn tests"),
        ContentBlock(BlockKind.LIST_ITEM, "- Retargeting"),
        ContentBlock(BlockKind.PARAGRAPH, "Contingency: $500"),
    ]


def test_budget_categories_group_is_unwrapped():
    value = {
        "totalBudget": "$5,000",
        "categories": {
            "Paid Ads": {
                "allocation": "$2,000",
                "description": "LinkedIn ads",
                "tactics": ["Retarget visitors", "Lookalikes"],
            },
            "Content": {"amount": "$800"},
        },
    }
    assert match_object(value) == [
        ContentBlock(BlockKind.PARAGRAPH, "Total Budget: $5,000", bold=True),
        ContentBlock(BlockKind.SUBHEADING, "Paid Ads"),
        ContentBlock(BlockKind.PARAGRAPH, "Allocation: $2,000"),
        ContentBlock(BlockKind.PARAGRAPH, "LinkedIn ads"),
        ContentBlock(BlockKind.LIST_ITEM, "- Retarget visitors"),
        ContentBlock(BlockKind.LIST_ITEM, "- Lookalikes"),
        ContentBlock(BlockKind.SUBHEADING, "Content"),
        ContentBlock(BlockKind.PARAGRAPH, "Allocation: $800"),
    ]


def test_budget_from_pro_template_never_shows_raw_json():
    from launchloom.services.normalizer import normalize

    raw = json.dumps(
        {
            "budgetBreakdown": {
                "totalBudget": "$5,000",
                "categories": {"Paid Ads": {"allocation": "$2,000", "tactics": ["Retarget visitors"]}},
            }
        }
    )
    texts = [b.text for b in normalize(raw) if not b.is_spacer]
    assert texts == [
        "Budget Breakdown",
        "Total Budget: $5,000",
        "Paid Ads",
        "Allocation: $2,000",
        "- Retarget visitors",
    ]
    assert not any("{" in t or "Categories" in t for t in texts)


def test_unknown_object_uses_generic_walk():
    assert match_object({"notes": "anything"}) is None

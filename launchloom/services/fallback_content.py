"""Deterministic playbook content used when the generator is unavailable.

Only consulted when ``FALLBACK_CONTENT_ENABLED=true``. The output is the same
JSON text the generator would return, so it flows through the normal
normalize / layout / emit path.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict

from .tiers import Tier, coerce_tier


def fallback_enabled() -> bool:
    return os.getenv("FALLBACK_CONTENT_ENABLED", "false").lower() == "true"


def _standard_content(product: str, audience: str) -> Dict[str, Any]:
    return {
        "executiveSummary": (
            f"{product} is launching to {audience} with a focused value proposition and clear market "
            "positioning. This playbook lays out a structured 5-day pre-launch and launch day strategy. "
            "Success depends on reaching the right people, at the right time, with the right message."
        ),
        "targetMarket": (
            f"The target market for {product} is {audience}. These are decision-makers looking for "
            "solutions that save time and deliver measurable results. Pain points include inefficient "
            "processes, scattered tools and missing integrations. The buying signal is when they start "
            "evaluating competing solutions."
        ),
        "productPositioning": (
            f"{product} solves the pain of disjointed workflows. The unique value is simplicity combined "
            "with powerful features and fast onboarding. The positioning message: work smarter, not harder."
        ),
        "pricePosition": (
            "Value-based pricing. Standard is the core offering with essential features, Pro targets power "
            "users and teams, and Free is the acquisition funnel. Anchor against competitor pricing to show "
            "ROI within 3 months."
        ),
        "emailSequence": [
            {
                "subject": f"{product} Launches Tomorrow - Here's What Changes",
                "body": (
                    f"We're excited to announce that {product} is officially launching tomorrow. It is "
                    f"designed specifically for {audience}, and the early response has been strong."
                ),
            },
            {
                "subject": f"3 Ways {product} Saves 5+ Hours Per Week",
                "body": (
                    f"Most {audience} waste time switching between tools. {product} consolidates everything "
                    "into one clean interface. See how it works in a quick 2-minute demo."
                ),
            },
            {
                "subject": "Last Chance: Launch Week Pricing Expires Tonight",
                "body": (
                    "Launch week pricing ends at midnight. Early adopters have locked in their savings. "
                    f"Secure your spot now and join the teams already using {product}."
                ),
            },
        ],
        "socialContent": [
            f"{product} is LIVE. We built this for {audience}. Get access now: [link] #launch",
            f"Stop switching between tools. {product} brings everything together. Launch week offer: [link]",
            f"{product} vs the alternatives: faster setup, better price, more features. [link]",
        ],
        "launch5DayPlan": [
            {"day": "Day 1 (T-4 days)", "actions": "Finalize marketing materials. Send a teaser email. Post a countdown on social media."},
            {"day": "Day 2 (T-3 days)", "actions": "Start the awareness campaign. Post feature spotlight content. Reach out to key influencers."},
            {"day": "Day 3 (T-2 days)", "actions": "Share customer testimonials. Run social ads. Prepare the support team."},
            {"day": "Day 4 (T-1 day)", "actions": "Send the final reminder email. Confirm all systems are ready. Brief the team on the schedule."},
            {"day": "Day 5 (LAUNCH)", "actions": "Go live at 9 AM. Send the launch announcement. Monitor systems and respond to early feedback."},
        ],
        "keyMetrics": [
            "Signups on launch day: Target 500+",
            "Email open rate: Target 45%+",
            "Click-through rate: Target 5%+",
            "Customer support response: <2 hour average",
        ],
    }


def _pro_content(product: str, audience: str) -> Dict[str, Any]:
    return {
        "executiveSummary": (
            f"{product} targets a significant opportunity in the {audience} segment. The launch strategy "
            "positions the product as the category leader through better technology, customer experience "
            "and pricing. This playbook details the go-to-market plan starting from launch week."
        ),
        "targetMarketAnalysis": (
            f"{audience} is a high-spend segment. Primary buyers are team leads and operations owners "
            "frustrated by fragmented tooling and vendor lock-in. Buying cycles run 2-4 weeks for self-serve "
            "plans and 6-12 weeks for larger teams."
        ),
        "competitorAnalysis": [
            "Competitor A: strong brand, weak UX, higher pricing. We win on usability and cost.",
            "Competitor B: newer entrant with a similar feature set. We differentiate on integrations.",
            f"{product} advantages: faster setup, lower price, better support, built for modern teams.",
        ],
        "positioning": (
            f"Purpose-built for {audience}, not a one-size-fits-all tool. Message architecture: problem "
            f"(scattered workflows), solution ({product} consolidation), result (alignment and time saved)."
        ),
        "pricingStrategy": (
            "Freemium entry with a capped free plan, a Standard plan for growing teams and a Pro plan with "
            "priority support. Launch lever: a lifetime discount for the first 1000 customers."
        ),
        "goToMarketChannels": [
            "Product Hunt: featured launch, aim for the top 5 of the day.",
            "Email: segment the list by persona. Teaser (T-4), demo (T-2), launch (T-0), reminder (T+1).",
            "LinkedIn: organic founder posts plus a small paid test budget in week 1.",
            "Partnerships: 5-10 complementary tools for co-promotion.",
        ],
        "emailSequence": [
            {
                "subject": f"{product} Is Changing How Teams Work (Launch Day)",
                "body": (
                    f"We built {product} for {audience} after talking to hundreds of teams about tool "
                    "fragmentation. Launch week pricing is available for 7 days."
                ),
            },
            {
                "subject": f"Why {audience} Choose {product}",
                "body": "Customers report faster task completion and fewer meetings. Book a 15-minute demo with the team.",
            },
            {
                "subject": "Launch Week Ending: Final 24 Hours",
                "body": f"In 24 hours launch pricing ends. This is the last chance to lock it in for {product}.",
            },
        ],
        "socialMediaStrategy": [
            {
                "platform": "Twitter",
                "posts": [
                    f"We're launching {product}. For months we've asked one question: why do teams need 15 tools? [link]",
                    f"{product} isn't another tool for the pile. It's the one that replaces several others.",
                    "Launch week pricing: onboard in the first 7 days and keep the discount for life.",
                ],
            },
            {
                "platform": "LinkedIn",
                "posts": [
                    f"After interviewing {audience} teams we kept hearing the same pain: fragmentation. So we built {product}.",
                    f"{product} launches today for {audience}. Join us: [link]",
                ],
            },
        ],
        "launchTimeline": [
            {"day": "Day 1 (T-5 days)", "actions": "Finalize collateral. Soft-launch to a warm audience. Load test the product."},
            {"day": "Day 2 (T-4 days)", "actions": "Start influencer outreach. Publish the launch blog post."},
            {"day": "Day 3 (T-3 days)", "actions": "Turn on paid ads. Email the broader list. Collect testimonials."},
            {"day": "Day 4 (T-2 days)", "actions": "Co-promote with partners. Run an influencer demo day."},
            {"day": "Day 5 (LAUNCH)", "actions": "Full push across email, social and ads. Support on standby. Monitor every 30 minutes."},
        ],
        "successMetrics": [
            "Launch week signups: 1000+ (target)",
            "Trial-to-paid conversion: 30%+ (target)",
            "Email open rate: 50%+ (benchmark: 25%)",
            "Product Hunt ranking: Top 5 (ambition)",
            "Activation rate (% creating a first project): 80%+",
        ],
    }


def fallback_content(product_name: str, target_audience: str, tier) -> str:
    """Return template playbook JSON for ``tier`` (standard or pro)."""

    if coerce_tier(tier) is Tier.PRO:
        data = _pro_content(product_name, target_audience)
    else:
        data = _standard_content(product_name, target_audience)
    return json.dumps(data, ensure_ascii=False)

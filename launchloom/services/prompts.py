"""Prompt text for the standard and pro playbook generations."""

from __future__ import annotations

from typing import List

from ..schemas.playbooks import LaunchForm, ProForm
from .tiers import policy_for

STANDARD_TEMPLATE = """{
  "executiveSummary": "Write 3 sentences: why launch now, target customer, success vision",
  "targetMarket": "Write 2-3 sentences on TAM, pain points, buying signals",
  "emailSequence": [
    {"subject": "Awareness hook", "body": "2-3 sentences hook"},
    {"subject": "Feature benefit", "body": "2-3 sentences benefit"},
    {"subject": "CTA", "body": "2-3 sentences action"}
  ],
  "launch5DayPlan": [
    {"day": "Day 1 (5 days before)", "actions": "2-3 actions"},
    {"day": "Day 2 (4 days before)", "actions": "2-3 actions"},
    {"day": "Day 3 (3 days before)", "actions": "2-3 actions"},
    {"day": "Day 4 (2 days before)", "actions": "2-3 actions"},
    {"day": "Day 5 (Launch)", "actions": "2-3 launch actions"}
  ],
  "keyMetrics": ["Metric 1 with target", "Metric 2 with target", "Metric 3 with target"]
}"""

PRO_TEMPLATE = """{
  "executiveSummary": "Write 3-4 sentences: why launch now, target market opportunity, competitive advantage, 90-day vision",
  "targetMarketAnalysis": "Write 3 sentences analyzing TAM, pain points, buying signals",
  "competitorAnalysis": ["One line per competitor: strength, weakness, how we win"],
  "positioning": "Write 2 sentences on value prop and differentiation",
  "budgetBreakdown": {
    "totalBudget": "Total launch budget",
    "categories": {"Paid Ads": {"allocation": "Amount or percent", "description": "What it buys", "tactics": ["Tactic 1", "Tactic 2"]}}
  },
  "emailSequence": [
    {"subject": "Pre-launch awareness hook", "body": "3-4 sentences hook copy"},
    {"subject": "Feature benefit", "body": "3-4 sentences benefit copy"},
    {"subject": "Social proof", "body": "3-4 sentences credibility copy"},
    {"subject": "Strong CTA", "body": "3-4 sentences urgency and call-to-action"}
  ],
  "socialMediaStrategy": [
    {"platform": "Twitter", "posts": ["Post 1", "Post 2", "Post 3"]},
    {"platform": "LinkedIn", "posts": ["Post 1", "Post 2"]}
  ],
  "launch5DayPlan": [
    {"day": "Day 1 (5 days before)", "actions": "List 3-4 specific pre-launch actions"},
    {"day": "Day 2 (4 days before)", "actions": "List 3-4 specific actions"},
    {"day": "Day 3 (3 days before)", "actions": "List 3-4 specific actions"},
    {"day": "Day 4 (2 days before)", "actions": "List 3-4 specific actions"},
    {"day": "Day 5 (Launch day)", "actions": "List 3-4 launch day actions"}
  ],
  "successMetrics": ["Metric 1 with success threshold", "Metric 2 with success threshold", "Metric 3 with success threshold", "Metric 4 with success threshold"]
}"""


def _pro_context(form: ProForm) -> List[str]:
    lines = []
    if form.product_description:
        lines.append(f"Product description: {form.product_description}")
    if form.current_traction:
        lines.append(f"Current traction: {form.current_traction}")
    if form.budget:
        lines.append(f"Launch budget: {form.budget}")
    if form.selected_channels:
        lines.append(f"Channels to focus on: {', '.join(form.selected_channels)}")
    if form.main_competitor:
        lines.append(f"Main competitor: {form.main_competitor}")
    lines.append(
        "Has launched on Product Hunt before: " + ("yes" if form.has_product_hunt_experience else "no")
    )
    return lines


def build_prompt(form: LaunchForm) -> str:
    """Render the user prompt for ``form``; the tier policy decides the section set."""

    policy = policy_for(form.tier)
    context = [
        f"Product: {form.product_name}",
        f"Target audience: {form.target_audience}",
        f"Launch date: {form.launch_date.isoformat()} ({form.days_to_launch} days until launch)",
    ]
    if form.current_users:
        context.append(f"Current users: {form.current_users}")
    if isinstance(form, ProForm):
        context.extend(_pro_context(form))

    template = PRO_TEMPLATE if policy.include_extended_sections else STANDARD_TEMPLATE
    return (
        f"Generate {form.tier.value.upper()} tier launch playbook JSON for THIS SPECIFIC PRODUCT:\n"
        + "\n".join(f"- {line}" for line in context)
        + "\n\nReturn ONLY valid JSON, no markdown or explanation, with exactly these keys:\n"
        + template
    )

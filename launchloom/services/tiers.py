"""Tier policy: pure lookup from tier id to rendering parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union


class Tier(str, Enum):
    FREE = "free"
    STANDARD = "standard"
    PRO = "pro"


NEUTRAL_COLOR = "#333333"


@dataclass(frozen=True)
class TierPolicy:
    """Rendering parameters for one tier."""

    tier: Tier
    label: str
    primary_color: str
    accent_color: str
    text_color: str
    include_extended_sections: bool
    uses_static_asset: bool = False

    @property
    def palette(self) -> Dict[str, str]:
        return {
            "primary": self.primary_color,
            "accent": self.accent_color,
            "text": self.text_color,
            "secondary": NEUTRAL_COLOR,
            "muted": "#999999",
        }


TIER_POLICIES: Dict[Tier, TierPolicy] = {
    Tier.FREE: TierPolicy(
        tier=Tier.FREE,
        label="FREE TIER",
        primary_color="#666666",
        accent_color="#F3F4F6",
        text_color="#000000",
        include_extended_sections=False,
        uses_static_asset=True,
    ),
    Tier.STANDARD: TierPolicy(
        tier=Tier.STANDARD,
        label="STANDARD TIER",
        primary_color="#0066CC",
        accent_color="#E5F7FB",
        text_color="#000000",
        include_extended_sections=False,
    ),
    Tier.PRO: TierPolicy(
        tier=Tier.PRO,
        label="PRO TIER",
        primary_color="#00AA00",
        accent_color="#FFF3E5",
        text_color="#000000",
        include_extended_sections=True,
    ),
}


def coerce_tier(tier: Union[str, Tier]) -> Tier:
    """Accept either the enum or its string id (case-insensitive)."""

    if isinstance(tier, Tier):
        return tier
    return Tier(str(tier).strip().lower())


def policy_for(tier: Union[str, Tier]) -> TierPolicy:
    return TIER_POLICIES[coerce_tier(tier)]


def palette_for(tier: Union[str, Tier]) -> Dict[str, str]:
    """Colour palette keyed by role; derived solely from the tier."""

    return policy_for(tier).palette

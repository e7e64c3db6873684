"""
wordstreak.constants — Shared Presentation Constants
=====================================================

Single source of truth for how badge tiers are shown to people.
Import from here instead of duplicating in services and the frontend.
"""

from __future__ import annotations

from wordstreak.database.models import BadgeTier

# ---------------------------------------------------------------------------
# Badge presentation (used by streak-data responses)
# ---------------------------------------------------------------------------
BADGE_EMOJI: dict[BadgeTier, str] = {
    BadgeTier.BRONZE: "\U0001f949",     # 🥉
    BadgeTier.SILVER: "\U0001f948",     # 🥈
    BadgeTier.GOLD: "\U0001f947",       # 🥇
    BadgeTier.DIAMOND: "\U0001f48e",    # 💎
    BadgeTier.LEGENDARY: "\U0001f451",  # 👑
}

BADGE_LABELS: dict[BadgeTier, str] = {
    BadgeTier.BRONZE: "Bronze Streak",
    BadgeTier.SILVER: "Silver Streak",
    BadgeTier.GOLD: "Gold Streak",
    BadgeTier.DIAMOND: "Diamond Streak",
    BadgeTier.LEGENDARY: "Legendary Streak",
}


def badge_display(tier: BadgeTier | str) -> dict[str, str]:
    """Emoji and label for *tier*; unknown names fall back to the raw name."""
    try:
        tier = BadgeTier(tier)
    except ValueError:
        return {"emoji": "", "label": str(tier)}
    return {"emoji": BADGE_EMOJI[tier], "label": BADGE_LABELS[tier]}

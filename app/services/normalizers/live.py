"""Normalizers for per-user live lookups (never bulk-cached)."""

from typing import Any

from app.models import Badge, SourceDescriptor, UserBadges
from app.services.normalizers.base import compact, parse
from app.sources import DISCORD_BADGES, DISCORD_FLAGS, DISCORD_NITRO, REPLUGGED_BADGES
from badge_client.schemas import DiscordUserSchema, RepluggedUserSchema


def normalize_discord(raw: dict[str, Any], source: SourceDescriptor) -> UserBadges:
    """Animated avatar implies Nitro; public flag bits map to the badge table."""
    user = parse(DiscordUserSchema, raw.get("data"))
    if user is None:
        return {}

    badges = []
    if user.avatar and user.avatar.startswith("a_"):
        badges.append(DISCORD_NITRO)
    if user.flags is not None:
        for flag, bit in DISCORD_FLAGS.items():
            if user.flags & bit and flag in DISCORD_BADGES:
                badges.append(DISCORD_BADGES[flag])

    return compact({str(raw.get("user_id") or user.id): badges})


def normalize_replugged(raw: dict[str, Any], source: SourceDescriptor) -> UserBadges:
    user = parse(RepluggedUserSchema, raw.get("data"))
    if user is None:
        return {}

    base = source.icon_base or ""
    flags = user.badges
    badges = [
        Badge(tooltip=label, badge=f"{base}/{key}.png")
        for key, label in REPLUGGED_BADGES.items()
        if getattr(flags, key) is True
    ]
    if flags.custom and flags.custom.name and flags.custom.icon:
        badges.append(Badge(tooltip=flags.custom.name, badge=flags.custom.icon))

    return compact({str(raw.get("user_id") or user.id): badges})

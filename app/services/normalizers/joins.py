"""Normalizers that join user records against badge definitions."""

from typing import Any

from app.models import Badge, SourceDescriptor, UserBadges
from app.services.normalizers.base import as_dict, as_list, compact, parse, parse_all
from app.services.normalizers.keywords import ENMITY_BADGE_KEYWORDS, determine_badge_type
from badge_client.schemas import (
    BadgeVaultBadgeSchema,
    BadgeVaultUserSchema,
    EnmityBadgeSchema,
    NekocordBadgeSchema,
    NekocordUserSchema,
)


def normalize_id_join(raw: dict[str, Any], source: SourceDescriptor) -> UserBadges:
    """``{users: {id: {badges: [ids]}}, badges: {id: {name, image}}}``.

    Ids without a definition are skipped.
    """
    data = as_dict(raw.get("data"))
    definitions = {
        str(badge_id): badge
        for badge_id, record in as_dict(data.get("badges")).items()
        if (badge := parse(NekocordBadgeSchema, record)) is not None
    }

    result: UserBadges = {}
    for user_id, record in as_dict(data.get("users")).items():
        user = parse(NekocordUserSchema, record)
        if user is None:
            continue
        result[str(user_id)] = [
            Badge(tooltip=definitions[badge_id].name, badge=definitions[badge_id].image)
            for badge_id in user.badges
            if badge_id in definitions
        ]
    return compact(result)


def normalize_badgevault(raw: dict[str, Any], source: SourceDescriptor) -> UserBadges:
    """One record per user file; blocked users and pending badges are suppressed."""
    result: UserBadges = {}
    for user_id, record in as_dict(raw.get("users")).items():
        user = parse(BadgeVaultUserSchema, record)
        if user is None or user.blocked:
            continue
        result[user_id] = [
            Badge(tooltip=item.name, badge=item.badge)
            for item in parse_all(BadgeVaultBadgeSchema, user.badges)
            if not item.pending
        ]
    return compact(result)


def _enmity_icon(badge: EnmityBadgeSchema, icon_base: str) -> str | None:
    badge_type = determine_badge_type(badge.name or "", ENMITY_BADGE_KEYWORDS, "")
    if badge_type:
        return f"{icon_base}/{badge_type}.png"
    return badge.url.dark if badge.url else None


def normalize_enmity(raw: dict[str, Any], source: SourceDescriptor) -> UserBadges:
    """User files list badge ids; definition files are keyed by their own ``id``."""
    definitions = {
        badge.id: badge for badge in parse_all(EnmityBadgeSchema, as_dict(raw.get("badges")).values())
    }

    result: UserBadges = {}
    for user_id, badge_ids in as_dict(raw.get("users")).items():
        badges = []
        for badge_id in as_list(badge_ids):
            badge = definitions.get(str(badge_id))
            if badge is None or not badge.name:
                continue
            icon = _enmity_icon(badge, source.icon_base or "")
            if icon:
                badges.append(Badge(tooltip=badge.name, badge=icon))
        result[user_id] = badges
    return compact(result)

"""Normalizers for HTTP sources already keyed (or keyable) by user id."""

from collections import defaultdict
from typing import Any

from app.models import Badge, SourceDescriptor, UserBadges
from app.services.normalizers.base import as_dict, as_list, compact, parse, parse_all
from app.services.normalizers.keywords import AERO_BADGE_KEYWORDS, determine_badge_type
from badge_client.schemas import (
    AeroBadgeSchema,
    AliucordCustomSchema,
    AliucordUserSchema,
    LabelBadgeSchema,
    PluginAuthorSchema,
    PluginSchema,
    ReviewDbBadgeSchema,
    TooltipBadgeSchema,
)

ALIUCORD_ROLES = ("donor", "contributor", "dev")


def manifest_authors(plugins: Any) -> list[str]:
    """Unique author ids across all plugin manifest entries, in first-seen order."""
    authors: dict[str, None] = {}
    for plugin in parse_all(PluginSchema, as_list(plugins)):
        for author in parse_all(PluginAuthorSchema, plugin.authors):
            if author.id:
                authors.setdefault(author.id, None)
    return list(authors)


def normalize_contributor_map(raw: dict[str, Any], source: SourceDescriptor) -> UserBadges:
    """Direct ``{user: [{tooltip, badge}]}`` map plus one contributor badge per plugin author.

    The contributor badge is de-duplicated by tooltip, so an author who
    already carries it (or appears in several manifest entries) gets it once.
    """
    result: UserBadges = {}
    for user_id, items in as_dict(raw.get("data")).items():
        result[str(user_id)] = [
            Badge(tooltip=item.tooltip, badge=item.badge)
            for item in parse_all(TooltipBadgeSchema, as_list(items))
            if not item.pending
        ]

    contributor = source.contributor_badge
    if contributor is not None and isinstance(raw.get("plugins"), list):
        for author_id in manifest_authors(raw["plugins"]):
            badges = result.setdefault(author_id, [])
            if not any(b.tooltip == contributor.tooltip for b in badges):
                badges.append(contributor)

    return compact(result)


def normalize_label_map(raw: dict[str, Any], source: SourceDescriptor) -> UserBadges:
    """``{user: [{label, url}]}`` renamed to the common shape."""
    return compact(
        {
            str(user_id): [
                Badge(tooltip=item.label, badge=item.url) for item in parse_all(LabelBadgeSchema, as_list(items))
            ]
            for user_id, items in as_dict(raw.get("data")).items()
        }
    )


def normalize_reviewdb(raw: dict[str, Any], source: SourceDescriptor) -> UserBadges:
    """Flat badge list carrying the owner id, grouped per user."""
    result: UserBadges = defaultdict(list)
    for item in parse_all(ReviewDbBadgeSchema, as_list(raw.get("data"))):
        result[item.discord_id].append(Badge(tooltip=item.name, badge=item.icon))
    return dict(result)


def normalize_keyword(raw: dict[str, Any], source: SourceDescriptor) -> UserBadges:
    """Badge text classified into a local icon variant (Aero)."""
    base = source.icon_base or ""
    return compact(
        {
            str(user_id): [
                Badge(
                    tooltip=item.text,
                    badge=f"{base}/{determine_badge_type(item.text, AERO_BADGE_KEYWORDS)}.png",
                )
                for item in parse_all(AeroBadgeSchema, as_list(items))
            ]
            for user_id, items in as_dict(raw.get("data")).items()
        }
    )


def normalize_aliucord(raw: dict[str, Any], source: SourceDescriptor) -> UserBadges:
    """Known roles map to local icons; custom badges pass through."""
    base = source.icon_base or ""
    result: UserBadges = {}
    for user_id, record in as_dict(as_dict(raw.get("data")).get("users")).items():
        user = parse(AliucordUserSchema, record)
        if user is None:
            continue

        badges = []
        for role in user.roles:
            if isinstance(role, str) and role.lower() in ALIUCORD_ROLES:
                badges.append(Badge(tooltip=role, badge=f"{base}/{role.lower()}.png"))
        for custom in parse_all(AliucordCustomSchema, user.custom):
            badges.append(Badge(tooltip=custom.text, badge=custom.url))
        result[str(user_id)] = badges

    return compact(result)

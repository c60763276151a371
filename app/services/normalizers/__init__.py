"""Normalizers - one pure transform per source format, resolved by tag."""

from typing import Any

from app.models import SourceDescriptor, UserBadges
from app.services.normalizers.base import Normalizer
from app.services.normalizers.joins import normalize_badgevault, normalize_enmity, normalize_id_join
from app.services.normalizers.keywords import (
    AERO_BADGE_KEYWORDS,
    ENMITY_BADGE_KEYWORDS,
    determine_badge_type,
)
from app.services.normalizers.live import normalize_discord, normalize_replugged
from app.services.normalizers.maps import (
    manifest_authors,
    normalize_aliucord,
    normalize_contributor_map,
    normalize_keyword,
    normalize_label_map,
    normalize_reviewdb,
)


def build_registry() -> dict[str, Normalizer]:
    """Tag -> normalizer table. A new source format is one function plus one entry."""
    return {
        "contributor_map": normalize_contributor_map,
        "label_map": normalize_label_map,
        "reviewdb": normalize_reviewdb,
        "keyword": normalize_keyword,
        "aliucord": normalize_aliucord,
        "id_join": normalize_id_join,
        "badgevault": normalize_badgevault,
        "enmity": normalize_enmity,
        "discord": normalize_discord,
        "replugged": normalize_replugged,
    }


def serialize(badges: UserBadges) -> dict[str, list[dict[str, Any]]]:
    """JSON-ready form stored in the cache."""
    return {user_id: [b.to_dict() for b in items] for user_id, items in badges.items()}


def normalize(
    registry: dict[str, Normalizer],
    source: SourceDescriptor,
    raw: dict[str, Any],
) -> UserBadges:
    """Run the normalizer registered for ``source``."""
    try:
        normalizer = registry[source.normalizer]
    except KeyError:
        raise KeyError(f"No normalizer registered for {source.name!r} ({source.normalizer})") from None
    return normalizer(raw, source)


__all__ = [
    "Normalizer",
    "build_registry",
    "normalize",
    "serialize",
    "determine_badge_type",
    "manifest_authors",
    "AERO_BADGE_KEYWORDS",
    "ENMITY_BADGE_KEYWORDS",
]

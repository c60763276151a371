"""Badge entity - the common output shape of every source."""

from dataclasses import dataclass

from app.models.common import BaseEntity


@dataclass(frozen=True)
class Badge(BaseEntity):
    """A single badge shown for a user."""

    tooltip: str
    badge: str

    def with_origin(self, origin: str) -> "Badge":
        """Prefix a site-relative icon path with the serving origin."""
        if origin and self.badge.startswith("/"):
            return Badge(tooltip=self.tooltip, badge=f"{origin}{self.badge}")
        return self


# user id -> badges, in normalization order
UserBadges = dict[str, list[Badge]]

"""Source descriptors - immutable, defined at process start."""

from dataclasses import dataclass
from enum import StrEnum

from app.models.badge import Badge


class SourceKind(StrEnum):
    """How a source is fetched."""

    HTTP_JSON = "http_json"
    HTTP_JSON_MANIFEST = "http_json_manifest"
    GIT_TREE = "git_tree"
    EXTERNAL = "external"


@dataclass(frozen=True)
class SourceDescriptor:
    """One external provider of badge data."""

    name: str
    kind: SourceKind
    normalizer: str
    description: str = ""
    url: str = ""
    manifest_url: str | None = None
    repo_url: str | None = None
    users_dir: str = ""
    badges_dir: str | None = None
    icon_base: str | None = None
    contributor_badge: Badge | None = None
    auth_scheme: str | None = None
    # badge paths are served by this service and get the request origin
    local_icons: bool = False

    @property
    def cached(self) -> bool:
        """External sources are looked up live per user and never bulk-cached."""
        return self.kind != SourceKind.EXTERNAL

    @property
    def requires_lock(self) -> bool:
        return self.kind == SourceKind.GIT_TREE

    def user_url(self, user_id: str) -> str:
        return self.url.format(user_id=user_id)

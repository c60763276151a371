"""Upstream badge source clients."""

from badge_client.base import BaseClient
from badge_client.errors import (
    FetchError,
    FetchExhausted,
    SyncError,
    TerminalFetchError,
    TransientFetchError,
)
from badge_client.git import RepoSyncer, authenticated_url, has_working_tree, read_json_dir

__all__ = [
    # HTTP
    "BaseClient",
    # Git
    "RepoSyncer",
    "authenticated_url",
    "has_working_tree",
    "read_json_dir",
    # Errors
    "FetchError",
    "FetchExhausted",
    "SyncError",
    "TerminalFetchError",
    "TransientFetchError",
]

"""Git working-tree sync for file-tree sources."""

import asyncio
import json
import os
import shutil
import tempfile
from pathlib import Path

from loguru import logger

from badge_client.errors import SyncError

DEFAULT_GIT_TIMEOUT = 120.0


def authenticated_url(remote_url: str, token: str | None) -> str:
    """Embed ``token`` in an https remote URL."""
    if not token or not remote_url.startswith("https://"):
        return remote_url
    return remote_url.replace("https://", f"https://{token}@", 1)


def has_working_tree(path: Path) -> bool:
    """A tree counts as present once its git config exists."""
    return (path / ".git" / "config").exists()


class RepoSyncer:
    """Clones or pulls a working tree with the git CLI.

    Not safe to run concurrently against the same path; callers serialize
    per source with the distributed lock. A failed sync leaves the previous
    tree untouched. A fresh clone lands in a temporary sibling directory and
    replaces the target only on success, so a half-written clone never
    shadows a good tree.
    """

    def __init__(self, timeout: float = DEFAULT_GIT_TIMEOUT):
        self._timeout = timeout

    async def sync(self, local_path: Path, remote_url: str, token: str | None = None, name: str = "") -> None:
        name = name or local_path.name
        if has_working_tree(local_path):
            logger.debug("{}: repository exists, pulling latest changes", name)
            await self._run_git(name, "pull", cwd=local_path)
            logger.debug("{}: repository updated", name)
            return

        logger.debug("{}: repository not found, cloning", name)
        local_path.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{local_path.name}-", dir=local_path.parent))
        try:
            try:
                await self._run_git(name, "clone", authenticated_url(remote_url, token), str(staging))
            except SyncError as e:
                if token:
                    raise SyncError(name, "clone", e.returncode, e.stderr.replace(token, "***")) from None
                raise
            if local_path.exists():
                shutil.rmtree(local_path)
            os.replace(staging, local_path)
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)
        logger.debug("{}: repository cloned", name)

    async def _run_git(self, name: str, command: str, *args: str, cwd: Path | None = None) -> None:
        """Run ``git <command> <args>``; raise :class:`SyncError` on failure."""
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
        try:
            proc = await asyncio.create_subprocess_exec(
                "git",
                command,
                *args,
                cwd=cwd,
                env=env,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise SyncError(name, command, None, str(e)) from e

        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), self._timeout)
        except TimeoutError:
            proc.kill()
            await proc.wait()
            raise SyncError(name, command, None, f"timed out after {self._timeout}s") from None

        if proc.returncode != 0:
            raise SyncError(name, command, proc.returncode, stderr.decode(errors="replace"))


def read_json_dir(path: Path) -> dict[str, object]:
    """Parse every ``*.json`` file directly under ``path``, keyed by file stem.

    A missing directory reads as empty; unreadable or malformed files are
    skipped.
    """
    if not path.is_dir():
        return {}

    result: dict[str, object] = {}
    for file in sorted(path.glob("*.json")):
        if not file.is_file():
            continue
        try:
            result[file.stem] = json.loads(file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.debug("Skipping {}: {}", file.name, e)
    return result

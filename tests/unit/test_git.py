"""Tests for working-tree sync helpers."""

from pathlib import Path

import pytest

from badge_client import RepoSyncer, SyncError, authenticated_url, has_working_tree, read_json_dir


class FakeGit:
    """Records git invocations; a clone writes a minimal tree into its target."""

    def __init__(self, fail: SyncError | None = None):
        self.fail = fail
        self.commands: list[tuple[str, tuple[str, ...], Path | None]] = []

    async def __call__(self, name, command, *args, cwd=None):
        self.commands.append((command, args, cwd))
        if self.fail:
            raise self.fail
        if command == "clone":
            target = Path(args[-1])
            (target / ".git").mkdir(parents=True)
            (target / ".git" / "config").write_text("[core]\n")
            (target / "1.json").write_text('{"badges": []}')


@pytest.fixture
def git(monkeypatch):
    fake = FakeGit()
    syncer = RepoSyncer(timeout=5)
    monkeypatch.setattr(syncer, "_run_git", fake)
    return syncer, fake


class TestAuthenticatedUrl:
    def test_embeds_token(self):
        assert authenticated_url("https://github.com/o/r.git", "tok") == "https://tok@github.com/o/r.git"

    def test_without_token(self):
        assert authenticated_url("https://github.com/o/r.git", None) == "https://github.com/o/r.git"

    def test_non_https_unchanged(self):
        assert authenticated_url("git@github.com:o/r.git", "tok") == "git@github.com:o/r.git"


class TestRepoSyncer:
    @pytest.mark.asyncio
    async def test_clone_when_missing(self, git, tmp_path):
        syncer, fake = git
        target = tmp_path / "badgevault"

        await syncer.sync(target, "https://github.com/o/r.git", "tok", name="badgevault")

        assert has_working_tree(target)
        assert (target / "1.json").exists()
        command, args, _ = fake.commands[0]
        assert command == "clone"
        assert args[0] == "https://tok@github.com/o/r.git"
        # no staging directories left behind
        assert [p.name for p in tmp_path.iterdir()] == ["badgevault"]

    @pytest.mark.asyncio
    async def test_pull_when_present(self, git, tmp_path):
        syncer, fake = git
        (tmp_path / ".git").mkdir()
        (tmp_path / ".git" / "config").write_text("[core]\n")

        await syncer.sync(tmp_path, "https://github.com/o/r.git")

        assert fake.commands == [("pull", (), tmp_path)]

    @pytest.mark.asyncio
    async def test_clone_replaces_partial_directory(self, git, tmp_path):
        syncer, _ = git
        target = tmp_path / "enmity"
        target.mkdir()
        (target / "stale.json").write_text("{}")

        await syncer.sync(target, "https://github.com/o/r.git")

        assert has_working_tree(target)
        assert not (target / "stale.json").exists()

    @pytest.mark.asyncio
    async def test_failed_pull_leaves_tree(self, git, tmp_path):
        syncer, fake = git
        (tmp_path / ".git").mkdir()
        (tmp_path / ".git" / "config").write_text("[core]\n")
        (tmp_path / "1.json").write_text("[]")
        fake.fail = SyncError("x", "pull", 1, "conflict")

        with pytest.raises(SyncError):
            await syncer.sync(tmp_path, "https://github.com/o/r.git")

        assert (tmp_path / "1.json").exists()

    @pytest.mark.asyncio
    async def test_failed_clone_cleans_up(self, git, tmp_path):
        syncer, fake = git
        fake.fail = SyncError("x", "clone", 128, "fatal: could not read from https://tok@github.com")

        with pytest.raises(SyncError) as exc_info:
            await syncer.sync(tmp_path / "repo", "https://github.com/o/r.git", "tok", name="repo")

        assert "tok" not in str(exc_info.value)
        assert "***" in exc_info.value.stderr
        assert list(tmp_path.iterdir()) == []


class TestReadJsonDir:
    def test_reads_by_stem(self, tmp_path):
        (tmp_path / "123.json").write_text('{"blocked": false}')
        (tmp_path / "notes.txt").write_text("ignored")

        assert read_json_dir(tmp_path) == {"123": {"blocked": False}}

    def test_skips_malformed(self, tmp_path):
        (tmp_path / "bad.json").write_text("{not json")
        (tmp_path / "good.json").write_text("[1]")

        assert read_json_dir(tmp_path) == {"good": [1]}

    def test_missing_dir(self, tmp_path):
        assert read_json_dir(tmp_path / "nope") == {}

# Repo Sync Test Fixtures
# Pytest fixtures for Repo Sync tests

import shutil
import subprocess
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Optional

import pytest

from reposync.config import build_config
from reposync.config.identity import CommitIdentity
from reposync.config.schema import SyncConfig

BRANCH = "main"

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")

_WRITER_OPTIONS = (
    "-c", "user.name=taco",
    "-c", "user.email=taco@email.com",
    "-c", "commit.gpgsign=false",
    "-c", "core.hooksPath=/dev/null",
)


def git(*args: str, cwd: Optional[Path] = None) -> str:
    """Run git for test setup and return stdout."""
    result = subprocess.run(
        ["git", *_WRITER_OPTIONS, *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


class HostedRemote:
    """
    A bare repository plus a separate writer clone.

    Pushing into a non-bare repository is refused by git, so changes made
    "on the remote" are committed in the writer and pushed to the bare repo.
    """

    def __init__(self, base: Path):
        self.bare = base / "remote.git"
        self.writer = base / "writer"
        git("init", "--quiet", "--bare", f"--initial-branch={BRANCH}", str(self.bare))
        git("init", "--quiet", f"--initial-branch={BRANCH}", str(self.writer))
        git("remote", "add", "origin", str(self.bare), cwd=self.writer)

    @property
    def url(self) -> str:
        return str(self.bare)

    def head(self) -> str:
        return git("rev-parse", f"refs/heads/{BRANCH}", cwd=self.bare)

    def commit_count(self) -> int:
        return int(git("rev-list", "--count", f"refs/heads/{BRANCH}", cwd=self.bare))

    def read(self, name: str) -> str:
        return git("show", f"refs/heads/{BRANCH}:{name}", cwd=self.bare)

    def commit(
        self,
        message: str,
        files: Optional[dict[str, str]] = None,
        remove: tuple[str, ...] = (),
    ) -> str:
        """Commit changes in the writer on top of the current remote tip and push them."""
        if git("ls-remote", "--heads", "origin", BRANCH, cwd=self.writer):
            git("fetch", "--quiet", "origin", cwd=self.writer)
            git("reset", "--quiet", "--hard", f"origin/{BRANCH}", cwd=self.writer)
        for name, content in (files or {}).items():
            target = self.writer / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        for name in remove:
            (self.writer / name).unlink()
        git("add", "--all", cwd=self.writer)
        git("commit", "--quiet", "-m", message, cwd=self.writer)
        git("push", "--quiet", "origin", f"HEAD:refs/heads/{BRANCH}", cwd=self.writer)
        return self.head()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def identity() -> CommitIdentity:
    return CommitIdentity(name="webdav", email="webdav@sync-host")


@pytest.fixture
def hosted_remote(temp_dir: Path) -> HostedRemote:
    """A remote with one commit introducing test-file.txt containing "0"."""
    remote = HostedRemote(temp_dir)
    remote.commit("birth the universe", files={"test-file.txt": "0"})
    return remote


@pytest.fixture
def sync_dir(temp_dir: Path) -> Path:
    return temp_dir / "sync"


@pytest.fixture
def sync_config(hosted_remote: HostedRemote, sync_dir: Path) -> SyncConfig:
    """Configuration pointing at the hosted remote, with a fixed environment."""
    return build_config(
        git_url=hosted_remote.url,
        sync_dir=sync_dir,
        environ={"USER": "webdav", "HOSTNAME": "sync-host"},
    )

# Repo Sync Git Operations
# Git command execution and repository management

import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from reposync.errors import GitError, LocalStorageError, TransportError

if TYPE_CHECKING:
    from reposync.config.identity import CommitIdentity
    from reposync.credentials import CredentialProvider

# Applied to every invocation; paths from the working tree are never globs
_BASE_ENV = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_LITERAL_PATHSPECS": "1",
}


def _run_git(
    *args: str,
    cwd: Optional[Path] = None,
    check: bool = True,
    env: Optional[Mapping[str, str]] = None,
    error_cls: type[GitError] = LocalStorageError,
) -> subprocess.CompletedProcess[str]:
    """
    Run a git command.

    Args:
        *args: Git command arguments.
        cwd: Working directory.
        check: Whether to raise on non-zero exit.
        env: Extra environment variables for this invocation.
        error_cls: GitError subclass raised on failure.

    Returns:
        CompletedProcess with result.

    Raises:
        GitError: If command fails and check is True.
    """
    cmd = ["git", *args]
    full_env = {**os.environ, **_BASE_ENV, **(env or {})}
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            check=False,
            capture_output=True,
            text=True,
            env=full_env,
        )
    except FileNotFoundError:
        raise error_cls("git command not found. Is git installed?")
    if check and result.returncode != 0:
        raise error_cls(
            f"Git command failed: {' '.join(cmd)}",
            returncode=result.returncode,
            stderr=result.stderr.strip() if result.stderr else "",
        )
    return result


class Side(str, Enum):
    """Which side of a replay conflict to keep."""

    # The replay position: remote tip plus already replayed commits
    REMOTE = "remote"
    # The local commit being replayed
    LOCAL = "local"


# During a cherry-pick, stage 2 is HEAD (the replay position) and stage 3 the picked commit
_SIDE_STAGE = {Side.REMOTE: "2", Side.LOCAL: "3"}
_SIDE_FLAG = {Side.REMOTE: "--ours", Side.LOCAL: "--theirs"}


@dataclass(frozen=True)
class WorkingTreeStatus:
    """Changed paths in the working tree, including untracked and removed files."""

    changed_paths: tuple[str, ...] = ()

    @property
    def is_clean(self) -> bool:
        return not self.changed_paths


class GitRepository:
    """
    A local git working copy.

    Every method shells out to ``git`` in the working copy; failures are
    raised as LocalStorageError, or TransportError for network operations.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"GitRepository({str(self.path)!r})"

    def _git(
        self,
        *args: str,
        check: bool = True,
        env: Optional[Mapping[str, str]] = None,
        error_cls: type[GitError] = LocalStorageError,
    ) -> subprocess.CompletedProcess[str]:
        return _run_git(*args, cwd=self.path, check=check, env=env, error_cls=error_cls)

    # -- locating -----------------------------------------------------------

    @staticmethod
    def is_repository(path: Path) -> bool:
        """Check whether ``path`` holds repository metadata."""
        return (Path(path) / ".git").exists()

    @classmethod
    def open(cls, path: Path) -> "GitRepository":
        """
        Open an existing working copy.

        Raises:
            LocalStorageError: If ``path`` is not the top of a git working copy.
        """
        path = Path(path)
        result = _run_git("rev-parse", "--show-toplevel", cwd=path, check=False)
        if result.returncode != 0:
            raise LocalStorageError(
                f"Not a git repository: {path}",
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
        return cls(path)

    @classmethod
    def clone(cls, url: str, path: Path, credentials: "CredentialProvider") -> "GitRepository":
        """
        Clone ``url`` into ``path``.

        No cleanup is attempted if the clone fails part way.

        Raises:
            CredentialError: If no authentication material can be produced.
            TransportError: If the clone fails.
        """
        env = credentials.authenticate(url)
        _run_git("clone", "--no-tags", "--", url, str(path), env=env, error_cls=TransportError)
        return cls(path)

    # -- working tree -------------------------------------------------------

    def status(self) -> WorkingTreeStatus:
        """Get changed paths (porcelain, untracked files expanded)."""
        result = self._git("status", "--porcelain=v1", "-z", "--untracked-files=all")
        entries = result.stdout.split("\0")
        paths: list[str] = []
        i = 0
        while i < len(entries):
            entry = entries[i]
            i += 1
            if not entry:
                continue
            status_code = entry[:2]
            paths.append(entry[3:])
            # Renames and copies are followed by the original path
            if status_code[0] in ("R", "C"):
                i += 1
        return WorkingTreeStatus(changed_paths=tuple(paths))

    def stage_all(self) -> None:
        """Stage all changes, including new and removed files."""
        self._git("add", "--all")

    def write_tree(self) -> str:
        """Write the index as a tree object and return its id."""
        return self._git("write-tree").stdout.strip()

    def commit(
        self,
        parent: Optional[str],
        tree: str,
        message: str,
        identity: "CommitIdentity",
    ) -> str:
        """
        Create a commit and advance the current branch to it.

        Args:
            parent: Parent commit id, or None for a root commit.
            tree: Tree id from write_tree().
            message: Commit message.
            identity: Author and committer.

        Returns:
            The new commit id.
        """
        args = ["commit-tree", "--no-gpg-sign", "-m", message]
        if parent is not None:
            args.extend(["-p", parent])
        args.append(tree)
        sha = self._git(*args, env=identity.as_env()).stdout.strip()
        update = ["update-ref", "-m", f"commit: {message.splitlines()[0] if message else ''}", "HEAD", sha]
        if parent is not None:
            update.append(parent)
        self._git(*update)
        return sha

    # -- refs ---------------------------------------------------------------

    def current_branch_name(self) -> Optional[str]:
        """
        Get current branch name.

        Returns:
            Branch name (also for a branch without commits) or None if detached.
        """
        result = self._git("symbolic-ref", "--quiet", "--short", "HEAD", check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def resolve_ref(self, name: str) -> Optional[str]:
        """Resolve ``name`` to a commit id, or None if it does not exist."""
        result = self._git("rev-parse", "--verify", "--quiet", f"{name}^{{commit}}", check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def remote_url(self, remote: str) -> str:
        """Get the URL configured for ``remote``."""
        return self._git("remote", "get-url", remote).stdout.strip()

    def ahead_behind(self, local: str, upstream: str) -> tuple[int, int]:
        """
        Count commits reachable from only one of two tips.

        Returns:
            (ahead, behind): commits only in ``local``, commits only in ``upstream``.
        """
        result = self._git("rev-list", "--left-right", "--count", f"{local}...{upstream}")
        parts = result.stdout.split()
        if len(parts) != 2:
            raise LocalStorageError(f"Unexpected rev-list output: {result.stdout.strip()!r}")
        return int(parts[0]), int(parts[1])

    def commit_count(self, ref: str = "HEAD") -> int:
        """Count commits reachable from ``ref``."""
        return int(self._git("rev-list", "--count", ref).stdout.strip())

    # -- network ------------------------------------------------------------

    def fetch(self, remote: str, refspec: str, credentials: "CredentialProvider") -> None:
        """
        Fetch ``refspec`` from the named remote.

        This is the only operation that writes remote-tracking references.
        """
        env = credentials.authenticate(self.remote_url(remote))
        self._git("fetch", "--no-tags", "--", remote, refspec, env=env, error_cls=TransportError)

    def push(self, url: str, refspec: str, credentials: "CredentialProvider", *, force: bool = False) -> None:
        """
        Push ``refspec`` to ``url``.

        Pushing to a URL rather than a remote name leaves remote-tracking
        references untouched.
        """
        env = credentials.authenticate(url)
        args = ["push", "--no-verify"]
        if force:
            args.append("--force")
        args.extend(["--", url, refspec])
        self._git(*args, env=env, error_cls=TransportError)

    # -- replay -------------------------------------------------------------

    def begin_replay(self, local_tip: str, upstream_tip: str) -> list[str]:
        """
        Start replaying local-only commits onto ``upstream_tip``.

        Detaches HEAD at ``upstream_tip`` and updates the working tree.

        Returns:
            Commits reachable from ``local_tip`` but not ``upstream_tip``,
            oldest first. Merge commits are skipped.
        """
        result = self._git(
            "rev-list", "--reverse", "--topo-order", "--no-merges", local_tip, f"^{upstream_tip}"
        )
        commits = [line for line in result.stdout.splitlines() if line]
        self._git("checkout", "--quiet", "--force", "--detach", upstream_tip)
        return commits

    def apply_commit(self, commit: str, identity: "CommitIdentity") -> bool:
        """
        Apply a commit's changes onto HEAD without committing.

        Returns:
            True if the changes applied cleanly, False if conflicts were recorded.

        Raises:
            LocalStorageError: If the apply failed for a reason other than conflicts.
        """
        result = self._git(
            "cherry-pick", "--no-commit", commit,
            check=False,
            env=identity.as_env(),
        )
        if result.returncode == 0:
            return True
        if self._conflicts():
            return False
        raise LocalStorageError(
            f"Could not apply {commit}",
            returncode=result.returncode,
            stderr=result.stderr.strip(),
        )

    def _conflicts(self) -> dict[str, set[str]]:
        """Map each unmerged path to the index stages present for it."""
        result = self._git("ls-files", "--unmerged", "-z")
        conflicts: dict[str, set[str]] = {}
        for entry in result.stdout.split("\0"):
            if not entry:
                continue
            # Format: <mode> <object> <stage>\t<path>
            meta, _, path = entry.partition("\t")
            stage = meta.split()[2]
            conflicts.setdefault(path, set()).add(stage)
        return conflicts

    def conflicted_paths(self) -> list[str]:
        """List unmerged paths in sorted order."""
        return sorted(self._conflicts())

    def next_conflict(self) -> Optional[str]:
        """Get the first unresolved path, or None when the index is clean."""
        paths = self.conflicted_paths()
        return paths[0] if paths else None

    def resolve(self, path: str, side: Side) -> None:
        """
        Resolve a conflicted path by taking one side's content.

        When the chosen side has no entry (it deleted the file), the path is removed.
        """
        stages = self._conflicts().get(path)
        if stages is None:
            return
        if _SIDE_STAGE[side] in stages:
            self._git("checkout", _SIDE_FLAG[side], "--", path)
            self._git("add", "--", path)
        else:
            self._git("rm", "--quiet", "--force", "--", path)

    def commit_replayed(self, commit: str, identity: "CommitIdentity") -> str:
        """
        Finalize the staged replay of ``commit``.

        Author and message are copied from ``commit``; the committer is ``identity``.
        Commits left empty by conflict resolution are kept.

        Returns:
            The new commit id.
        """
        self._git(
            "commit", "--quiet", "--no-verify", "--no-gpg-sign", "--allow-empty", f"--reuse-message={commit}",
            env=identity.as_env(),
        )
        self._git("reset", "--quiet", "--hard", "HEAD")
        return self._git("rev-parse", "HEAD").stdout.strip()

    def finish_replay(self, branch: str, tip: str) -> None:
        """Point ``branch`` at ``tip`` and check it out."""
        self._git("checkout", "--quiet", "--force", "-B", branch, tip)

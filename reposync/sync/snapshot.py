# Repo Sync Snapshot Committer
# Commit every uncommitted working tree change as one snapshot

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from reposync.config.identity import CommitIdentity
from reposync.config.schema import DEFAULT_COMMIT_MESSAGE
from reposync.git.operations import GitRepository


@dataclass
class SnapshotResult:
    """Outcome of a snapshot attempt."""

    commit: Optional[str] = None
    parent: Optional[str] = None
    changed_paths: list[str] = field(default_factory=list)
    message: str = ""

    @property
    def committed(self) -> bool:
        return self.commit is not None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """RFC 3339 UTC timestamp with a ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def snapshot_commit(
    repo: GitRepository,
    identity: CommitIdentity,
    message_template: str = DEFAULT_COMMIT_MESSAGE,
    clock: Callable[[], datetime] = utc_now,
) -> SnapshotResult:
    """
    Commit all uncommitted changes as a single commit.

    A clean working tree is a no-op. Otherwise every change (new, modified
    and removed files) is staged and exactly one commit is created on top
    of the current branch head, or as a root commit when there is no history.

    Args:
        repo: Open repository.
        identity: Author and committer.
        message_template: Message with an optional ``{timestamp}`` field.
        clock: Source of the commit time embedded in the message.

    Returns:
        SnapshotResult; ``commit`` is None when nothing changed.
    """
    status = repo.status()
    if status.is_clean:
        return SnapshotResult()

    repo.stage_all()
    tree = repo.write_tree()
    parent = repo.resolve_ref("HEAD")
    message = message_template.replace("{timestamp}", format_timestamp(clock()))
    sha = repo.commit(parent, tree, message, identity)

    return SnapshotResult(
        commit=sha,
        parent=parent,
        changed_paths=list(status.changed_paths),
        message=message,
    )

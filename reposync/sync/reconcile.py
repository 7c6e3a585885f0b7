# Repo Sync Reconciler
# Replay local-only commits onto the fetched remote tip, remote wins on conflict

from dataclasses import dataclass, field

from reposync.config.identity import CommitIdentity
from reposync.errors import ConflictResolutionError
from reposync.git.operations import GitRepository, Side
from reposync.sync.divergence import DivergenceReport

# Fixed policy: a path edited on both sides keeps the remote content
CONFLICT_SIDE = Side.REMOTE


@dataclass(frozen=True)
class ReplayStep:
    """One local commit rewritten onto the replay position."""

    original: str
    replayed: str
    resolved_paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReplayPosition:
    """Where the next commit is applied, and what has been replayed so far."""

    tip: str
    steps: tuple[ReplayStep, ...] = ()

    def advance(self, step: ReplayStep) -> "ReplayPosition":
        return ReplayPosition(tip=step.replayed, steps=self.steps + (step,))


@dataclass
class ReconcileResult:
    """Outcome of a full replay."""

    upstream: str
    tip: str
    steps: list[ReplayStep] = field(default_factory=list)

    @property
    def replayed_count(self) -> int:
        return len(self.steps)

    @property
    def resolved_paths(self) -> list[str]:
        return [path for step in self.steps for path in step.resolved_paths]


def resolve_conflicts(repo: GitRepository, commit: str) -> tuple[str, ...]:
    """
    Apply the remote-wins policy to every conflicted path.

    Returns:
        The paths that were resolved, in order.

    Raises:
        ConflictResolutionError: If a path is still conflicted after resolution.
    """
    resolved: list[str] = []
    path = repo.next_conflict()
    while path is not None:
        if path in resolved:
            raise ConflictResolutionError(commit, repo.conflicted_paths())
        repo.resolve(path, CONFLICT_SIDE)
        resolved.append(path)
        path = repo.next_conflict()
    return tuple(resolved)


def replay_commit(
    repo: GitRepository,
    position: ReplayPosition,
    commit: str,
    identity: CommitIdentity,
) -> ReplayPosition:
    """
    Replay one commit onto ``position`` and return the next position.

    Raises:
        ConflictResolutionError: If conflicts survive the policy pass. The
            repository is left mid-replay for manual inspection.
    """
    resolved: tuple[str, ...] = ()
    if not repo.apply_commit(commit, identity):
        resolved = resolve_conflicts(repo, commit)

    remaining = repo.conflicted_paths()
    if remaining:
        raise ConflictResolutionError(commit, remaining)

    replayed = repo.commit_replayed(commit, identity)
    return position.advance(ReplayStep(original=commit, replayed=replayed, resolved_paths=resolved))


def reconcile(
    repo: GitRepository,
    branch: str,
    report: DivergenceReport,
    identity: CommitIdentity,
) -> ReconcileResult:
    """
    Rebase the local branch onto the remote tip from ``report``.

    Local-only commits are replayed oldest first. When all are replayed the
    branch is moved to the last one and checked out; with no local-only
    commits this is a fast-forward to the remote tip.

    Args:
        repo: Open repository.
        branch: Local branch being synchronized.
        report: Fresh divergence report with ``behind > 0``.
        identity: Committer for rewritten commits.

    Returns:
        ReconcileResult with one step per replayed commit.
    """
    commits = repo.begin_replay(report.local_tip, report.remote_tip)

    position = ReplayPosition(tip=report.remote_tip)
    for commit in commits:
        position = replay_commit(repo, position, commit, identity)

    repo.finish_replay(branch, position.tip)
    return ReconcileResult(upstream=report.remote_tip, tip=position.tip, steps=list(position.steps))

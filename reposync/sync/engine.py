# Repo Sync Engine
# Locate, snapshot, fetch, analyze, reconcile and publish in one run

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from reposync.config.identity import CommitIdentity, resolve_commit_identity
from reposync.config.schema import SyncConfig
from reposync.credentials import CredentialProvider
from reposync.errors import TopologyError
from reposync.git.operations import GitRepository
from reposync.logger import SyncLogger
from reposync.sync.divergence import DivergenceReport, analyze_divergence
from reposync.sync.locator import locate_repository
from reposync.sync.publish import publish
from reposync.sync.reconcile import ReconcileResult, reconcile
from reposync.sync.snapshot import SnapshotResult, snapshot_commit, utc_now


@dataclass
class SyncResult:
    """Result of a complete synchronization run."""

    branch: str
    snapshot: SnapshotResult
    divergence: DivergenceReport
    final: DivergenceReport
    published: str
    reconcile: Optional[ReconcileResult] = None

    @property
    def committed(self) -> bool:
        return self.snapshot.committed

    @property
    def reconciled(self) -> bool:
        return self.reconcile is not None


class SyncEngine:
    """
    Synchronization engine for one directory and one remote branch.

    Each run is synchronous and stops at the first error; nothing is
    retried or rolled back.
    """

    def __init__(
        self,
        config: SyncConfig,
        credentials: Optional[CredentialProvider] = None,
        logger: Optional[SyncLogger] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize sync engine.

        Args:
            config: Run configuration.
            credentials: Transport authentication (built from config if not provided).
            logger: Output sink (a default stderr logger if not provided).
            clock: Time source for snapshot commit messages.
        """
        self.config = config
        self.credentials = credentials or CredentialProvider.from_config(config)
        self.logger = logger or SyncLogger(verbose=config.output.verbose, colored=config.output.colored)
        self.clock = clock
        self.remote = config.remote

    def run(self) -> SyncResult:
        """
        Run one synchronization.

        Returns:
            SyncResult describing every step taken.

        Raises:
            RepoSyncError: The first failure, unchanged.
        """
        identity = resolve_commit_identity(self.config)
        # Credentials are checked before anything is written locally
        self.credentials.authenticate(self.config.git_url)

        self.logger.info(f"Sync directory: {self.config.sync_dir}")
        repo = locate_repository(self.config.git_url, self.config.sync_path, self.credentials)
        self.credentials.authenticate(repo.remote_url(self.remote))

        branch = repo.current_branch_name()
        if branch is None:
            raise TopologyError("Git default branch is missing (HEAD is detached)")
        self.logger.debug(f"Branch: {branch}")

        snapshot = self._snapshot(repo, identity)

        self.logger.info(f"Fetching from {self.remote}...")
        repo.fetch(self.remote, f"+refs/heads/*:refs/remotes/{self.remote}/*", self.credentials)

        divergence = analyze_divergence(repo, branch, self.remote)
        self.logger.info(f"Local is {divergence.ahead} ahead, {divergence.behind} behind {self.remote}/{branch}")

        result: Optional[ReconcileResult] = None
        final = divergence
        if divergence.behind > 0:
            result = self._reconcile(repo, branch, divergence, identity)
            final = analyze_divergence(repo, branch, self.remote)
            if final.behind != 0:
                raise TopologyError(
                    f"Local is still {final.behind} behind {self.remote}/{branch} after reconciliation"
                )

        self.logger.info(f"Publishing {branch} to {self.remote}...")
        published = publish(repo, branch, self.credentials, self.remote)
        self.logger.success(f"Published {published[:12]}")

        return SyncResult(
            branch=branch,
            snapshot=snapshot,
            divergence=divergence,
            final=final,
            published=published,
            reconcile=result,
        )

    def _snapshot(self, repo: GitRepository, identity: CommitIdentity) -> SnapshotResult:
        snapshot = snapshot_commit(repo, identity, self.config.commit_message, self.clock)
        if snapshot.committed:
            self.logger.info(f"Committed {len(snapshot.changed_paths)} changed path(s) as {snapshot.commit[:12]}")
            for path in snapshot.changed_paths:
                self.logger.debug(f"  {path}")
        else:
            self.logger.info("Working tree clean, nothing to commit")
        return snapshot

    def _reconcile(
        self,
        repo: GitRepository,
        branch: str,
        divergence: DivergenceReport,
        identity: CommitIdentity,
    ) -> ReconcileResult:
        self.logger.info(f"Rebasing {branch} onto {divergence.remote_tip[:12]}...")
        result = reconcile(repo, branch, divergence, identity)
        for step in result.steps:
            self.logger.debug(f"  {step.original[:12]} -> {step.replayed[:12]}")
            for path in step.resolved_paths:
                self.logger.warning(f"Conflict in {path} resolved with the remote version")
        self.logger.info(f"Rebased {result.replayed_count} commit(s) onto upstream")
        return result

# Repo Sync Engine Module
# Components of a synchronization run

from reposync.sync.divergence import DivergenceReport, analyze_divergence
from reposync.sync.engine import SyncEngine, SyncResult
from reposync.sync.locator import locate_repository
from reposync.sync.publish import publish
from reposync.sync.reconcile import ReconcileResult, ReplayPosition, ReplayStep, reconcile
from reposync.sync.snapshot import SnapshotResult, snapshot_commit

__all__ = [
    "SyncEngine",
    "SyncResult",
    "locate_repository",
    "snapshot_commit",
    "SnapshotResult",
    "analyze_divergence",
    "DivergenceReport",
    "reconcile",
    "ReconcileResult",
    "ReplayPosition",
    "ReplayStep",
    "publish",
]

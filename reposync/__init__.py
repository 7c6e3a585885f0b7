"""Repo Sync - continuous mirroring of a directory to a git remote.

Commits local edits, rebases them onto the remote branch with a
remote-wins conflict policy, and force-publishes the result.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "SyncEngine",
    "SyncResult",
    "SyncConfig",
    "build_config",
    "CredentialProvider",
    "GitRepository",
    "RepoSyncError",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("SyncEngine", "SyncResult"):
        from reposync.sync import engine

        return getattr(engine, name)
    if name in ("SyncConfig", "build_config"):
        from reposync import config

        return getattr(config, name)
    if name == "CredentialProvider":
        from reposync.credentials import CredentialProvider

        return CredentialProvider
    if name == "GitRepository":
        from reposync.git.operations import GitRepository

        return GitRepository
    if name == "RepoSyncError":
        from reposync.errors import RepoSyncError

        return RepoSyncError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

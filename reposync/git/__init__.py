# Repo Sync Git Module
# Repository capability backed by the git executable

from reposync.git.operations import GitRepository, Side, WorkingTreeStatus

__all__ = [
    "GitRepository",
    "Side",
    "WorkingTreeStatus",
]

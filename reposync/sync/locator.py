# Repo Sync Repository Locator
# Open the local clone, or clone it on first run

from pathlib import Path

from reposync.credentials import CredentialProvider
from reposync.errors import LocalStorageError
from reposync.git.operations import GitRepository


def locate_repository(url: str, path: Path, credentials: CredentialProvider) -> GitRepository:
    """
    Get a ready-to-use repository at ``path``.

    Opens the repository if ``path`` already holds one, otherwise creates
    ``path`` and clones ``url`` into it. A failed clone is not cleaned up;
    remove ``path`` before retrying.

    Args:
        url: Remote repository address.
        path: Local synchronization directory.
        credentials: Authentication for the clone.

    Returns:
        GitRepository for ``path``.

    Raises:
        LocalStorageError: If ``path`` cannot be created or opened,
            or is a non-empty directory without a repository.
        TransportError: If the clone fails.
    """
    path = Path(path)
    if GitRepository.is_repository(path):
        return GitRepository.open(path)

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise LocalStorageError(f"Cannot create sync directory {path}: {e}") from e
    if any(path.iterdir()):
        raise LocalStorageError(f"Sync directory {path} is not empty and is not a git repository")

    return GitRepository.clone(url, path, credentials)

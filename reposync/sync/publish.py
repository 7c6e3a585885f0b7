# Repo Sync Publisher
# Force the local branch onto the remote

from reposync.credentials import CredentialProvider
from reposync.errors import TopologyError
from reposync.git.operations import GitRepository


def publish(
    repo: GitRepository,
    branch: str,
    credentials: CredentialProvider,
    remote: str = "origin",
) -> str:
    """
    Force-push the local branch to the same branch on the remote.

    Only safe once every fetched remote commit is part of the local history.

    Returns:
        The commit id the remote branch now points to.

    Raises:
        TopologyError: If the local branch has no commits.
        TransportError: If the push is rejected or the remote is unreachable.
    """
    head = repo.resolve_ref(f"refs/heads/{branch}")
    if head is None:
        raise TopologyError(f"Local branch '{branch}' has no commits to publish")

    url = repo.remote_url(remote)
    repo.push(url, f"refs/heads/{branch}:refs/heads/{branch}", credentials, force=True)
    return head

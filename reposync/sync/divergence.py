# Repo Sync Divergence Analyzer
# Ahead/behind counts between the local branch and its remote-tracking ref

from dataclasses import dataclass

from reposync.errors import TopologyError
from reposync.git.operations import GitRepository


@dataclass(frozen=True)
class DivergenceReport:
    """Commit counts reachable from only one of the two tips."""

    ahead: int
    behind: int
    local_tip: str
    remote_tip: str

    @property
    def up_to_date(self) -> bool:
        return self.ahead == 0 and self.behind == 0

    @property
    def diverged(self) -> bool:
        return self.ahead > 0 and self.behind > 0


def tracking_ref(remote: str, branch: str) -> str:
    return f"refs/remotes/{remote}/{branch}"


def analyze_divergence(repo: GitRepository, branch: str, remote: str = "origin") -> DivergenceReport:
    """
    Compare the local branch head with its remote-tracking reference.

    The tracking reference must already be fetched.

    Raises:
        TopologyError: If the branch has no commits or the tracking ref is missing.
    """
    local_tip = repo.resolve_ref(f"refs/heads/{branch}")
    if local_tip is None:
        raise TopologyError(f"Local branch '{branch}' has no commits")

    ref = tracking_ref(remote, branch)
    remote_tip = repo.resolve_ref(ref)
    if remote_tip is None:
        raise TopologyError(f"Remote-tracking reference {ref} not found; does the remote have branch '{branch}'?")

    ahead, behind = repo.ahead_behind(local_tip, remote_tip)
    return DivergenceReport(ahead=ahead, behind=behind, local_tip=local_tip, remote_tip=remote_tip)

# Repo Sync Errors
# Typed failures for each step of a synchronization run

from typing import Optional


class RepoSyncError(Exception):
    """Base class for every fatal error raised during a run."""

    exit_code = 1

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(RepoSyncError):
    """Invalid or incomplete configuration."""

    exit_code = 2


class CredentialError(RepoSyncError):
    """Authentication material could not be produced."""

    exit_code = 7


class AgentSocketMissingError(CredentialError):
    """No identity file was given and SSH_AUTH_SOCK is not defined."""

    def __init__(self, message: str = "SSH_AUTH_SOCK environment variable is not defined."):
        super().__init__(message)


class IdentityFileMissingError(CredentialError):
    """The configured SSH identity file does not exist."""


class GitError(RepoSyncError):
    """Exception raised for git operation errors."""

    def __init__(self, message: str, returncode: int = 1, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)

    def __str__(self) -> str:
        if self.stderr:
            return f"{self.message}: {self.stderr}"
        return self.message


class TransportError(GitError):
    """Clone, fetch or push failed (network, auth or host identity)."""

    exit_code = 3


class LocalStorageError(GitError):
    """Reading or writing the local repository failed."""

    exit_code = 4


class IdentityUnavailableError(LocalStorageError):
    """No commit identity could be derived and fallback is disabled."""


class TopologyError(RepoSyncError):
    """The branch or remote-tracking reference needed to reconcile is absent."""

    exit_code = 5


class ConflictResolutionError(RepoSyncError):
    """Conflicts remained after the remote-wins policy was applied.

    The repository is left exactly as it was when the error was raised.
    """

    exit_code = 6

    def __init__(self, commit: str, paths: list[str], message: Optional[str] = None):
        self.commit = commit
        self.paths = list(paths)
        if message is None:
            message = (
                f"Conflict detected while replaying {commit[:12]} "
                f"({', '.join(self.paths)}); repository left in place for inspection"
            )
        super().__init__(message)

# Repo Sync Commit Identity
# Derive author/committer identity from the captured environment

from dataclasses import dataclass

from reposync.config.schema import SyncConfig
from reposync.errors import IdentityUnavailableError


@dataclass(frozen=True)
class CommitIdentity:
    """Name and email stamped on engine-created commits."""

    name: str
    email: str

    def as_env(self) -> dict[str, str]:
        """Environment variables git reads for author and committer."""
        return {
            "GIT_AUTHOR_NAME": self.name,
            "GIT_AUTHOR_EMAIL": self.email,
            "GIT_COMMITTER_NAME": self.name,
            "GIT_COMMITTER_EMAIL": self.email,
        }


def resolve_commit_identity(config: SyncConfig) -> CommitIdentity:
    """
    Build the commit identity for a run.

    Explicit ``identity.name``/``identity.email`` win; otherwise the name is
    the operating user and the email is ``user@host``. Missing environment
    values fall back to placeholders unless ``allow_fallback`` is off.

    Raises:
        IdentityUnavailableError: If a value is missing and fallback is disabled.
    """
    settings = config.identity
    env = config.environment

    user = env.user
    host = env.host
    if not settings.allow_fallback:
        missing = []
        if not user and (settings.name is None or settings.email is None):
            missing.append("USER")
        if not host and settings.email is None:
            missing.append("HOSTNAME")
        if missing:
            raise IdentityUnavailableError(
                f"Cannot derive commit identity: {', '.join(missing)} not set and placeholder fallback is disabled"
            )

    user = user or settings.fallback_user
    host = host or settings.fallback_host

    return CommitIdentity(
        name=settings.name or user,
        email=settings.email or f"{user}@{host}",
    )

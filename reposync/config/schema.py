# Repo Sync Configuration Schema
# Pydantic models for run configuration validation

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_COMMIT_MESSAGE = "Update from WebDAV changes on {timestamp}"


class CommitIdentityConfig(BaseModel):
    """Author/committer identity used for snapshot and replayed commits."""

    name: str | None = Field(default=None, description="Explicit author name (overrides USER)")
    email: str | None = Field(default=None, description="Explicit author email (overrides USER@HOSTNAME)")
    fallback_user: str = Field(default="unknown", description="User name when USER is unavailable")
    fallback_host: str = Field(default="localhost", description="Host name when HOSTNAME is unavailable")
    allow_fallback: bool = Field(default=True, description="Use placeholder values when environment identity is missing")


class EnvironmentSettings(BaseModel):
    """Values captured once from the process environment at startup."""

    user: str | None = Field(default=None, description="Operating user (USER)")
    host: str | None = Field(default=None, description="Host name (HOSTNAME)")
    ssh_auth_sock: str | None = Field(default=None, description="SSH agent socket (SSH_AUTH_SOCK)")


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")


class SyncConfig(BaseModel):
    """Root configuration model for one synchronization run."""

    git_url: str = Field(description="Remote repository address")
    sync_dir: str = Field(description="Local synchronization directory")
    ssh_identity: str | None = Field(default=None, description="SSH private key used for transport")
    remote: str = Field(default="origin", description="Name of the remote inside the local clone")
    commit_message: str = Field(
        default=DEFAULT_COMMIT_MESSAGE,
        description="Snapshot commit message; {timestamp} is replaced with the RFC 3339 time",
    )
    identity: CommitIdentityConfig = Field(default_factory=CommitIdentityConfig, description="Commit identity")
    environment: EnvironmentSettings = Field(default_factory=EnvironmentSettings, description="Captured environment")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

    @field_validator("sync_dir")
    @classmethod
    def expand_sync_dir(cls, v: str) -> str:
        """Expand ~ in path."""
        return str(Path(v).expanduser())

    @field_validator("ssh_identity")
    @classmethod
    def expand_identity(cls, v: str | None) -> str | None:
        """Expand ~ in optional identity path."""
        if v is None:
            return None
        return str(Path(v).expanduser())

    @property
    def sync_path(self) -> Path:
        return Path(self.sync_dir)

    @property
    def identity_path(self) -> Path | None:
        return Path(self.ssh_identity) if self.ssh_identity else None

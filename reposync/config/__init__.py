# Repo Sync Configuration Module
# Handles configuration assembly, validation, and commit identity

from reposync.config.identity import CommitIdentity, resolve_commit_identity
from reposync.config.loader import (
    build_config,
    get_config_path,
    load_config_file,
    load_environment,
)
from reposync.config.schema import (
    DEFAULT_COMMIT_MESSAGE,
    CommitIdentityConfig,
    EnvironmentSettings,
    OutputConfig,
    SyncConfig,
)

__all__ = [
    # Schema
    "SyncConfig",
    "CommitIdentityConfig",
    "EnvironmentSettings",
    "OutputConfig",
    "DEFAULT_COMMIT_MESSAGE",
    # Loader
    "build_config",
    "get_config_path",
    "load_config_file",
    "load_environment",
    # Identity
    "CommitIdentity",
    "resolve_commit_identity",
]

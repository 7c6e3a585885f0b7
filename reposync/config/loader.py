# Repo Sync Configuration Loader
# Assemble one SyncConfig from defaults, YAML, environment and CLI options

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from reposync.config.schema import EnvironmentSettings, SyncConfig
from reposync.errors import ConfigurationError

CONFIG_ENV_VAR = "REPO_SYNC_CONFIG"


def load_environment(environ: Optional[Mapping[str, str]] = None) -> EnvironmentSettings:
    """
    Capture the environment values the engine depends on.

    This is the only place the process environment is read.

    Args:
        environ: Mapping to read from (defaults to os.environ).

    Returns:
        EnvironmentSettings with empty values normalized to None.
    """
    if environ is None:
        environ = os.environ

    def _get(key: str) -> Optional[str]:
        value = environ.get(key)
        return value or None

    return EnvironmentSettings(
        user=_get("USER"),
        host=_get("HOSTNAME"),
        ssh_auth_sock=_get("SSH_AUTH_SOCK"),
    )


def get_config_path(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """Resolve the optional YAML config path (explicit path, then REPO_SYNC_CONFIG)."""
    if config_path is not None:
        return Path(config_path).expanduser()
    if environ is None:
        environ = os.environ
    env_path = environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return None


def load_config_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML configuration file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Parsed mapping (empty for an empty file).

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping.
    """
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration root must be a mapping in {config_path}")
    return data


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Copy a nested mapping from the file data; an empty (null) section is {}."""
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"Configuration section '{name}' must be a mapping")
    return dict(value)


def build_config(
    *,
    git_url: Optional[str] = None,
    sync_dir: Optional[Path] = None,
    ssh_identity: Optional[Path] = None,
    config_path: Optional[Path] = None,
    remote: Optional[str] = None,
    allow_identity_fallback: Optional[bool] = None,
    verbose: Optional[bool] = None,
    colored: Optional[bool] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SyncConfig:
    """
    Assemble the run configuration.

    Precedence, lowest to highest: model defaults, YAML file, CLI options.
    The environment is captured once and stored on the result.

    Raises:
        ConfigurationError: If the merged configuration does not validate.
    """
    path = get_config_path(config_path, environ)
    data = load_config_file(path) if path is not None else {}

    overrides: dict[str, Any] = {
        "git_url": git_url,
        "sync_dir": str(sync_dir) if sync_dir is not None else None,
        "ssh_identity": str(ssh_identity) if ssh_identity is not None else None,
        "remote": remote,
    }
    for key, value in overrides.items():
        if value is not None:
            data[key] = value

    identity = _section(data, "identity")
    if allow_identity_fallback is not None:
        identity["allow_fallback"] = allow_identity_fallback
    data["identity"] = identity

    output = _section(data, "output")
    if verbose is not None:
        output["verbose"] = verbose
    if colored is not None:
        output["colored"] = colored
    data["output"] = output

    data["environment"] = load_environment(environ).model_dump()

    try:
        return SyncConfig.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")
        raise ConfigurationError("Invalid configuration: " + "; ".join(errors)) from e

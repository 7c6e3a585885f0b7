"""Click-based CLI for Repo Sync."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from reposync import __version__
from reposync.config import build_config
from reposync.errors import RepoSyncError
from reposync.logger import SyncLogger
from reposync.sync.engine import SyncEngine


@click.command()
@click.version_option(version=__version__, prog_name="repo-sync")
@click.option("--git-url", help="Remote repository address (URL, scp-like address or path)")
@click.option("--sync-dir", type=click.Path(file_okay=False, path_type=Path), help="Local directory to synchronize")
@click.option(
    "--ssh-identity",
    type=click.Path(dir_okay=False, path_type=Path),
    help="SSH private key to authenticate with (default: use SSH_AUTH_SOCK agent)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML configuration file (default: $REPO_SYNC_CONFIG)",
)
@click.option("--remote", default=None, help="Remote name inside the local clone (default: origin)")
@click.option(
    "--no-identity-fallback",
    is_flag=True,
    help="Fail instead of using placeholder author values when USER/HOSTNAME are unset",
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
def cli(
    git_url: Optional[str],
    sync_dir: Optional[Path],
    ssh_identity: Optional[Path],
    config_path: Optional[Path],
    remote: Optional[str],
    no_identity_fallback: bool,
    verbose: bool,
    no_color: bool,
) -> None:
    """Repo Sync - mirror a directory to a git remote branch.

    Commits local edits as one snapshot, fetches, rebases local commits
    onto the remote (remote wins on conflicts) and force-pushes the result.

    \b
    Examples:
      repo-sync --git-url git@example.com:team/docs.git --sync-dir ~/docs
      repo-sync --git-url ssh://git@example.com/docs.git --sync-dir /srv/dav \\
                --ssh-identity ~/.ssh/id_ed25519
    """
    logger = SyncLogger(verbose=verbose, colored=not no_color)

    try:
        config = build_config(
            git_url=git_url,
            sync_dir=sync_dir,
            ssh_identity=ssh_identity,
            config_path=config_path,
            remote=remote,
            allow_identity_fallback=False if no_identity_fallback else None,
            verbose=verbose or None,
            colored=False if no_color else None,
        )
        logger.verbose = config.output.verbose
        result = SyncEngine(config, logger=logger).run()
    except RepoSyncError as e:
        logger.error(str(e))
        sys.exit(e.exit_code)

    logger.summary(result)


if __name__ == "__main__":
    cli()

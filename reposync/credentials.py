# Repo Sync Credentials
# Authentication material for clone, fetch and push

import re
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from reposync.config.schema import SyncConfig
from reposync.errors import AgentSocketMissingError, IdentityFileMissingError

# scp-like syntax: [user@]host:path, where host contains no slash
_SCP_LIKE = re.compile(r"^(?:[^@/:]+@)?[^@/:]+:(?!//)")
_SSH_SCHEMES = ("ssh://", "git+ssh://", "ssh+git://")

# Host identities are accepted unconditionally; this tool targets private remotes.
_HOST_CHECK_OPTIONS = (
    "-o",
    "StrictHostKeyChecking=no",
    "-o",
    "UserKnownHostsFile=/dev/null",
    "-o",
    "LogLevel=ERROR",
)


def is_ssh_url(url: str) -> bool:
    """
    Check whether a remote address uses the SSH transport.

    Args:
        url: Remote address (URL, scp-like address or local path).

    Returns:
        True for ssh:// URLs and scp-like ``user@host:path`` addresses.
    """
    if url.startswith(_SSH_SCHEMES):
        return True
    if "://" in url:
        return False
    # Windows drive letters (C:\repo) are local paths
    if re.match(r"^[A-Za-z]:[\\/]", url):
        return False
    return bool(_SCP_LIKE.match(url))


@dataclass(frozen=True)
class Credential:
    """Identity used to authenticate transport operations."""

    identity_file: Optional[Path] = None
    agent_socket: Optional[str] = None

    @property
    def uses_agent(self) -> bool:
        return self.identity_file is None


class CredentialProvider:
    """
    Produces transport environment for git network operations.

    With an identity file, ssh uses only that key (no agent, no passphrase
    prompt). Without one, ssh is pointed at the agent socket captured at
    startup. Every host key is accepted.
    """

    def __init__(self, credential: Credential):
        self.credential = credential

    @classmethod
    def from_config(cls, config: SyncConfig) -> "CredentialProvider":
        return cls(
            Credential(
                identity_file=config.identity_path,
                agent_socket=config.environment.ssh_auth_sock,
            )
        )

    def authenticate(self, url: str) -> dict[str, str]:
        """
        Answer the authentication challenge for ``url``.

        Args:
            url: Remote address about to be contacted.

        Returns:
            Environment variables to overlay on the git subprocess.

        Raises:
            AgentSocketMissingError: SSH remote, no identity file and no agent.
            IdentityFileMissingError: The identity file does not exist.
        """
        material = {"GIT_TERMINAL_PROMPT": "0"}
        if not is_ssh_url(url):
            return material

        material["GIT_SSH_COMMAND"] = self.ssh_command()
        if self.credential.uses_agent:
            material["SSH_AUTH_SOCK"] = self.credential.agent_socket
        return material

    def ssh_command(self) -> str:
        """Build the ssh invocation git uses for the transport."""
        args = ["ssh", "-o", "BatchMode=yes", *_HOST_CHECK_OPTIONS]
        identity = self.credential.identity_file
        if identity is None:
            if not self.credential.agent_socket:
                raise AgentSocketMissingError()
        else:
            if not identity.is_file():
                raise IdentityFileMissingError(f"SSH identity file not found: {identity}")
            args.extend(["-i", str(identity), "-o", "IdentitiesOnly=yes", "-o", "IdentityAgent=none"])
        return " ".join(shlex.quote(arg) for arg in args)

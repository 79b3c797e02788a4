# -----------------------------------------------------------------------------
# GIT INFRASTRUCTURE - REPOSITORY STAGER
# -----------------------------------------------------------------------------
# Responsibility: Materialize a remote repository into a workspace with
# `git clone`, authenticating with a Personal Access Token.
#
# Security:
# - The token travels as the userinfo part of the clone URL (percent-encoded)
#   because git is an external process and only accepts it that way
# - Tokens are NEVER logged in plain text; URLs are printed redacted
# - Anything git writes to stderr is sanitized before it becomes a diagnostic
# - After the clone, origin is reset to the token-free URL so .git/config
#   never carries the token into the build context
# -----------------------------------------------------------------------------

import os
from typing import TYPE_CHECKING, Optional
from urllib.parse import quote, urlsplit, urlunsplit

from rich.console import Console

from dockgen.domain.errors import CredentialMissingError, StagingFailedError
from dockgen.infra.process import CommandRunner, SubprocessRunner

if TYPE_CHECKING:
    from dockgen.core.workspace import Workspace

console = Console()

REDACTED = "[REDACTED]"
DEFAULT_SCHEME = "https"


def normalize_location(location: str) -> str:
    """
    Turn a bare host/path (github.com/org/repo) into a full https URL.

    URLs that already carry a scheme are returned unchanged.
    """
    location = location.strip()
    if "://" in location:
        return location
    return f"{DEFAULT_SCHEME}://{location.lstrip('/')}"


def split_userinfo(location: str) -> tuple[str, str, Optional[str]]:
    """
    Split a location into (scheme, rest, userinfo) without URL parsing.

    The last "@" ends the userinfo, so a token containing "/" or ":" is
    never mistaken for the host.
    """
    scheme, rest = normalize_location(location).split("://", 1)
    if "@" not in rest:
        return scheme, rest, None
    userinfo, rest = rest.rsplit("@", 1)
    return scheme, rest, userinfo


def public_location(location: str) -> str:
    """The location with any userinfo removed."""
    scheme, rest, _ = split_userinfo(location)
    return f"{scheme}://{rest}"


def embed_credential(location: str, credential: str) -> str:
    """
    Build the clone URL with `credential` as its (percent-encoded) userinfo.

    Any userinfo already present in the location is replaced.

    Args:
        location: Repository location, bare or fully qualified.
        credential: Access token.

    Returns:
        URL of the form https://<token>@host/path

    Raises:
        ValueError: If the location has no host or a malformed authority
                    (bad port, unbalanced brackets, scp-style host:path).
    """
    parts = urlsplit(public_location(location))
    host, port = parts.hostname, parts.port
    if not host:
        raise ValueError("no host")
    if ":" in host:
        host = f"[{host}]"
    if port:
        host = f"{host}:{port}"
    netloc = f"{quote(credential, safe='')}@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def redact_location(location: str) -> str:
    """Loggable form of a repository location, with any userinfo replaced."""
    scheme, rest, userinfo = split_userinfo(location)
    if userinfo is None:
        return f"{scheme}://{rest}"
    return f"{scheme}://{REDACTED}@{rest}"


def sanitize(text: str, credential: Optional[str]) -> str:
    """Remove the raw and the URL-encoded credential from `text`."""
    if not credential or not text:
        return text
    for secret in {credential, quote(credential, safe="")}:
        text = text.replace(secret, REDACTED)
    return text


class RepositoryStager:
    """
    Clones repositories into workspaces.

    Why subprocess over gitpython:
    - No additional dependency
    - Same runner abstraction as the build engine, so tests fake both
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        default_credential: Optional[str] = None,
        git_binary: str = "git",
    ) -> None:
        """
        Args:
            runner: Command runner used to invoke git.
            default_credential: Token used when a request carries none.
                                Defaults to the GITHUB_PAT env var.
            git_binary: Name or path of the git executable.
        """
        self._runner = runner or SubprocessRunner()
        self._default_credential = default_credential or os.getenv("GITHUB_PAT")
        self._git = git_binary

    def stage(
        self, location: str, workspace: "Workspace", credential: Optional[str] = None
    ) -> "Workspace":
        """
        Clone `location` into `workspace`.

        Args:
            location: Repository URL or bare host/path.
            workspace: Empty workspace to clone into.
            credential: Access token; falls back to the configured default.

        Returns:
            The same workspace, now holding the repository contents.

        Raises:
            CredentialMissingError: If no token is available.
            StagingFailedError: If the location is malformed, git exits
                                non-zero or the remote cannot be scrubbed.
        """
        token = credential or self._default_credential
        if not token:
            console.print("[red][STAGER] No repository credential available[/red]")
            raise CredentialMissingError("GitHub token is required but not provided")

        public_url = sanitize(redact_location(location), token)
        try:
            clone_url = embed_credential(location, token)
        except ValueError as e:
            console.print(f"[red][STAGER] Invalid repository location: {public_url}[/red]")
            raise StagingFailedError(f"Invalid repository location: {public_url} ({e})") from e

        console.print(f"[cyan][STAGER] Cloning {redact_location(clone_url)}[/cyan]")

        # Never let git fall back to an interactive password prompt
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
        result = self._runner.run(
            [self._git, "clone", clone_url, str(workspace.path)], env=env
        )

        if not result.ok:
            diagnostic = sanitize(result.output, token)
            console.print(f"[red][STAGER] Clone failed (exit {result.exit_code})[/red]")
            raise StagingFailedError(f"git clone failed: {diagnostic}")

        self._scrub_remote(workspace, public_location(clone_url), token)
        console.print(f"[green][STAGER] Repository staged in {workspace.name}[/green]")
        return workspace

    def _scrub_remote(self, workspace: "Workspace", public_url: str, token: str) -> None:
        """Drop the token from .git/config, which `COPY . .` sends to the builder."""
        result = self._runner.run(
            [self._git, "remote", "set-url", "origin", public_url], cwd=workspace.path
        )
        if not result.ok:
            diagnostic = sanitize(result.output, token)
            console.print(f"[red][STAGER] Could not remove credential from remote (exit {result.exit_code})[/red]")
            raise StagingFailedError(f"git remote set-url failed: {diagnostic}")

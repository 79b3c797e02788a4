# -----------------------------------------------------------------------------
# DOCKER PROVIDER - BUILD ENGINES
# -----------------------------------------------------------------------------
# Responsibility: Wrap the image-build engine behind two operations:
# - probe(): lightweight daemon status check
# - build(): build the workspace into a tagged image
#
# Two engines share that contract:
# - DockerCliEngine: drives the `docker` executable (default)
# - DockerSdkEngine: talks to the daemon through the Docker SDK
#
# An engine never inspects the resulting image: exit status is authoritative.
# -----------------------------------------------------------------------------

from pathlib import Path
from typing import Callable, Optional, Protocol

import docker
from docker import DockerClient
from docker.errors import APIError, BuildError, DockerException
from rich.console import Console

from dockgen.domain.errors import BuildFailedError, EngineUnavailableError
from dockgen.infra.process import CommandRunner, SubprocessRunner

console = Console()

ENGINE_DOWN_MESSAGE = (
    "Docker daemon is not running. Start Docker Desktop or docker service first."
)


class BuildEngine(Protocol):
    """Capability the Build Driver needs from an image builder."""

    def probe(self) -> None:
        ...

    def build(self, context: Path, tag: str) -> None:
        ...


class DockerCliEngine:
    """
    Build engine driving the docker CLI through a CommandRunner.

    Both output streams are captured; a failed build reports stderr
    (where BuildKit writes its progress) or, failing that, stdout.
    """

    def __init__(self, runner: Optional[CommandRunner] = None, binary: str = "docker") -> None:
        self._runner = runner or SubprocessRunner()
        self._binary = binary

    def probe(self) -> None:
        """
        Raises:
            EngineUnavailableError: If `docker ps` fails.
        """
        result = self._runner.run([self._binary, "ps"])
        if not result.ok:
            console.print(f"[red][DOCKER] Engine probe failed: {result.output.strip()}[/red]")
            raise EngineUnavailableError(ENGINE_DOWN_MESSAGE)
        console.print("[green][DOCKER] Engine online[/green]")

    def build(self, context: Path, tag: str) -> None:
        """
        Raises:
            BuildFailedError: If `docker build` exits non-zero.
        """
        console.print(f"[cyan][DOCKER] Building {tag}...[/cyan]")
        result = self._runner.run([self._binary, "build", "-t", tag, "."], cwd=context)
        if not result.ok:
            console.print(f"[red][DOCKER] Build failed (exit {result.exit_code})[/red]")
            raise BuildFailedError(result.output)
        console.print(f"[green][DOCKER] Build succeeded: {tag}[/green]")


class DockerSdkEngine:
    """
    Build engine using the Docker SDK.

    Why this exists: hosts that expose the daemon over DOCKER_HOST
    (e.g. a socket proxy) without a docker CLI installed.
    """

    def __init__(self, client_factory: Callable[[], DockerClient] = docker.from_env) -> None:
        self._client_factory = client_factory
        self._client: DockerClient | None = None

    def _get_client(self) -> DockerClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def probe(self) -> None:
        """
        Raises:
            EngineUnavailableError: If the daemon cannot be reached.
        """
        try:
            self._get_client().ping()
        except DockerException as e:
            console.print(f"[red][DOCKER] Engine probe failed: {e}[/red]")
            raise EngineUnavailableError(ENGINE_DOWN_MESSAGE) from e
        console.print("[green][DOCKER] Engine online[/green]")

    def build(self, context: Path, tag: str) -> None:
        """
        Raises:
            BuildFailedError: If the daemon reports a build error.
        """
        console.print(f"[cyan][DOCKER] Building {tag} via SDK...[/cyan]")
        try:
            self._get_client().images.build(path=str(context), tag=tag, rm=True)
        except BuildError as e:
            output = _collect_build_log(e.build_log) or str(e)
            console.print("[red][DOCKER] Build failed[/red]")
            raise BuildFailedError(output) from e
        except APIError as e:
            console.print(f"[red][DOCKER] Daemon rejected build: {e}[/red]")
            raise BuildFailedError(str(e)) from e
        console.print(f"[green][DOCKER] Build succeeded: {tag}[/green]")


def _collect_build_log(build_log) -> str:
    """Flatten the SDK's streamed build log into plain text."""
    lines = []
    for chunk in build_log or []:
        if not isinstance(chunk, dict):
            continue
        text = chunk.get("stream") or chunk.get("error")
        if text:
            lines.append(text.rstrip("\n"))
    return "\n".join(lines)


def create_engine(backend: str, runner: Optional[CommandRunner] = None, binary: str = "docker") -> BuildEngine:
    """Pick the engine named by configuration ("cli" or "sdk")."""
    if backend == "sdk":
        return DockerSdkEngine()
    return DockerCliEngine(runner=runner, binary=binary)

# -----------------------------------------------------------------------------
# THE PIPELINE - REQUEST ORCHESTRATOR
# -----------------------------------------------------------------------------
# Responsibility: Run one request end to end.
# Connects: Workspace -> Stager -> Detector -> Generator -> Foundry
#
# Every request gets its own workspace, released on every exit path
# (success, stage failure, unexpected exception, cancellation). Stage
# failures become a structured PipelineResult; nothing is retried.
#
# Concurrency: pipelines share nothing but the staging root, so requests
# can run side by side. run_async() moves the blocking pipeline onto a
# worker thread so an event loop keeps serving while git/docker run.
# -----------------------------------------------------------------------------

import asyncio
from typing import Optional

from rich.console import Console

from dockgen.core.detector import detect
from dockgen.core.foundry import Foundry
from dockgen.core.generator import DockerfileGenerator
from dockgen.core.settings import DockgenSettings, load_settings
from dockgen.core.workspace import WorkspaceManager
from dockgen.domain.errors import CompletionError, DockgenError
from dockgen.domain.models import PipelineResult, StackVariant
from dockgen.infra.docker_client import BuildEngine, create_engine
from dockgen.infra.gemini_client import GeminiCompleter, TextCompleter
from dockgen.infra.git_client import RepositoryStager, redact_location, sanitize
from dockgen.infra.process import CommandRunner, SubprocessRunner

console = Console()


def build_completer(settings: DockgenSettings) -> Optional[TextCompleter]:
    """The configured text-generation backend, or None when it is not set up."""
    if not settings.assisted_generation_enabled:
        console.print("[yellow][PIPELINE] GEMINI_API_KEY not set - templates only[/yellow]")
        return None
    try:
        return GeminiCompleter(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            endpoint=settings.gemini_endpoint,
        )
    except CompletionError as e:
        console.print(f"[yellow][PIPELINE] Assisted generation disabled: {e}[/yellow]")
        return None


class Pipeline:
    """
    Wires the stages together for one request at a time.

    All collaborators are injectable; anything omitted is built from
    settings.
    """

    def __init__(
        self,
        settings: Optional[DockgenSettings] = None,
        runner: Optional[CommandRunner] = None,
        engine: Optional[BuildEngine] = None,
        completer: Optional[TextCompleter] = None,
        workspaces: Optional[WorkspaceManager] = None,
        use_completer: bool = True,
    ) -> None:
        """
        Args:
            settings: Configuration; loaded from file/env when omitted.
            runner: Command runner shared by git and the docker CLI engine.
            engine: Build engine; chosen from settings.build_backend when omitted.
            completer: Text-generation backend; built from settings when omitted.
            workspaces: Workspace manager; rooted at settings.staging_root when omitted.
            use_completer: False forces template-only generation.
        """
        self._settings = settings or load_settings()
        runner = runner or SubprocessRunner(timeout=self._settings.command_timeout)

        if completer is None and use_completer:
            completer = build_completer(self._settings)

        self._workspaces = workspaces or WorkspaceManager(self._settings.staging_root)
        self._stager = RepositoryStager(
            runner=runner,
            default_credential=self._settings.github_token,
            git_binary=self._settings.git_binary,
        )
        self._generator = DockerfileGenerator(
            completer=completer if use_completer else None,
            node_image=self._settings.node_image,
            nginx_image=self._settings.nginx_image,
        )
        self._foundry = Foundry(
            engine=engine
            or create_engine(self._settings.build_backend, runner=runner, binary=self._settings.docker_binary),
            image_tag=self._settings.image_tag,
        )

    def run(self, location: str, credential: Optional[str] = None, build: bool = True) -> PipelineResult:
        """
        Stage, detect, generate and (optionally) build one repository.

        Args:
            location: Repository URL or bare host/path.
            credential: Access token for the repository.
            build: False stops after generation (no validation or build).

        Returns:
            PipelineResult describing how far the request got.
        """
        secret = credential or self._settings.github_token

        stack: Optional[StackVariant] = None
        dockerfile: Optional[str] = None

        with self._workspaces.lease() as workspace:
            try:
                console.print(
                    f"[bold cyan][PIPELINE] New request: {sanitize(redact_location(location), secret)}[/bold cyan]"
                )
                self._stager.stage(location, workspace, credential)
                stack = detect(workspace.path)
                dockerfile = self._generator.generate(stack, workspace)
            except DockgenError as e:
                return self._failure(e.code, sanitize(e.diagnostic, secret), stack, dockerfile)

            if not build:
                console.print("[green][PIPELINE] Dockerfile generated (build skipped)[/green]")
                return PipelineResult(success=True, stack=stack, dockerfile=dockerfile)

            outcome = self._foundry.build(dockerfile, workspace, stack)

        if not outcome.success:
            return self._failure(
                outcome.error,
                sanitize(outcome.diagnostic or "", secret),
                stack,
                dockerfile,
                outcome.missing_paths,
            )

        console.print(f"[bold green][PIPELINE] Success: {stack.value} image built[/bold green]")
        return PipelineResult(success=True, stack=stack, dockerfile=dockerfile, built=True)

    async def run_async(
        self, location: str, credential: Optional[str] = None, build: bool = True
    ) -> PipelineResult:
        """run() on a worker thread, for use from an event loop."""
        return await asyncio.to_thread(self.run, location, credential, build)

    @staticmethod
    def _failure(
        code: Optional[str],
        diagnostic: str,
        stack: Optional[StackVariant],
        dockerfile: Optional[str],
        missing_paths: Optional[list[str]] = None,
    ) -> PipelineResult:
        console.print(f"[red][PIPELINE] Failed ({code}): {diagnostic[:200]}[/red]")
        return PipelineResult(
            success=False,
            stack=stack,
            dockerfile=dockerfile,
            error=code,
            diagnostic=diagnostic,
            missing_paths=list(missing_paths or []),
        )

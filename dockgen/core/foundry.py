# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# THE FOUNDRY - BUILD DRIVER
# -----------------------------------------------------------------------------
# Responsibility: Turn a Dockerfile and a staged workspace into an image, or
# into a precise reason why not.
#
# Sequence (each step aborts the rest on failure):
# 1. Next.js pre-check (framework dependency, build script, no standalone)
# 2. Base-image check: the Dockerfile must contain a FROM instruction
# 3. Persist Dockerfile and support files into the workspace
# 4. Validate COPY sources against the workspace
# 5. Probe the build engine
# 6. Build; a zero exit status is the only success criterion
#
# This is the "Body" of the pipeline. It has NO knowledge of AI/LLMs.
# -----------------------------------------------------------------------------

import re
from typing import Optional

from rich.console import Console

from dockgen.core.detector import MANIFEST_NAME, detect, read_manifest
from dockgen.core.support_files import write_support_files
from dockgen.core.validator import validate
from dockgen.core.workspace import Workspace
from dockgen.domain.errors import (
    DockgenError,
    FromInstructionMissingError,
    InvalidProjectConfigurationError,
    MissingFilesError,
)
from dockgen.domain.models import BuildOutcome, StackVariant
from dockgen.infra.docker_client import BuildEngine

console = Console()

DOCKERFILE_NAME = "Dockerfile"
DEFAULT_IMAGE_TAG = "app:latest"

FROM_PATTERN = re.compile(r"^\s*FROM\s+\S+", re.IGNORECASE | re.MULTILINE)
NEXT_CONFIG_FILES = ("next.config.js", "next.config.mjs", "next.config.ts")
STANDALONE_PATTERN = re.compile(r"""output\s*:\s*["'`]standalone["'`]""")


def has_from_instruction(dockerfile: str) -> bool:
    return bool(FROM_PATTERN.search(dockerfile))


def check_nextjs_project(workspace: Workspace) -> None:
    """
    Reject Next.js projects the templates cannot build.

    Raises:
        InvalidProjectConfigurationError: If package.json is missing, does
            not declare `next`, has no build script, or the Next.js config
            requests standalone output.
    """
    manifest = read_manifest(workspace.path)
    if manifest is None:
        raise InvalidProjectConfigurationError(f"{MANIFEST_NAME} not found")

    if not manifest.declares("next"):
        raise InvalidProjectConfigurationError(f"Next.js dependency not found in {MANIFEST_NAME}")

    if manifest.build_script is None:
        raise InvalidProjectConfigurationError(f"No build script found in {MANIFEST_NAME}")

    for name in NEXT_CONFIG_FILES:
        config_path = workspace.path / name
        if config_path.is_file():
            content = config_path.read_text(encoding="utf-8", errors="replace")
            if STANDALONE_PATTERN.search(content):
                raise InvalidProjectConfigurationError(
                    f"Standalone output mode ({name}) is not supported in this configuration"
                )


class Foundry:
    """
    The Build Driver: validates, persists and builds Dockerfiles.

    The engine is injected so tests can substitute a fake.
    """

    def __init__(self, engine: BuildEngine, image_tag: str = DEFAULT_IMAGE_TAG) -> None:
        self._engine = engine
        self._image_tag = image_tag

    def build(
        self, dockerfile: str, workspace: Workspace, stack: Optional[StackVariant] = None
    ) -> BuildOutcome:
        """
        Validate and build `dockerfile` in `workspace`.

        Args:
            dockerfile: Dockerfile text from the generator.
            workspace: Staged project used as build context.
            stack: Detected stack; detected again when not supplied.

        Returns:
            BuildOutcome.ok() or a failure tagged with the error code.
        """
        try:
            self._build(dockerfile, workspace, stack)
        except MissingFilesError as e:
            return BuildOutcome.failed(e.code, e.diagnostic, e.paths)
        except DockgenError as e:
            console.print(f"[red][FOUNDRY] {e.code}: {e.diagnostic[:200]}[/red]")
            return BuildOutcome.failed(e.code, e.diagnostic)
        return BuildOutcome.ok()

    def _build(self, dockerfile: str, workspace: Workspace, stack: Optional[StackVariant]) -> None:
        stack = stack or detect(workspace.path)

        if stack == StackVariant.NEXTJS:
            check_nextjs_project(workspace)

        if not has_from_instruction(dockerfile):
            raise FromInstructionMissingError("Invalid Dockerfile: missing FROM instruction")

        (workspace.path / DOCKERFILE_NAME).write_text(dockerfile, encoding="utf-8")
        console.print(f"[cyan][FOUNDRY] Dockerfile written to {workspace.name}[/cyan]")
        write_support_files(stack, workspace.path)

        validation = validate(dockerfile, workspace)
        if not validation.valid:
            raise MissingFilesError(validation.missing_paths)

        self._engine.probe()
        self._engine.build(workspace.path, self._image_tag)
        console.print(f"[green][FOUNDRY] Image ready: {self._image_tag}[/green]")

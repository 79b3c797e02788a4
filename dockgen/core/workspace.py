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
# WORKSPACE MANAGER - PER-REQUEST STAGING DIRECTORIES
# -----------------------------------------------------------------------------
# Responsibility: Create an isolated directory for each request and remove it
# afterwards, whatever happened in between.
#
# Isolation is the whole concurrency story: pipelines share no mutable state,
# only a staging root under which each one owns a uniquely named directory.
#
# Naming: <time_ns>-<8 hex>. A timestamp alone collides when two requests
# acquire within the same clock tick, so a random suffix is appended.
# -----------------------------------------------------------------------------

import shutil
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from rich.console import Console

from dockgen.core.package_manager import infer_package_manager
from dockgen.domain.models import PackageManagerInfo

console = Console()


@dataclass
class Workspace:
    """
    Handle to one request's staging directory.

    The package manager is inferred on first use and then reused, so every
    stage that reads it sees the same answer.
    """

    name: str
    path: Path
    _package_manager: PackageManagerInfo | None = field(default=None, repr=False, compare=False)

    @property
    def package_manager(self) -> PackageManagerInfo:
        if self._package_manager is None:
            self._package_manager = infer_package_manager(self.path)
        return self._package_manager

    def exists(self, relative: str) -> bool:
        return (self.path / relative).exists()


class WorkspaceManager:
    """
    Owns the lifecycle of workspaces under a staging root.

    Callers must pair every acquire() with release(); lease() does that
    for them.
    """

    def __init__(self, staging_root: Path) -> None:
        """
        Args:
            staging_root: Directory under which workspaces are created.
                          Created lazily on the first acquire().
        """
        self._root = Path(staging_root)

    @property
    def staging_root(self) -> Path:
        return self._root

    def acquire(self) -> Workspace:
        """
        Create a fresh, uniquely named workspace directory.

        Returns:
            The new Workspace handle.
        """
        self._root.mkdir(parents=True, exist_ok=True)
        name = f"{time.time_ns()}-{uuid.uuid4().hex[:8]}"
        path = self._root / name
        # exist_ok=False: a collision must fail loudly, never share a directory
        path.mkdir()
        console.print(f"[cyan][WORKSPACE] Acquired {name}[/cyan]")
        return Workspace(name=name, path=path)

    def release(self, workspace: Workspace) -> None:
        """
        Recursively remove a workspace. Failures are logged, never raised.
        """
        try:
            shutil.rmtree(workspace.path)
            console.print(f"[cyan][WORKSPACE] Released {workspace.name}[/cyan]")
        except FileNotFoundError:
            pass
        except OSError as e:
            console.print(f"[yellow][WORKSPACE] Cleanup failed for {workspace.name}: {e}[/yellow]")

    @contextmanager
    def lease(self) -> Iterator[Workspace]:
        """Acquire a workspace for the duration of a `with` block."""
        workspace = self.acquire()
        try:
            yield workspace
        finally:
            self.release(workspace)

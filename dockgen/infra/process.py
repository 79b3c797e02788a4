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
# PROCESS RUNNER - EXTERNAL COMMAND CAPABILITY
# -----------------------------------------------------------------------------
# Responsibility: The one place that launches external programs (git, docker).
# Everything above this layer talks to a CommandRunner, so tests substitute
# a fake and never need real tools installed.
#
# Contract: run(args) -> CommandResult(exit_code, stdout, stderr).
# The runner never raises for a failing command; callers decide what a
# non-zero exit means for their stage.
# -----------------------------------------------------------------------------

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence


# Conventional shell exit codes for "not found" and "timed out"
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


@dataclass
class CommandResult:
    """Captured result of one external command."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Best diagnostic text: the error stream, else standard output."""
        return self.stderr or self.stdout or "No error output"


class CommandRunner(Protocol):
    """Narrow capability for running an external program."""

    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        ...


class SubprocessRunner:
    """
    CommandRunner backed by subprocess.run.

    No timeout is applied unless one is configured: long clones and builds
    are legitimate, and callers that need a bound wrap the pipeline.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self._timeout = timeout

    def run(
        self,
        args: Sequence[str],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        argv = [str(a) for a in args]
        try:
            completed = subprocess.run(
                argv,
                cwd=cwd,
                env=dict(env) if env is not None else None,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError:
            return CommandResult(EXIT_NOT_FOUND, "", f"Command not found: {argv[0]}")
        except subprocess.TimeoutExpired as e:
            return CommandResult(
                EXIT_TIMEOUT,
                _as_text(e.stdout),
                f"{argv[0]} timed out after {self._timeout}s\n{_as_text(e.stderr)}".rstrip(),
            )

        return CommandResult(completed.returncode, completed.stdout or "", completed.stderr or "")


def _as_text(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data

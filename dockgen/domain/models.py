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
# DOMAIN MODELS - STACKS, PACKAGE MANAGERS, OUTCOMES
# -----------------------------------------------------------------------------
# These models are the vocabulary shared by every stage of the pipeline:
# the Detector produces a StackVariant, Inference produces PackageManagerInfo,
# the Validator produces a ValidationResult and the Build Driver a BuildOutcome.
#
# Closed enums keep template selection exhaustive: a stack the generator
# does not know about can only be one of the listed members.
# -----------------------------------------------------------------------------

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class StackVariant(str, Enum):
    """
    Technology stack classified from a project's manifest.

    Values are the human-readable names used in prompts, logs and
    API responses.
    """

    NEXTJS = "Next.js"
    REACT = "React"
    VUE = "Vue"
    ANGULAR = "Angular"
    EXPRESS = "Express.js"
    UNKNOWN = "Unknown"


class PackageManagerKind(str, Enum):
    """Dependency installation tool governing a project."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


LOCK_FILES: dict[PackageManagerKind, str] = {
    PackageManagerKind.NPM: "package-lock.json",
    PackageManagerKind.YARN: "yarn.lock",
    PackageManagerKind.PNPM: "pnpm-lock.yaml",
}

INSTALL_COMMANDS: dict[PackageManagerKind, str] = {
    PackageManagerKind.NPM: "npm ci",
    PackageManagerKind.YARN: "yarn install --frozen-lockfile",
    PackageManagerKind.PNPM: "pnpm install --frozen-lockfile",
}

# node images ship npm and yarn; pnpm has to be switched on through corepack
SETUP_COMMANDS: dict[PackageManagerKind, str] = {
    PackageManagerKind.PNPM: "corepack enable",
}


class PackageManagerInfo(BaseModel):
    """The inferred package manager together with the lock file it expects."""

    kind: PackageManagerKind
    lock_file: str

    class Config:
        frozen = True

    @classmethod
    def for_kind(cls, kind: PackageManagerKind) -> PackageManagerInfo:
        return cls(kind=kind, lock_file=LOCK_FILES[kind])

    @property
    def install_command(self) -> str:
        return INSTALL_COMMANDS[self.kind]

    @property
    def setup_command(self) -> str | None:
        return SETUP_COMMANDS.get(self.kind)


class PackageManifest(BaseModel):
    """
    The subset of package.json the pipeline reads.

    Only dependency names matter for classification, so version values
    are accepted as-is. Unknown keys are ignored.
    """

    dependencies: dict[str, Any] = Field(default_factory=dict)
    dev_dependencies: dict[str, Any] = Field(default_factory=dict, alias="devDependencies")
    scripts: dict[str, Any] = Field(default_factory=dict)

    class Config:
        populate_by_name = True
        extra = "ignore"

    def dependency_names(self) -> set[str]:
        """Merged names of direct and development dependencies."""
        return set(self.dependencies) | set(self.dev_dependencies)

    def declares(self, package: str) -> bool:
        return package in self.dependencies or package in self.dev_dependencies

    @property
    def build_script(self) -> str | None:
        script = self.scripts.get("build")
        if isinstance(script, str) and script.strip():
            return script
        return None


class ValidationResult(BaseModel):
    """Outcome of cross-checking COPY sources against the workspace."""

    valid: bool
    missing_paths: list[str] = Field(default_factory=list)

    @classmethod
    def from_missing(cls, missing_paths: list[str]) -> ValidationResult:
        return cls(valid=not missing_paths, missing_paths=list(missing_paths))


class BuildOutcome(BaseModel):
    """
    Tagged result of driving the image build.

    On failure `error` holds the taxonomy code (e.g. "MissingFiles") and
    `diagnostic` the human-readable reason.
    """

    success: bool
    error: str | None = None
    diagnostic: str | None = None
    missing_paths: list[str] = Field(default_factory=list)

    @classmethod
    def ok(cls) -> BuildOutcome:
        return cls(success=True)

    @classmethod
    def failed(cls, error: str, diagnostic: str, missing_paths: list[str] | None = None) -> BuildOutcome:
        return cls(
            success=False,
            error=error,
            diagnostic=diagnostic,
            missing_paths=list(missing_paths or []),
        )


class PipelineResult(BaseModel):
    """
    Everything a caller learns about one request.

    `dockerfile` and `stack` are filled in as far as the pipeline got;
    `built` is False when the build stage was skipped on request.
    """

    success: bool
    stack: StackVariant | None = None
    dockerfile: str | None = None
    built: bool = False
    error: str | None = None
    diagnostic: str | None = None
    missing_paths: list[str] = Field(default_factory=list)

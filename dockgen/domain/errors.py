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
# ERROR TAXONOMY
# -----------------------------------------------------------------------------
# Every stage-level failure is one of these. Each carries a diagnostic
# string that is safe to show to the caller: credentials are scrubbed
# before an error is constructed, never after.
#
# `code` is the stable name reported in BuildOutcome / PipelineResult.
# -----------------------------------------------------------------------------


class DockgenError(Exception):
    """Base class for all pipeline failures."""

    code = "DockgenError"

    def __init__(self, diagnostic: str) -> None:
        super().__init__(diagnostic)
        self.diagnostic = diagnostic


class CredentialMissingError(DockgenError):
    """Raised when no repository credential is supplied or configured."""

    code = "CredentialMissing"


class StagingFailedError(DockgenError):
    """Raised when the clone transport exits non-zero."""

    code = "StagingFailed"


class DetectionFailedError(DockgenError):
    """Raised when the manifest exists but cannot be parsed."""

    code = "DetectionFailed"


class UnsupportedStackError(DockgenError):
    """Raised when no Dockerfile strategy exists for a detected stack."""

    code = "UnsupportedStack"

    def __init__(self, stack: str) -> None:
        super().__init__(f"Unsupported tech stack: {stack}")
        self.stack = stack


class InvalidProjectConfigurationError(DockgenError):
    """Raised when a project fails its framework pre-check."""

    code = "InvalidProjectConfiguration"


class FromInstructionMissingError(DockgenError):
    """Raised when a Dockerfile has no base-image instruction."""

    code = "FromInstructionMissing"


class MissingFilesError(DockgenError):
    """Raised when COPY sources are absent from the workspace."""

    code = "MissingFiles"

    def __init__(self, paths: list[str]) -> None:
        super().__init__(f"Missing required files: {', '.join(paths)}")
        self.paths = list(paths)


class EngineUnavailableError(DockgenError):
    """Raised when the build engine does not answer its status probe."""

    code = "EngineUnavailable"


class BuildFailedError(DockgenError):
    """Raised when the image build exits non-zero."""

    code = "BuildFailed"

    def __init__(self, output: str) -> None:
        super().__init__(f"Docker build failed: {output}")
        self.output = output


class CompletionError(DockgenError):
    """
    Raised when the text-generation backend cannot produce a completion.

    Internal to the generator: it triggers the templated fallback and is
    never reported as a request outcome.
    """

    code = "CompletionFailed"

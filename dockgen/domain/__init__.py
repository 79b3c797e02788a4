# -----------------------------------------------------------------------------
# DOMAIN LAYER
# -----------------------------------------------------------------------------
# Contains the shared vocabulary (Pydantic models, enums) and the error
# taxonomy used by every stage of the Dockerfile pipeline.
# -----------------------------------------------------------------------------

from .errors import (
    BuildFailedError,
    CompletionError,
    CredentialMissingError,
    DetectionFailedError,
    DockgenError,
    EngineUnavailableError,
    FromInstructionMissingError,
    InvalidProjectConfigurationError,
    MissingFilesError,
    StagingFailedError,
    UnsupportedStackError,
)
from .models import (
    BuildOutcome,
    PackageManagerInfo,
    PackageManagerKind,
    PackageManifest,
    PipelineResult,
    StackVariant,
    ValidationResult,
)

__all__ = [
    "BuildOutcome", "PackageManagerInfo", "PackageManagerKind", "PackageManifest",
    "PipelineResult", "StackVariant", "ValidationResult",
    "DockgenError", "CredentialMissingError", "StagingFailedError",
    "DetectionFailedError", "UnsupportedStackError",
    "InvalidProjectConfigurationError", "FromInstructionMissingError",
    "MissingFilesError", "EngineUnavailableError", "BuildFailedError",
    "CompletionError",
]

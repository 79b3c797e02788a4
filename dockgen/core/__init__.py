# -----------------------------------------------------------------------------
# CORE LAYER
# -----------------------------------------------------------------------------
# The Dockerfile generation pipeline:
# - WorkspaceManager: per-request staging directories
# - detect / infer_package_manager: project classification
# - DockerfileGenerator: assisted + templated Dockerfile authoring
# - validate: COPY source checks against the workspace
# - Foundry: Build Driver
# - Pipeline: request orchestrator
# -----------------------------------------------------------------------------

from .detector import classify, detect
from .foundry import Foundry
from .generator import DockerfileGenerator
from .package_manager import infer_package_manager
from .pipeline import Pipeline
from .settings import DockgenSettings, load_settings
from .support_files import write_support_files
from .validator import validate
from .workspace import Workspace, WorkspaceManager

__all__ = [
    "classify", "detect",
    "Foundry",
    "DockerfileGenerator",
    "infer_package_manager",
    "Pipeline",
    "DockgenSettings", "load_settings",
    "write_support_files",
    "validate",
    "Workspace", "WorkspaceManager",
]

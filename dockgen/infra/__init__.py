# -----------------------------------------------------------------------------
# INFRASTRUCTURE LAYER
# -----------------------------------------------------------------------------
# Contains low-level wrappers around external collaborators:
# - SubprocessRunner: the external-command capability
# - RepositoryStager: git clone with token-in-URL authentication
# - DockerCliEngine / DockerSdkEngine: image build engines
# - GeminiCompleter: text-generation backend
# -----------------------------------------------------------------------------

from .docker_client import DockerCliEngine, DockerSdkEngine, create_engine
from .gemini_client import GeminiCompleter
from .git_client import RepositoryStager
from .process import CommandResult, SubprocessRunner

__all__ = [
    "CommandResult", "SubprocessRunner",
    "RepositoryStager",
    "DockerCliEngine", "DockerSdkEngine", "create_engine",
    "GeminiCompleter",
]

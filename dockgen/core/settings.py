# -----------------------------------------------------------------------------
# SETTINGS - PROCESS CONFIGURATION
# -----------------------------------------------------------------------------
# Responsibility: Load runtime configuration from an optional YAML file,
# then let environment variables override it.
#
# Precedence: defaults < dockgen.yaml < environment (.env is loaded into the
# environment by the entry points before this runs).
# -----------------------------------------------------------------------------

import os
import tempfile
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field
from rich.console import Console

console = Console()

PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_PATH = PROJECT_ROOT / "dockgen.yaml"

# Environment variable -> settings field
ENV_OVERRIDES = {
    "DOCKGEN_STAGING_ROOT": "staging_root",
    "DOCKGEN_IMAGE_TAG": "image_tag",
    "DOCKGEN_BUILD_BACKEND": "build_backend",
    "DOCKGEN_COMMAND_TIMEOUT": "command_timeout",
    "DOCKGEN_NODE_IMAGE": "node_image",
    "DOCKGEN_NGINX_IMAGE": "nginx_image",
    "GITHUB_PAT": "github_token",
    "GEMINI_API_KEY": "gemini_api_key",
    "GEMINI_MODEL": "gemini_model",
    "GEMINI_API_URL": "gemini_endpoint",
}


class DockgenSettings(BaseModel):
    """
    Validated runtime configuration.

    Secrets are kept out of repr so a logged settings object never
    shows a token.
    """

    staging_root: Path = Path(tempfile.gettempdir()) / "dockgen-workspaces"
    image_tag: str = "app:latest"
    node_image: str = "node:18-alpine"
    nginx_image: str = "nginx:alpine"
    build_backend: Literal["cli", "sdk"] = "cli"
    git_binary: str = "git"
    docker_binary: str = "docker"
    command_timeout: Optional[float] = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_endpoint: str = "https://generativelanguage.googleapis.com/v1beta"
    github_token: Optional[str] = Field(default=None, repr=False)
    gemini_api_key: Optional[str] = Field(default=None, repr=False)

    @property
    def assisted_generation_enabled(self) -> bool:
        return bool(self.gemini_api_key)


def load_settings(config_path: Optional[Path] = None) -> DockgenSettings:
    """
    Build settings from file and environment.

    Args:
        config_path: YAML file to read. Defaults to DOCKGEN_CONFIG or
                     dockgen.yaml at the project root; a missing file
                     means defaults.

    Returns:
        DockgenSettings with environment overrides applied.
    """
    path = config_path or Path(os.getenv("DOCKGEN_CONFIG", str(CONFIG_PATH)))
    data: dict = {}

    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        console.print(f"[cyan][SETTINGS] Loaded {path}[/cyan]")

    for env_var, field_name in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            data[field_name] = value

    return DockgenSettings(**data)

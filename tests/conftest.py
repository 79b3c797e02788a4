"""
Pytest configuration and fixtures for Dockgen tests.
"""

import json
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Tests never reach a real backend or read a developer's token
os.environ.pop("GEMINI_API_KEY", None)
os.environ.pop("GITHUB_PAT", None)

from dockgen.core.settings import DockgenSettings
from dockgen.core.workspace import Workspace, WorkspaceManager
from dockgen.infra.process import CommandResult


class FakeRunner:
    """
    CommandRunner double that records calls and replays canned results.

    Handlers are keyed by the first two argv words ("git clone",
    "docker ps", "docker build"); a handler is a CommandResult or a
    callable(args, cwd) returning one. Unknown commands succeed.
    """

    def __init__(self, handlers=None) -> None:
        self.calls: list[dict] = []
        self.handlers = dict(handlers or {})

    def run(self, args, cwd=None, env=None) -> CommandResult:
        argv = [str(a) for a in args]
        self.calls.append({"args": argv, "cwd": cwd, "env": env})
        handler = self.handlers.get(" ".join(argv[:2]))
        if callable(handler):
            return handler(argv, cwd)
        return handler or CommandResult(0, "", "")

    def commands(self) -> list[str]:
        return [" ".join(call["args"][:2]) for call in self.calls]


def write_project(root: Path, files: dict) -> Path:
    """Write {relative_path: content} into root; dict content is dumped as JSON."""
    for relative, content in files.items():
        path = root / relative
        if relative.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, dict):
            content = json.dumps(content)
        path.write_text(content)
    return root


def clone_into(files: dict):
    """git clone handler that materializes `files` in the destination."""

    def handler(args, cwd):
        write_project(Path(args[-1]), files)
        return CommandResult(0, "", "Cloning into 'repo'...")

    return handler


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def workspace(tmp_path):
    """An empty workspace directory."""
    path = tmp_path / "ws"
    path.mkdir()
    return Workspace(name="ws", path=path)


@pytest.fixture
def workspace_manager(tmp_path):
    return WorkspaceManager(tmp_path / "staging")


@pytest.fixture
def settings(tmp_path):
    """Template-only settings rooted in the test's temp directory."""
    return DockgenSettings(staging_root=tmp_path / "staging", github_token=None, gemini_api_key=None)


@pytest.fixture
def nextjs_manifest():
    return {
        "name": "web",
        "scripts": {"dev": "next dev", "build": "next build", "start": "next start"},
        "dependencies": {"next": "14.2.0", "react": "18.2.0", "react-dom": "18.2.0"},
    }


@pytest.fixture
def vite_manifest():
    return {
        "name": "spa",
        "scripts": {"dev": "vite", "build": "tsc && vite build"},
        "dependencies": {"react": "18.2.0", "react-dom": "18.2.0"},
        "devDependencies": {"vite": "5.0.0"},
    }


@pytest.fixture
def mock_docker_client():
    """Mock Docker SDK client for testing."""
    client = MagicMock()
    client.ping.return_value = True
    client.images.build.return_value = (MagicMock(), iter([]))
    return client

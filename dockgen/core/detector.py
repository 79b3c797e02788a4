# -----------------------------------------------------------------------------
# STACK DETECTOR
# -----------------------------------------------------------------------------
# Responsibility: Classify a staged project into a StackVariant from the
# dependency names declared in its package.json.
#
# classify() is a pure function over dependency names; detect() adds the
# filesystem: a missing manifest is a normal "Unknown", a malformed one
# is a DetectionFailedError.
# -----------------------------------------------------------------------------

import json
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError
from rich.console import Console

from dockgen.domain.errors import DetectionFailedError
from dockgen.domain.models import PackageManifest, StackVariant

console = Console()

MANIFEST_NAME = "package.json"

# Checked in order, first match wins. Next.js before React because every
# Next.js app also depends on react.
STACK_MARKERS: list[tuple[StackVariant, tuple[str, ...]]] = [
    (StackVariant.NEXTJS, ("next",)),
    (StackVariant.REACT, ("react",)),
    (StackVariant.VUE, ("vue",)),
    (StackVariant.ANGULAR, ("@angular/core", "angular")),
    (StackVariant.EXPRESS, ("express",)),
]


def classify(dependency_names: Iterable[str]) -> StackVariant:
    """
    Map a set of dependency names to a StackVariant.

    Args:
        dependency_names: Merged dependency and devDependency names.

    Returns:
        The first matching variant, or StackVariant.UNKNOWN.
    """
    names = set(dependency_names)
    for variant, markers in STACK_MARKERS:
        if any(marker in names for marker in markers):
            return variant
    return StackVariant.UNKNOWN


def read_manifest(root: Path) -> Optional[PackageManifest]:
    """
    Parse package.json at `root`.

    Returns:
        The manifest, or None if the file does not exist.

    Raises:
        DetectionFailedError: If the file is not a valid JSON manifest.
    """
    path = root / MANIFEST_NAME
    if not path.is_file():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DetectionFailedError(f"Failed to detect tech stack: invalid {MANIFEST_NAME}: {e}") from e

    if not isinstance(data, dict):
        raise DetectionFailedError(f"Failed to detect tech stack: {MANIFEST_NAME} is not an object")

    try:
        return PackageManifest(**data)
    except ValidationError as e:
        raise DetectionFailedError(f"Failed to detect tech stack: malformed {MANIFEST_NAME}: {e}") from e


def detect(root: Path) -> StackVariant:
    """
    Classify the project staged at `root`.

    Raises:
        DetectionFailedError: If the manifest exists but is malformed.
    """
    manifest = read_manifest(root)
    if manifest is None:
        console.print(f"[yellow][DETECTOR] No {MANIFEST_NAME} found - stack Unknown[/yellow]")
        return StackVariant.UNKNOWN

    stack = classify(manifest.dependency_names())
    console.print(f"[green][DETECTOR] Detected stack: {stack.value}[/green]")
    return stack

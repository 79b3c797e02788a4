# -----------------------------------------------------------------------------
# THE VALIDATOR - COPY SOURCE CHECKS
# -----------------------------------------------------------------------------
# Responsibility: Statically check that every file a Dockerfile copies from
# the build context exists in the workspace, before the engine is invoked.
#
# Rules per COPY source:
# - stage-to-stage copies (--from=) are not checked
# - wildcards are not checked
# - the nginx.conf written by the support-file writer is trusted
# - a lock-file reference is checked only if it is the lock file of the
#   workspace's inferred package manager
# - anything else must exist under the workspace root
#
# All missing sources are reported, not just the first.
# -----------------------------------------------------------------------------

import json
import posixpath
import re
from pathlib import Path
from typing import Iterator, Optional

from rich.console import Console

from dockgen.core.package_manager import is_lock_file
from dockgen.core.support_files import NGINX_CONF_NAME
from dockgen.core.workspace import Workspace
from dockgen.domain.models import ValidationResult

console = Console()

INSTRUCTION_PATTERN = re.compile(r"^\s*([A-Za-z]+)\s+(.*)$", re.DOTALL)
WILDCARD_CHARS = ("*", "?", "[")


def iter_instructions(dockerfile: str) -> Iterator[tuple[str, str]]:
    """
    Yield (KEYWORD, arguments) pairs, joining backslash continuations.

    Comment lines are skipped, including those inside a continuation.
    """
    pending = ""
    for raw in dockerfile.splitlines():
        line = raw.strip()
        if not pending and (not line or line.startswith("#")):
            continue
        if pending and line.startswith("#"):
            continue
        if line.endswith("\\"):
            pending += line[:-1] + " "
            continue
        pending += line
        match = INSTRUCTION_PATTERN.match(pending)
        if match:
            yield match.group(1).upper(), match.group(2).strip()
        pending = ""

    if pending:
        match = INSTRUCTION_PATTERN.match(pending)
        if match:
            yield match.group(1).upper(), match.group(2).strip()


def copy_sources(arguments: str) -> Optional[list[str]]:
    """
    Extract the build-context sources of one COPY instruction.

    Returns:
        Source paths (every operand but the destination), or None for a
        stage-to-stage copy.
    """
    tokens = arguments.split()
    flags = [t for t in tokens if t.startswith("--")]
    if any(flag.startswith("--from") for flag in flags):
        return None

    operands_text = " ".join(t for t in tokens if not t.startswith("--"))
    if operands_text.startswith("["):
        try:
            operands = [str(o) for o in json.loads(operands_text)]
        except ValueError:
            operands = operands_text.split()
    else:
        operands = operands_text.split()

    # heredoc sources are inline content, not files
    return [o for o in operands[:-1] if not o.startswith("<<")]


def _normalize(source: str) -> str:
    return posixpath.normpath(source.lstrip("/")) if source.strip("/") else "."


def _exists_in(root: Path, source: str) -> bool:
    """True if `source` resolves to an existing path inside `root`."""
    base = root.resolve()
    target = (base / _normalize(source)).resolve()
    try:
        target.relative_to(base)
    except ValueError:
        return False
    return target.exists()


def validate(dockerfile: str, workspace: Workspace) -> ValidationResult:
    """
    Cross-check COPY sources in `dockerfile` against `workspace`.

    Args:
        dockerfile: Dockerfile text.
        workspace: Staged project the Dockerfile will be built from.

    Returns:
        ValidationResult listing every missing source, in order.
    """
    expected_lock = workspace.package_manager.lock_file
    missing: list[str] = []

    for keyword, arguments in iter_instructions(dockerfile):
        if keyword != "COPY":
            continue
        sources = copy_sources(arguments)
        if sources is None:
            continue

        for source in sources:
            if any(char in source for char in WILDCARD_CHARS):
                continue
            name = _normalize(source)
            if name == NGINX_CONF_NAME:
                continue
            if is_lock_file(name):
                # Another manager's lock file is not an error
                if name == expected_lock and not _exists_in(workspace.path, name):
                    missing.append(name)
                continue
            if not _exists_in(workspace.path, source):
                missing.append(source)

    if missing:
        console.print(f"[red][VALIDATOR] Missing files: {', '.join(missing)}[/red]")
    else:
        console.print("[green][VALIDATOR] All COPY sources present[/green]")
    return ValidationResult.from_missing(missing)

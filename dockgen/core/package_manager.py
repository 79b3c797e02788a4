# -----------------------------------------------------------------------------
# PACKAGE-MANAGER INFERENCE
# -----------------------------------------------------------------------------
# Responsibility: Decide which dependency tool governs a staged project by
# looking for lock files in a fixed priority order.
#
# Pure function of the directory contents. The Workspace caches the answer
# so the Generator and the Validator always agree on the expected lock file.
# -----------------------------------------------------------------------------

from pathlib import Path

from dockgen.domain.models import LOCK_FILES, PackageManagerInfo, PackageManagerKind

# Strict-workspace lock first, then the classic lock; npm when neither exists
INFERENCE_ORDER = (PackageManagerKind.PNPM, PackageManagerKind.YARN)
DEFAULT_KIND = PackageManagerKind.NPM

KNOWN_LOCK_FILES = frozenset(LOCK_FILES.values())


def infer_package_manager(root: Path) -> PackageManagerInfo:
    """
    Infer the package manager of the project rooted at `root`.

    Args:
        root: Workspace directory containing the project.

    Returns:
        PackageManagerInfo naming the manager and its canonical lock file.
    """
    for kind in INFERENCE_ORDER:
        if (root / LOCK_FILES[kind]).is_file():
            return PackageManagerInfo.for_kind(kind)
    return PackageManagerInfo.for_kind(DEFAULT_KIND)


def is_lock_file(name: str) -> bool:
    """True if `name` is the lock file of any recognized manager."""
    return name in KNOWN_LOCK_FILES

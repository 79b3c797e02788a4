# -----------------------------------------------------------------------------
# SUPPORT FILES - AUXILIARY BUILD-CONTEXT FILES
# -----------------------------------------------------------------------------
# Responsibility: Write the files a generated Dockerfile copies in but the
# repository does not ship, e.g. the nginx config of a static React build.
#
# Runs before validation: the Validator trusts these files to exist.
# -----------------------------------------------------------------------------

from pathlib import Path

from rich.console import Console

from dockgen.domain.models import StackVariant

console = Console()

NGINX_CONF_NAME = "nginx.conf"

NGINX_CONF = """server {
    listen 80;
    server_name _;

    location / {
        root /usr/share/nginx/html;
        try_files $uri $uri/ /index.html;
        index index.html;
    }
}
"""

# Stacks whose final stage is a static file server
SUPPORT_FILES: dict[StackVariant, dict[str, str]] = {
    StackVariant.REACT: {NGINX_CONF_NAME: NGINX_CONF},
}


def write_support_files(stack: StackVariant, root: Path) -> list[Path]:
    """
    Write the auxiliary files `stack` needs into the workspace at `root`.

    Server-hosted stacks (Next.js) need none; this is then a no-op.

    Returns:
        Paths written, in order.
    """
    written = []
    for name, content in SUPPORT_FILES.get(stack, {}).items():
        path = root / name
        path.write_text(content, encoding="utf-8")
        written.append(path)
        console.print(f"[cyan][SUPPORT] Wrote {name}[/cyan]")
    return written

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
# THE GENERATOR - DOCKERFILE AUTHORING
# -----------------------------------------------------------------------------
# Responsibility: Produce Dockerfile text for a detected stack.
#
# Strategies, tried in order:
# 1. Assisted: if a text-generation backend is configured, send a fixed
#    prompt naming the stack and return the completion verbatim. A
#    successful, non-empty completion is trusted as-is; its correctness is
#    the backend's responsibility.
# 2. Templated: a deterministic two-stage template per stack, parameterized
#    by the workspace's package manager (and, for React, its build output).
#
# Only Next.js and React are generatable. Vue, Angular and Express.js are
# detected but have no strategy yet.
# -----------------------------------------------------------------------------

from typing import Optional

from rich.console import Console

from dockgen.core.detector import read_manifest
from dockgen.core.support_files import NGINX_CONF_NAME
from dockgen.core.workspace import Workspace
from dockgen.domain.errors import CompletionError, UnsupportedStackError
from dockgen.domain.models import PackageManagerInfo, PackageManifest, StackVariant
from dockgen.infra.gemini_client import TextCompleter

console = Console()

SUPPORTED_STACKS = (StackVariant.NEXTJS, StackVariant.REACT)

DEFAULT_NODE_IMAGE = "node:18-alpine"
DEFAULT_NGINX_IMAGE = "nginx:alpine"

ASSISTED_PROMPT = """You are an expert DevOps engineer. Generate a production-ready Dockerfile for a {stack} application. Requirements:
- Use multi-stage builds to minimize image size
- For React SPAs, use nginx to serve the built files
- For Next.js, run the app with `next start` from the regular .next build output (not standalone)
- Include only necessary files in each stage
- Set proper permissions and non-root user
- No volumes or host path mounts
- Respond ONLY with the Dockerfile content, no explanation or markdown or backticks."""

NEXTJS_TEMPLATE = """# Build stage
FROM {node_image} AS builder
WORKDIR /app

# Install dependencies
COPY package.json {lock_file} ./
{setup}RUN {install}

# Copy source files
COPY . .

# Build application
RUN mkdir -p public
RUN {manager} run build

# Production stage
FROM {node_image} AS runner
WORKDIR /app

ENV NODE_ENV=production
ENV NEXT_TELEMETRY_DISABLED=1

# Create non-root user
RUN addgroup --system --gid 1001 nodejs && \\
    adduser --system --uid 1001 nextjs

# Copy built files
COPY --from=builder --chown=nextjs:nodejs /app/.next ./.next
COPY --from=builder /app/public ./public
COPY --from=builder /app/package.json ./
COPY --from=builder /app/node_modules ./node_modules

USER nextjs
EXPOSE 3000
CMD ["npm", "start"]
"""

REACT_TEMPLATE = """# Build stage
FROM {node_image} AS builder
WORKDIR /app

# Install dependencies
COPY package.json {lock_file} ./
{setup}RUN {install}

# Copy source files and build
COPY . .
RUN {manager} run build

# Production stage
FROM {nginx_image} AS production
WORKDIR /usr/share/nginx/html

# Remove default nginx static assets
RUN rm -rf ./*

# Copy build output from builder stage
COPY --from=builder /app/{build_dir} .

# Copy nginx configuration
COPY {nginx_conf} /etc/nginx/conf.d/default.conf

EXPOSE 80
CMD ["nginx", "-g", "daemon off;"]
"""


def build_output_dir(manifest: Optional[PackageManifest]) -> str:
    """`dist` for Vite builds, `build` otherwise (create-react-app)."""
    script = manifest.build_script if manifest else None
    if script and "vite" in script:
        return "dist"
    return "build"


def build_prompt(stack: StackVariant) -> str:
    return ASSISTED_PROMPT.format(stack=stack.value)


def _manager_fields(package_manager: PackageManagerInfo) -> dict:
    setup = package_manager.setup_command
    return {
        "lock_file": package_manager.lock_file,
        "install": package_manager.install_command,
        "manager": package_manager.kind.value,
        "setup": f"RUN {setup}\n" if setup else "",
    }


class DockerfileGenerator:
    """
    Produces Dockerfile text for supported stacks.

    The completer is optional: without one, only templates are used.
    """

    def __init__(
        self,
        completer: Optional[TextCompleter] = None,
        node_image: str = DEFAULT_NODE_IMAGE,
        nginx_image: str = DEFAULT_NGINX_IMAGE,
    ) -> None:
        self._completer = completer
        self._node_image = node_image
        self._nginx_image = nginx_image

    def generate(self, stack: StackVariant, workspace: Workspace) -> str:
        """
        Generate a Dockerfile for `stack`.

        Args:
            stack: Detected stack of the workspace.
            workspace: Staged project (read for package manager and scripts).

        Returns:
            Dockerfile text.

        Raises:
            UnsupportedStackError: If `stack` has no generation strategy.
        """
        if stack not in SUPPORTED_STACKS:
            console.print(f"[red][GENERATOR] No strategy for stack: {stack.value}[/red]")
            raise UnsupportedStackError(stack.value)

        if self._completer is not None:
            dockerfile = self._generate_assisted(stack)
            if dockerfile:
                return dockerfile

        console.print(f"[cyan][GENERATOR] Using template for {stack.value}[/cyan]")
        return self.render_template(stack, workspace)

    def _generate_assisted(self, stack: StackVariant) -> Optional[str]:
        """Ask the backend; None means fall back to the template."""
        console.print(f"[cyan][GENERATOR] Requesting assisted Dockerfile for {stack.value}...[/cyan]")
        try:
            text = self._completer.complete(build_prompt(stack))
        except CompletionError as e:
            console.print(f"[yellow][GENERATOR] Assisted generation failed, falling back: {e}[/yellow]")
            return None

        if not text or not text.strip():
            console.print("[yellow][GENERATOR] Assisted generation returned nothing, falling back[/yellow]")
            return None

        console.print("[green][GENERATOR] Using assisted Dockerfile[/green]")
        return text

    def render_template(self, stack: StackVariant, workspace: Workspace) -> str:
        """
        Render the deterministic template for `stack`.

        Raises:
            UnsupportedStackError: If `stack` has no template.
        """
        fields = _manager_fields(workspace.package_manager)

        if stack == StackVariant.NEXTJS:
            return NEXTJS_TEMPLATE.format(node_image=self._node_image, **fields)

        if stack == StackVariant.REACT:
            return REACT_TEMPLATE.format(
                node_image=self._node_image,
                nginx_image=self._nginx_image,
                build_dir=build_output_dir(read_manifest(workspace.path)),
                nginx_conf=NGINX_CONF_NAME,
                **fields,
            )

        raise UnsupportedStackError(stack.value)

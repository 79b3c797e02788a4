# -----------------------------------------------------------------------------
# DOCKGEN - COMMAND LINE
# -----------------------------------------------------------------------------
# Usage:
#   dockgen <repository> [--token TOKEN] [--no-build] [--no-ai] [--output FILE]
#
# Exit status: 0 on success, 1 on any pipeline failure.
# -----------------------------------------------------------------------------

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from dockgen.core.pipeline import Pipeline
from dockgen.core.settings import load_settings

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dockgen",
        description="Generate, validate and build a Dockerfile for a repository",
    )
    parser.add_argument("repository", help="Repository URL or host/path (e.g. github.com/org/app)")
    parser.add_argument("--token", help="Access token (defaults to GITHUB_PAT)")
    parser.add_argument("--no-build", action="store_true", help="Stop after generating the Dockerfile")
    parser.add_argument("--no-ai", action="store_true", help="Use templates only")
    parser.add_argument("--output", type=Path, help="Write the Dockerfile to this file")
    parser.add_argument("--config", type=Path, help="Path to a dockgen.yaml")
    return parser


def main(argv: Optional[Sequence[str]] = None, pipeline: Optional[Pipeline] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    if pipeline is None:
        settings = load_settings(args.config)
        pipeline = Pipeline(settings=settings, use_completer=not args.no_ai)

    result = pipeline.run(args.repository, args.token, build=not args.no_build)

    if result.dockerfile:
        console.print(
            Panel(
                Syntax(result.dockerfile, "docker", theme="ansi_dark"),
                title=f"Dockerfile ({result.stack.value if result.stack else 'unknown'})",
                border_style="cyan",
            )
        )
        if args.output:
            args.output.write_text(result.dockerfile, encoding="utf-8")
            console.print(f"[green]Dockerfile saved to {args.output}[/green]")

    if not result.success:
        console.print(
            Panel(
                f"[bold red]{result.error}[/bold red]\n\n{result.diagnostic}",
                title="BUILD FAILED",
                border_style="red",
            )
        )
        return 1

    status = "Image built" if result.built else "Dockerfile generated"
    console.print(f"[bold green]{status}.[/bold green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())

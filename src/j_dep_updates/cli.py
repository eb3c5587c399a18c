"""Typer CLI entry point for J-Dep Updates."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from j_dep_updates.config import DisplayConfig
from j_dep_updates.exceptions import JDepError
from j_dep_updates.parser import parse_pom
from j_dep_updates.scanner import find_pom_files
from j_dep_updates.updates import build_resolver, display_dependency_updates, reconcile_project
from j_dep_updates.visualize import build_dependency_tree

app = typer.Typer(add_completion=False, help="Show which Maven dependencies have newer versions.")
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "WARNING") -> None:
    """Configure the root logger once, writing to stderr through Rich."""
    level = getattr(logging, log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    logging.getLogger().setLevel(level)


def _emit(lines: list[str], output_file: Path | None) -> None:
    for line in lines:
        console.print(line, markup=False, highlight=False, soft_wrap=True)
    if output_file is not None and lines:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with output_file.open("a", encoding="utf-8") as fh:
            fh.write("\n".join(lines) + "\n")


@app.command()
def check(
    path: Annotated[
        Path,
        typer.Argument(help="A pom.xml, or a folder scanned for pom.xml files (multi-module)."),
    ],
    includes: Annotated[
        Optional[str],
        typer.Option("--includes", help="Comma separated include patterns (wins over --include)."),
    ] = None,
    excludes: Annotated[
        Optional[str],
        typer.Option("--excludes", help="Comma separated exclude patterns (wins over --exclude)."),
    ] = None,
    include: Annotated[
        Optional[list[str]],
        typer.Option("--include", help="Include pattern groupId:artifactId:type:classifier:version."),
    ] = None,
    exclude: Annotated[
        Optional[list[str]],
        typer.Option("--exclude", help="Exclude pattern groupId:artifactId:type:classifier:version."),
    ] = None,
    dependency_management: Annotated[
        bool,
        typer.Option(
            "--dependency-management/--no-dependency-management",
            envvar="JDEP_PROCESS_DEPENDENCY_MANAGEMENT",
            help="Process the dependencyManagement section.",
        ),
    ] = True,
    dependencies: Annotated[
        bool,
        typer.Option(
            "--dependencies/--no-dependencies",
            envvar="JDEP_PROCESS_DEPENDENCIES",
            help="Process the dependencies section.",
        ),
    ] = True,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            envvar="JDEP_VERBOSE",
            help="Also list dependencies using the newest version.",
        ),
    ] = False,
    allow_snapshots: Annotated[
        bool,
        typer.Option(
            "--allow-snapshots",
            envvar="JDEP_ALLOW_SNAPSHOTS",
            help="Consider snapshot versions as updates.",
        ),
    ] = False,
    scope: Annotated[
        Optional[str],
        typer.Option(
            "--scope", help="How far updates may reach: any, major, minor, incremental, subincremental."
        ),
    ] = None,
    repository: Annotated[
        Optional[list[str]],
        typer.Option("--repository", "-r", help="Repository URL (repeatable)."),
    ] = None,
    offline: Annotated[
        bool,
        typer.Option(
            "--offline", envvar="JDEP_OFFLINE", help="Read versions from the local repository only."
        ),
    ] = False,
    output_file: Annotated[
        Optional[Path],
        typer.Option("--output-file", "-o", help="Also append the report to this file."),
    ] = None,
    log_level: Annotated[str, typer.Option("--log-level", help="Logging level.")] = "WARNING",
) -> None:
    """Display the dependencies that have newer versions available."""
    setup_logging(log_level)
    try:
        config = DisplayConfig.from_env().with_overrides(
            includes_list=includes,
            excludes_list=excludes,
            includes=list(include) if include else None,
            excludes=list(exclude) if exclude else None,
            process_dependency_management=dependency_management,
            process_dependencies=dependencies,
            verbose=verbose,
            allow_snapshots=allow_snapshots,
            update_scope=scope.strip().lower() if scope else None,
            repositories=list(repository) if repository else None,
            offline=offline,
            output_file=output_file,
        )
        config.validate()

        pom_files = find_pom_files(path)
        if not pom_files:
            console.print("[bold red]Error:[/bold red] No POM files found.")
            raise typer.Exit(code=1)

        resolver = build_resolver(config)
        for pom in pom_files:
            logger.info("Checking %s", pom)
            project = parse_pom(pom)
            _emit(display_dependency_updates(project, config, resolver), config.output_file)
    except typer.Exit:
        raise
    except (JDepError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False, soft_wrap=True)
        raise typer.Exit(code=1) from None


@app.command()
def inspect(
    pom: Annotated[Path, typer.Argument(help="Path to a Maven pom.xml file.")],
    includes: Annotated[
        Optional[str], typer.Option("--includes", help="Comma separated include patterns.")
    ] = None,
    excludes: Annotated[
        Optional[str], typer.Option("--excludes", help="Comma separated exclude patterns.")
    ] = None,
    show_path: Annotated[bool, typer.Option("--show-path", help="Show the pom path header.")] = True,
) -> None:
    """Show which dependencies an update check would look at, without contacting a repository."""
    try:
        config = DisplayConfig.from_env().with_overrides(includes_list=includes, excludes_list=excludes)
        model = parse_pom(pom)
        management, deps = reconcile_project(model, config)
        if show_path:
            console.print(f"[dim]{pom}[/dim]")
        console.print(build_dependency_tree(model, management, deps))
    except (JDepError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False, soft_wrap=True)
        raise typer.Exit(code=1) from None


def main() -> None:
    """Console-script entry point."""
    app()

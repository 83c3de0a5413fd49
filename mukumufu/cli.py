#!/usr/bin/env python3
"""
Dependency inference for C/C++ projects.

Scans the source tree for #include directives, follows them from the entry
file and writes make dependency rules or a DOT graph.

Usage:
    mukumufu makefile              # writes Makefile.inc.txt
    mukumufu --root app makefile -n
    mukumufu dot --collapse > deps.dot
"""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from mukumufu.config import ProjectConfig
from mukumufu.console import Console
from mukumufu.dot import render_dot
from mukumufu.errors import MukumufuError
from mukumufu.makefile import render_makefile
from mukumufu.report import DependencyReport, build_report
from mukumufu.sources import SourceIndex

logger = logging.getLogger(__name__)


def load_config(
    project_root: Path,
    config_file: Path | None = None,
    source_dir: str | None = None,
    root_name: str | None = None,
) -> ProjectConfig:
    """Read the project configuration and apply command line overrides."""
    if config_file is not None:
        config = ProjectConfig.load_from_file(config_file)
    else:
        config = ProjectConfig.find_project_config(project_root) or ProjectConfig(
            project_root=project_root.resolve()
        )

    overrides = {}
    if source_dir:
        overrides["source_dir"] = source_dir
    if root_name:
        overrides["root_name"] = root_name
    return config.model_copy(update=overrides)


def fail(message: str):
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def compute_report(config: ProjectConfig) -> DependencyReport:
    try:
        index = SourceIndex.from_config(config)
        return build_report(index, config.root_name)
    except (MukumufuError, OSError) as e:
        fail(str(e))


def emit(text: str, output: Path | None):
    if output is None:
        click.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text)
    logger.info(f"Wrote {output}")


@click.group()
@click.option(
    "--project-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project directory (paths in the output are relative to it)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (default: nearest mukumufu_config.json)",
)
@click.option("--source-dir", help="Directory to scan, relative to the project root")
@click.option("--root", "root_name", help="Entry file: path, file name or module name")
@click.option("-v", "--verbose", count=True, help="Log progress (-vv for debug output)")
@click.pass_context
def cli(
    ctx: click.Context,
    project_root: Path,
    config_file: Path | None,
    source_dir: str | None,
    root_name: str | None,
    verbose: int,
):
    """Infer C/C++ build dependencies from #include directives."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        ctx.obj = load_config(project_root, config_file, source_dir, root_name)
    except (ValidationError, ValueError) as e:
        fail(f"invalid configuration: {e}")


@cli.command()
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: output_file from the configuration)",
)
@click.option("-n", "--stdout", "to_stdout", is_flag=True, help="Print instead of writing a file")
@click.pass_obj
def makefile(config: ProjectConfig, output: Path | None, to_stdout: bool):
    """Write the OBJS list and dependency rules for make."""
    text = render_makefile(compute_report(config))
    emit(text, None if to_stdout else output or config.output_path())


@cli.command()
@click.option("--collapse", is_flag=True, help="Replace headers by their implementation files")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: standard output)",
)
@click.pass_obj
def dot(config: ProjectConfig, collapse: bool, output: Path | None):
    """Print the dependency graph in Graphviz DOT format."""
    emit(render_dot(compute_report(config), collapse=collapse), output)


@cli.command()
@click.pass_obj
def show(config: ProjectConfig):
    """Summarize the files reachable from the entry file."""
    Console().show_report(compute_report(config))


if __name__ == "__main__":
    cli()

"""Click-based CLI interface for dcgate."""

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import click

from dcgate.config import load_config, validate_pattern
from dcgate.exceptions import ConfigError, ThresholdsExceededError
from dcgate.gate import Outcome
from dcgate.parser import parse_report_file
from dcgate.publisher import Publisher
from dcgate.report import render_findings, render_json, render_table
from dcgate.result import BuildResult

logger = logging.getLogger(__name__)

EXIT_CODES = {
    Outcome.SUCCESS: 0,
    Outcome.FAILURE: 1,
    Outcome.UNSTABLE: 2,
}


def _emit(published, fmt):
    if fmt == "json":
        click.echo(render_json(published))
    else:
        render_table(published)


def _save_result(published, output, fmt):
    if not output or published.result is None:
        return
    published.result.save(output)
    if fmt != "json":
        click.echo(f"Build result written to {output}")


@click.group()
@click.version_option(package_name="dcgate")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose):
    """dcgate - Dependency-Check report risk gate."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command()
@click.argument("workspace", type=click.Path(exists=True, file_okay=False))
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Path to .dcgate.yml config file.")
@click.option("--pattern", type=str, default=None, help="Glob selecting report files.")
@click.option("--build-number", type=int, default=0, help="Number of the build being evaluated.")
@click.option("--previous", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Result JSON of the previous build.")
@click.option("--output", "-o", type=str, default=None, help="Write the build result JSON to file.")
@click.option("--format", "fmt", type=click.Choice(["table", "json"]), default="table")
@click.option("--stop-build", is_flag=True, help="Abort with an error when the build fails.")
@click.option("--exit-code", is_flag=True, help="Exit 1 on FAILURE and 2 on UNSTABLE.")
def publish(workspace, config_path, pattern, build_number, previous, output, fmt, stop_build, exit_code):
    """Aggregate Dependency-Check reports in WORKSPACE and evaluate thresholds."""
    try:
        config = load_config(config_path=config_path, project_root=workspace)
    except (ConfigError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc

    if pattern is not None:
        try:
            config = replace(config, pattern=validate_pattern(pattern))
        except ConfigError as exc:
            raise click.ClickException(str(exc)) from exc
    if stop_build:
        config = replace(config, stop_build=True)

    previous_result = None
    if previous:
        try:
            previous_result = BuildResult.load(previous)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable previous result %s: %s", previous, exc)

    try:
        published = Publisher(config).publish(workspace, build_number, previous=previous_result)
    except ThresholdsExceededError as exc:
        _save_result(exc.outcome, output, fmt)
        _emit(exc.outcome, fmt)
        click.echo(str(exc), err=True)
        sys.exit(1)

    _save_result(published, output, fmt)

    _emit(published, fmt)

    if exit_code:
        sys.exit(EXIT_CODES[published.outcome])


@cli.command()
@click.argument("report", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "fmt", type=click.Choice(["table", "json"]), default="table")
def parse(report, fmt):
    """Print the findings of a single Dependency-Check REPORT."""
    parsed = parse_report_file(Path(report))
    if not parsed.ok:
        raise click.ClickException(parsed.error)

    if fmt == "json":
        click.echo(json.dumps([f.to_dict() for f in parsed.findings], indent=2))
    else:
        render_findings(parsed.findings)

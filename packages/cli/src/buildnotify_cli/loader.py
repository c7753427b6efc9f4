"""Build document loading for the CLI commands."""

from __future__ import annotations

from pathlib import Path

import click
import yaml

from buildnotify_core.build import SnapshotBuild

build_option = click.option(
    "--build",
    "build_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML or JSON document describing the build.",
)
log_option = click.option(
    "--log",
    "log_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Console log file; its last lines are scanned for the built revision.",
)


def load_build(build_path: str, log_path: str | None = None) -> SnapshotBuild:
    """Parse a build document into a SnapshotBuild, raising click errors on bad input."""
    try:
        data = yaml.safe_load(Path(build_path).read_text())
    except OSError as e:
        raise click.ClickException(f"Could not read {build_path}: {e}") from e
    except yaml.YAMLError as e:
        raise click.ClickException(f"Could not parse {build_path}: {e}") from e
    if not isinstance(data, dict):
        raise click.ClickException(f"{build_path} must contain a mapping.")
    try:
        return SnapshotBuild.from_dict(data, log_path=log_path)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

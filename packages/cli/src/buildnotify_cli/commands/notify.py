"""notify command — dispatch a lifecycle event and publish the message."""

from __future__ import annotations

import click

from buildnotify_cli.loader import build_option, load_build, log_option
from buildnotify_core.notifier import EVENTS, ActiveNotifier


@click.command("notify")
@click.argument("event", type=click.Choice(EVENTS))
@build_option
@log_option
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print the message to the terminal instead of posting it.",
)
@click.pass_context
def notify_cmd(ctx, event: str, build_path: str, log_path: str | None, dry_run: bool):
    """Publish the chat message for a build EVENT.

    Only `started` and `completed` produce a message; `deleted` and
    `finalized` are accepted and ignored.

    \b
    Required environment variables:
      HIPCHAT_TOKEN   HipChat API token (not needed with --dry-run)
    """
    from buildnotify_cli.cli import _client_factory
    from buildnotify_core.config import ConfigError, validate_config

    config = dict(ctx.obj["config"])
    if dry_run:
        config["backend"] = "console"
    try:
        validate_config(config)
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    build = load_build(build_path, log_path)
    ActiveNotifier(config, _client_factory(config)).dispatch(event, build)

"""ping command — send a test notification."""

from __future__ import annotations

import click
from rich.console import Console

console = Console()

PING_MESSAGE = "Test notification from buildnotify"


@click.command("ping")
@click.option("--room", default=None, help="Room to post to. Defaults to the configured room.")
@click.pass_context
def ping_cmd(ctx, room: str | None):
    """Post a test message to check the HipChat token and room."""
    from buildnotify_cli.cli import _build_chat_client
    from buildnotify_core.build import fix_empty
    from buildnotify_core.config import ConfigError, validate_config

    config = ctx.obj["config"]
    try:
        validate_config(config)
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    client = _build_chat_client(config, fix_empty(room))
    if not client.room:
        client.close()
        raise click.UsageError("No room given. Pass --room or set 'room' in the config file.")
    try:
        client.publish(PING_MESSAGE, "green")
    finally:
        client.close()
    console.print(f"[green]Sent test notification to {client.room}.[/green]")

"""CLI entry point for buildnotify.

Commands:
  notify   — dispatch a build lifecycle event and publish the resulting message
  render   — show the message an event would produce without publishing it
  ping     — send a test notification to check the token and room
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from buildnotify_cli.commands.notify import notify_cmd
from buildnotify_cli.commands.ping import ping_cmd
from buildnotify_cli.commands.render import render_cmd

console = Console()


def _build_chat_client(config: dict, room: str | None):
    """Instantiate the configured chat backend for one room.

    Backend selection:
      backend: hipchat  → HipChatClient (requires HIPCHAT_TOKEN)
      backend: console  → ConsoleChatClient (prints, never sends)

    A ``None`` room falls back to the ``room`` key of the config.
    """
    room = room or config.get("room")
    if room is not None:
        room = str(room)
    if config.get("backend") == "console":
        from buildnotify_core.chat.console import ConsoleChatClient

        return ConsoleChatClient(room=room, console=console)

    from buildnotify_core.chat.hipchat import HipChatClient

    return HipChatClient(
        server=config["server"],
        token=config["hipchat_token"],
        room=room,
        sender=config["sender"],
        notify=bool(config["notify"]),
        timeout=config["timeout"],
    )


def _client_factory(config: dict):
    return lambda room: _build_chat_client(config, room)


@click.group()
@click.version_option(
    version=importlib.metadata.version("buildnotify"),
    prog_name="buildnotify",
)
@click.option(
    "--config",
    "config_path",
    default=".buildnotify.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="BUILDNOTIFY_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Post CI build lifecycle events to a chat room."""
    from buildnotify_core.config import ConfigError, load_config

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path)
    except ConfigError as e:
        raise click.UsageError(str(e)) from e


main.add_command(notify_cmd)
main.add_command(render_cmd)
main.add_command(ping_cmd)

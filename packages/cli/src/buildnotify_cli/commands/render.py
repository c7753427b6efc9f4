"""render command — preview the message for an event without publishing."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from buildnotify_cli.loader import build_option, load_build, log_option
from buildnotify_core.notifier import EVENTS, ActiveNotifier, build_color

console = Console()


@click.command("render")
@click.argument("event", type=click.Choice(EVENTS))
@build_option
@log_option
@click.pass_context
def render_cmd(ctx, event: str, build_path: str, log_path: str | None):
    """Print the message and color a build EVENT would publish."""
    config = ctx.obj["config"]
    build = load_build(build_path, log_path)
    notifier = ActiveNotifier(config, lambda room: None)

    if event == "started":
        body, color = notifier.get_start_message(build), "green"
    elif event == "completed":
        body, color = notifier.get_build_status_message(build), build_color(build)
    else:
        console.print(f"[yellow]{event} events do not publish a message.[/yellow]")
        return

    console.print(f"[bold]color:[/bold] {color}")
    console.print(escape(body), soft_wrap=True)

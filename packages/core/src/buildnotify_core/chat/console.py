"""Console chat client — prints messages instead of sending them.

Used for ``--dry-run`` and for trying out a config before a HipChat token is
available. Nothing leaves the machine.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from buildnotify_core.chat.base import BaseChatClient

_STYLES = {"green": "green", "yellow": "yellow", "red": "bold red"}


class ConsoleChatClient(BaseChatClient):
    def __init__(self, room: str | None, console: Console | None = None):
        super().__init__(room)
        self.console = console or Console()

    def publish(self, body: str, color: str) -> None:
        style = _STYLES.get(color, "white")
        room = escape(self.room or "(default room)")
        self.console.print(f"[{style}]\\[{color}][/] [bold]{room}[/bold]: {escape(body)}", soft_wrap=True)

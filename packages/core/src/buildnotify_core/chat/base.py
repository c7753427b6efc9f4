"""Abstract chat client interface.

The notifier depends on BaseChatClient, never on a concrete backend, so the
HipChat transport can be swapped for the console (or anything else) without
touching message composition.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseChatClient(ABC):
    """Publishes rendered messages to one room.

    Delivery is best-effort: implementations log transport failures instead
    of raising them back into the notifier.
    """

    def __init__(self, room: str | None):
        self.room = room

    @abstractmethod
    def publish(self, body: str, color: str) -> None:
        """Send ``body`` to the room with a severity color (green, yellow or red)."""

    def close(self) -> None:
        """Release any resources held by the client (sessions, sockets).

        Default is a no-op so callers can always call close() safely.
        """

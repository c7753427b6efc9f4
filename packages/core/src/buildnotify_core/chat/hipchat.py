"""HipChatClient — room notifications over the HipChat v2 REST API.

Each publish() is one POST to ``/v2/room/{room}/notification`` with the body
sent as HTML so the ``<a>`` and ``<b>`` fragments render. A single
requests.Session is reused for the lifetime of the client.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from buildnotify_core.chat.base import BaseChatClient

logger = logging.getLogger(__name__)


class HipChatClient(BaseChatClient):
    def __init__(
        self,
        server: str,
        token: str,
        room: str | None,
        sender: str = "Jenkins",
        notify: bool = False,
        timeout: float = 10,
    ):
        super().__init__(room)
        self._server = server.rstrip("/")
        self._sender = sender
        self._notify = notify
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            }
        )

    @property
    def endpoint(self) -> str:
        server = self._server if "://" in self._server else f"https://{self._server}"
        return f"{server}/v2/room/{quote(self.room or '', safe='')}/notification"

    def publish(self, body: str, color: str) -> None:
        if not self.room:
            logger.warning("No HipChat room configured; dropping message: %s", body)
            return

        payload = {
            "message": body,
            "color": color,
            "notify": self._notify,
            "message_format": "html",
            "from": self._sender,
        }
        logger.debug("Posting to HipChat room %s (%s): %s", self.room, color, body)
        try:
            response = self._session.post(self.endpoint, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            # Delivery is best-effort.
            logger.warning("HipChat publish to %s failed (%s): %s", self.room, type(e).__name__, e)
            return

        if not response.ok:
            logger.warning(
                "HipChat publish to %s rejected: HTTP %d %s",
                self.room,
                response.status_code,
                response.text[:200],
            )

    def close(self) -> None:
        self._session.close()

"""Lifecycle event routing.

The CI host calls one of started / completed / deleted / finalized per build
event. Only the first two publish anything:

    started   → change summary, else cause + console link, else status message (always green)
    completed → status message, colored by result

ActiveNotifier keeps no state between calls beyond the configuration and the
client factory, so the host may invoke it from any worker.
"""

from __future__ import annotations

import logging
from typing import Callable

from buildnotify_core.build import BuildView, Result, fix_empty
from buildnotify_core.chat.base import BaseChatClient
from buildnotify_core.message import MessageBuilder

logger = logging.getLogger(__name__)

EVENTS = ("started", "completed", "deleted", "finalized")

ClientFactory = Callable[[str | None], BaseChatClient]


def build_color(build: BuildView) -> str:
    result = build.result
    if result is Result.SUCCESS:
        return "green"
    if result is Result.FAILURE:
        return "red"
    return "yellow"


class ActiveNotifier:
    def __init__(self, config: dict, client_factory: ClientFactory):
        self.config = config
        self._client_factory = client_factory

    def dispatch(self, event: str, build: BuildView) -> None:
        """Route a lifecycle event by name."""
        if event not in EVENTS:
            raise ValueError(f"Unknown build event: {event!r}. Choose one of {', '.join(EVENTS)}.")
        getattr(self, event)(build)

    def started(self, build: BuildView) -> None:
        self._publish(build, self.get_start_message(build), "green")

    def completed(self, build: BuildView) -> None:
        self._publish(build, self.get_build_status_message(build), build_color(build))

    def deleted(self, build: BuildView) -> None:
        pass

    def finalized(self, build: BuildView) -> None:
        pass

    def get_start_message(self, build: BuildView) -> str:
        changes = self.get_changes(build)
        if changes is not None:
            return changes
        if build.cause is not None:
            message = MessageBuilder(self.config, build)
            message.append(build.cause.short_description)
            return message.append_open_link().render()
        return self.get_build_status_message(build)

    def get_changes(self, build: BuildView) -> str | None:
        """Summarize the change set, or None when there is nothing to summarize."""
        if not build.has_change_set_computed:
            logger.info("No change set computed for %s", build.project_name)
            return None
        entries = build.change_set
        if not entries:
            logger.info("Empty change set for %s", build.project_name)
            return None

        files = set()
        for entry in entries:
            logger.debug("Change entry %s: %s", entry.author, entry.message)
            files.update(entry.affected_files)

        message = MessageBuilder(self.config, build)
        message.append("Started by changes from ")
        message.append_commit_info()
        message.append(f" ({len(files)} file(s) changed)")
        return message.append_open_link().render()

    def get_build_status_message(self, build: BuildView) -> str:
        message = MessageBuilder(self.config, build)
        message.append_status_message()
        message.append(" for ")
        message.append_commit_info()
        message.append(" - ")
        message.append_duration()
        return message.append_open_link().render()

    def _publish(self, build: BuildView, body: str, color: str) -> None:
        client = self._client_factory(fix_empty(build.project_room))
        try:
            client.publish(body, color)
        finally:
            client.close()

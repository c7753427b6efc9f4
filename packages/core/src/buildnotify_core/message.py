"""Chat message composition for a single build.

Every message starts with the same prefix::

    {project} -[ <branch link>/<commit link>] <variant text>

MessageBuilder seeds that prefix on construction and exposes chainable
fragments for the rest. The body is a small HTML dialect (``<a href>`` and
``<b>`` only); values placed into it are host-supplied names and commit
messages the host has already escaped.
"""

from __future__ import annotations

import logging

from buildnotify_core.build import BuildView, Result
from buildnotify_core.scraper import LOG_WINDOW, scrape_commit

logger = logging.getLogger(__name__)


class NoBuildError(ValueError):
    """Raised when a message is requested without a build to describe."""


def status_message(build: BuildView) -> str:
    """Return the status token for the build's current state."""
    if build.is_building:
        return "Starting..."
    result = build.result
    if result is Result.SUCCESS:
        return "Success"
    if result is Result.FAILURE:
        return "<b>FAILURE</b>"
    if result is Result.ABORTED:
        return "ABORTED"
    if result is Result.NOT_BUILT:
        return "Not built"
    if result is Result.UNSTABLE:
        return "Unstable"
    return "Unknown"


class MessageBuilder:
    def __init__(self, config: dict, build: BuildView | None):
        if build is None:
            raise NoBuildError("Cannot build a message without a build")
        self._config = config
        self._build = build
        self._parts: list[str] = []
        self._start_message()

    def _start_message(self) -> None:
        self._parts.append(self._build.project_name)
        self._parts.append(" -")
        self.append_commit_link()
        self._parts.append(" ")

    def append(self, fragment) -> MessageBuilder:
        self._parts.append(str(fragment))
        return self

    def append_status_message(self) -> MessageBuilder:
        return self.append(status_message(self._build))

    def append_commit_info(self) -> MessageBuilder:
        """Append 'author: message' for the last change entry; nothing when there are no changes."""
        entries = self._build.change_set
        if entries:
            last = entries[-1]
            self._parts.append(f"{last.author}: {last.message}")
        return self

    def append_duration(self) -> MessageBuilder:
        return self.append(f" after {self._build.duration_string}")

    def append_open_link(self) -> MessageBuilder:
        url = f"{self._config.get('jenkins_url') or ''}{self._build.url}"
        return self.append(f" (<a href='{url}console'>Console</a>)")

    def append_commit_link(self) -> MessageBuilder:
        """Append branch-compare and commit links scraped from the recent log.

        Contributes nothing when no repository URL is configured, the log
        cannot be read, or no line names a revision.
        """
        base_url = self._config.get("repo_base_url")
        if not base_url:
            return self
        try:
            lines = self._build.recent_log(LOG_WINDOW)
        except OSError as e:
            logger.info("Could not read logs for %s: %s", self._build.project_name, e)
            return self

        commit = scrape_commit(lines)
        if commit is None:
            return self

        self._parts.append(
            f" <a href='{base_url}compare/{commit.branch}'>{commit.branch}</a>/"
            f"<a href='{base_url}commit/{commit.commit_id}'>{commit.short_id}</a>"
        )
        return self

    def render(self) -> str:
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.render()

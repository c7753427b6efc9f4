"""Read-only view of one CI build.

The notifier never talks to the CI host directly. Whatever hosts it implements
BuildView, and the message pipeline only ever asks the questions defined here.
SnapshotBuild is the implementation used by the CLI and the tests: a build
described by a plain dict (usually a YAML or JSON document) plus an optional
console log file on disk.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class Result(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    ABORTED = "aborted"
    NOT_BUILT = "not_built"
    UNSTABLE = "unstable"
    UNKNOWN = "unknown"
    IN_PROGRESS = "in_progress"

    @classmethod
    def parse(cls, value: str | None) -> Result:
        """Map a host-supplied result string onto a Result; anything unrecognised is UNKNOWN."""
        if value is None:
            return cls.IN_PROGRESS
        normalized = str(value).strip().lower().replace(" ", "_").replace("-", "_")
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN


@dataclass(frozen=True)
class AffectedFile:
    """A file touched by a change entry. Identity is the path alone."""

    path: str
    edit_type: str = field(default="edit", compare=False)


@dataclass
class ChangeEntry:
    """One commit in a build's change set."""

    author: str
    message: str  # already HTML-escaped by the host
    affected_files: frozenset[AffectedFile] = field(default_factory=frozenset)


@dataclass
class Cause:
    short_description: str


def fix_empty(value: str | None) -> str | None:
    """Return None for None, empty or whitespace-only strings; otherwise the trimmed value."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _list_value(data: dict, key: str) -> list:
    """Return ``data[key]`` as a list; a missing or null key is an empty list."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Build document key {key!r} must be a list, got {type(value).__name__}")
    return value


class BuildView(ABC):
    """Everything the notifier is allowed to know about a build."""

    @property
    @abstractmethod
    def project_name(self) -> str:
        """Display name of the project the build belongs to."""

    @property
    @abstractmethod
    def project_room(self) -> str | None:
        """Room configured on the project, if any. Blank values mean 'use the default'."""

    @property
    @abstractmethod
    def result(self) -> Result:
        """Current result; IN_PROGRESS while the build is still running."""

    @property
    def is_building(self) -> bool:
        return self.result is Result.IN_PROGRESS

    @property
    @abstractmethod
    def duration_string(self) -> str:
        """Human-readable elapsed time, e.g. '3.2 sec'."""

    @property
    @abstractmethod
    def url(self) -> str:
        """Build page URL relative to the CI host root, ending in '/'."""

    @property
    @abstractmethod
    def change_set(self) -> list[ChangeEntry]:
        """Change entries in host order, possibly empty."""

    @property
    @abstractmethod
    def has_change_set_computed(self) -> bool:
        """False until the host has materialized the change set."""

    @property
    @abstractmethod
    def cause(self) -> Cause | None:
        """Why the build was started, if the host recorded it."""

    @abstractmethod
    def recent_log(self, max_lines: int) -> list[str]:
        """Return up to max_lines of the latest log output, earliest first.

        May raise OSError when the log cannot be read.
        """


class SnapshotBuild(BuildView):
    """A BuildView over static data.

    The log is read lazily from ``log_path`` on every recent_log() call, so a
    missing or unreadable file surfaces as OSError exactly like a live host.
    """

    def __init__(
        self,
        project_name: str,
        url: str,
        result: Result = Result.IN_PROGRESS,
        project_room: str | None = None,
        duration_string: str = "N/A",
        change_set: list[ChangeEntry] | None = None,
        has_change_set_computed: bool = True,
        cause: Cause | None = None,
        log_lines: list[str] | None = None,
        log_path: str | Path | None = None,
    ):
        self._project_name = project_name
        self._url = url
        self._result = result
        self._project_room = project_room
        self._duration_string = duration_string
        self._change_set = list(change_set or [])
        self._has_change_set_computed = has_change_set_computed
        self._cause = cause
        self._log_lines = list(log_lines or [])
        self._log_path = Path(log_path) if log_path is not None else None

    @classmethod
    def from_dict(cls, data: dict, log_path: str | Path | None = None) -> SnapshotBuild:
        """Build a snapshot from a parsed document.

        Expected shape (every key but ``project`` and ``url`` is optional)::

            project: myapp
            room: ops
            url: job/myapp/1/
            result: success          # omit or null while running
            duration: 3.2 sec
            change_set_computed: true
            cause: Started by user ana
            changes:
              - author: ana
                message: fix
                files: [a.py, b.py]
            log: [...]               # inline log lines, used when no log file is given
        """
        try:
            project_name = data["project"]
            url = data["url"]
        except KeyError as e:
            raise ValueError(f"Build document is missing required key {e.args[0]!r}") from e

        changes = []
        for raw in _list_value(data, "changes"):
            if not isinstance(raw, dict):
                raise ValueError(f"Build document key 'changes' must list mappings, got {type(raw).__name__}")
            files = frozenset(AffectedFile(path=str(p)) for p in _list_value(raw, "files"))
            changes.append(
                ChangeEntry(
                    author=str(raw.get("author", "")),
                    message=str(raw.get("message", "")),
                    affected_files=files,
                )
            )

        computed = data.get("change_set_computed", True)
        if not isinstance(computed, bool):
            raise ValueError(f"Build document key 'change_set_computed' must be true or false, got {computed!r}")

        room = data.get("room")
        cause = data.get("cause")
        return cls(
            project_name=str(project_name),
            url=str(url),
            result=Result.parse(data.get("result")),
            project_room=str(room) if room is not None else None,
            duration_string=str(data.get("duration", "N/A")),
            change_set=changes,
            has_change_set_computed=computed,
            cause=Cause(short_description=str(cause)) if cause else None,
            log_lines=[str(line) for line in _list_value(data, "log")],
            log_path=log_path,
        )

    @property
    def project_name(self) -> str:
        return self._project_name

    @property
    def project_room(self) -> str | None:
        return self._project_room

    @property
    def result(self) -> Result:
        return self._result

    @property
    def duration_string(self) -> str:
        return self._duration_string

    @property
    def url(self) -> str:
        return self._url

    @property
    def change_set(self) -> list[ChangeEntry]:
        return self._change_set

    @property
    def has_change_set_computed(self) -> bool:
        return self._has_change_set_computed

    @property
    def cause(self) -> Cause | None:
        return self._cause

    def recent_log(self, max_lines: int) -> list[str]:
        if self._log_path is None:
            return self._log_lines[-max_lines:] if max_lines > 0 else []
        with open(self._log_path, encoding="utf-8", errors="replace") as f:
            tail = deque((line.rstrip("\r\n") for line in f), maxlen=max(max_lines, 0))
        logger.debug("Read %d log line(s) from %s", len(tail), self._log_path)
        return list(tail)

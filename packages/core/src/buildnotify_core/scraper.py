"""Commit identity extraction from build log output."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

# Emitted by the git SCM step once per checkout.
COMMIT_LINE_RE = re.compile(r"^Commencing build of Revision (\b\w{40}\b) \(\w+/(.+)\)$", re.ASCII)

LOG_WINDOW = 100
SHORT_ID_LENGTH = 6


@dataclass(frozen=True)
class CommitRef:
    commit_id: str
    branch: str

    @property
    def short_id(self) -> str:
        return self.commit_id[:SHORT_ID_LENGTH]


def scrape_commit(lines: Iterable[str]) -> CommitRef | None:
    """Return the commit named by the first matching log line, or None."""
    for line in lines:
        match = COMMIT_LINE_RE.search(line)
        if match:
            return CommitRef(commit_id=match.group(1), branch=match.group(2))
    return None

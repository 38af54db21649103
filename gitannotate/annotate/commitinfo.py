# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone

UNCOMMITTED_HASH = "0" * 40
"Commit id that git blame reports for lines that haven't been committed yet."


def parseCommitId(rawId: str) -> str | None:
    """ Return the commit id to use for a raw id from git, or None if uncommitted. """
    if rawId == UNCOMMITTED_HASH:
        return None
    return rawId


def dateFromTimestamp(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, timezone.utc)


@dataclasses.dataclass(frozen=True)
class CommitInfo:
    revision: str | None
    "Full commit hash, or None for uncommitted lines."

    author: str = ""
    date: datetime | None = None

    @property
    def isCommitted(self) -> bool:
        return self.revision is not None

    def shortRevision(self, n: int = 7) -> str:
        if self.revision is None:
            return "0" * n
        return self.revision[:n]


class CommitInfoCache:
    """
    Hands out a single CommitInfo instance per commit id, so that every line
    attributed to the same commit shares it. One cache per parse pass; don't
    share across concurrent annotations.
    """

    def __init__(self):
        self._commits: dict[str | None, CommitInfo] = {}

    def __len__(self):
        return len(self._commits)

    def __contains__(self, commitId: str | None):
        return commitId in self._commits

    def get(self, commitId: str | None) -> CommitInfo | None:
        return self._commits.get(commitId, None)

    def register(self, commit: CommitInfo) -> CommitInfo:
        """
        Remember this commit. If its id is already known, the first
        registered instance wins and is returned instead.
        """
        return self._commits.setdefault(commit.revision, commit)

    def intern(self, revision: str | None, author: str = "", date: datetime | None = None) -> CommitInfo:
        known = self._commits.get(revision, None)
        if known is not None:
            return known
        return self.register(CommitInfo(revision, author, date))

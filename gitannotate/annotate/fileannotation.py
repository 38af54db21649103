# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from datetime import datetime

from gitannotate.annotate.commitinfo import CommitInfo, CommitInfoCache
from gitannotate.annotate.errors import ParseError


@dataclasses.dataclass(frozen=True)
class FileRevision:
    """ One entry in the history of a file. """

    revision: str
    author: str
    date: datetime
    path: str
    "Path of the file (relative to the repo root) as of this revision."

    message: str = ""
    authorEmail: str = ""
    patchAvailable: bool = True
    "False if the file's contents can't be diffed in this revision (e.g. binary blob)."

    def summary(self) -> str:
        return self.message.split("\n", 1)[0]


@dataclasses.dataclass(frozen=True)
class LineRecord:
    lineNumber: int
    "1-based line number."

    commit: CommitInfo
    text: str

    @property
    def revision(self) -> str | None:
        return self.commit.revision

    @property
    def author(self) -> str:
        return self.commit.author

    @property
    def date(self) -> datetime | None:
        return self.commit.date


@dataclasses.dataclass
class FileAnnotation:
    """
    Per-line attribution of a file at a given revision, plus the file's history.
    Don't mutate after it's been handed out by AnnotationBuilder.
    """

    path: str
    lines: list[LineRecord]
    history: list[FileRevision]

    currentRevision: str | None = None
    "Revision that was annotated, or None for the tip of the branch."

    encoding: str = "utf-8"

    repoPath: str = ""
    "Path of the file relative to the repo root, as passed to git."

    @property
    def lineCount(self) -> int:
        return len(self.lines)

    def __len__(self):
        return len(self.lines)

    def __getitem__(self, index: int) -> LineRecord:
        return self.lines[index]

    def __iter__(self):
        return iter(self.lines)

    def lineRevision(self, index: int) -> str | None:
        """ Revision of the line at a 0-based index. """
        return self.lines[index].revision

    def lineAuthor(self, index: int) -> str:
        return self.lines[index].author

    def lineDate(self, index: int) -> datetime | None:
        return self.lines[index].date

    def lineText(self, index: int) -> str:
        return self.lines[index].text

    def text(self) -> str:
        return "".join(line.text + "\n" for line in self.lines)

    def historyAsMap(self) -> dict[str, FileRevision]:
        return {entry.revision: entry for entry in self.history}

    def findRevision(self, revision: str | None) -> FileRevision | None:
        if revision is None:
            return None
        for entry in self.history:
            if entry.revision == revision:
                return entry
        return None

    def revisionsInUse(self) -> list[str]:
        """
        Distinct committed revisions that at least one line is attributed to,
        in history order (newest first). Revisions missing from the history
        come last, newest first.
        """
        inUse = {line.commit for line in self.lines if line.commit.isCommitted}
        byRevision = {commit.revision: commit for commit in inUse}

        result = [entry.revision for entry in self.history if entry.revision in byRevision]

        orphans = [commit for revision, commit in byRevision.items() if revision not in result]
        orphans.sort(key=lambda c: (c.date is not None, c.date), reverse=True)
        result.extend(commit.revision for commit in orphans)

        return result

    def toolTip(self, index: int) -> str:
        line = self.lines[index]
        if not line.commit.isCommitted:
            return "Not Committed Yet"

        entry = self.findRevision(line.revision)
        author = line.author
        if entry is not None and entry.authorEmail:
            author += f" <{entry.authorEmail}>"
        date = line.date.strftime("%Y-%m-%d %H:%M:%S %z") if line.date else ""

        tip = f"commit {line.revision}\nAuthor: {author}\nDate: {date}"
        if entry is not None and entry.message:
            tip += "\n\n" + entry.message.rstrip()
        return tip

    def toPlainText(self) -> str:  # pragma: no cover (for debugging)
        """ Intended for debugging. No need to localize the text within. """

        result = ""

        for line in self.lines:
            if line.commit.isCommitted:
                author = line.author
                strDate = line.date.strftime("%Y-%m-%d") if line.date else "?"
            else:
                author = "Not Committed Yet"
                strDate = ""

            result += f"{line.commit.shortRevision()} ({author:20.20} {strDate:10} {line.lineNumber:4}) {line.text}\n"

        return result


class AnnotationBuilder:
    """
    Accumulates line attributions (in any order) into a FileAnnotation.
    Appending the same line number twice overwrites the earlier record.
    """

    def __init__(self, path: str, currentRevision: str | None = None, encoding: str = "utf-8",
                 commits: CommitInfoCache | None = None, repoPath: str = ""):
        self.path = path
        self.currentRevision = currentRevision
        self.encoding = encoding
        self.repoPath = repoPath
        self.commits = commits if commits is not None else CommitInfoCache()
        self._records: dict[int, LineRecord] = {}
        self._history: list[FileRevision] = []

    def __len__(self):
        return len(self._records)

    def appendCommit(self, lineNumber: int, commit: CommitInfo, text: str):
        if lineNumber < 1:
            raise ParseError(f"illegal line number {lineNumber}")
        self._records[lineNumber] = LineRecord(lineNumber, commit, text)

    def append(self, date: datetime | None, revision: str | None, author: str, text: str, lineNumber: int):
        commit = self.commits.intern(revision, author, date)
        self.appendCommit(lineNumber, commit, text)

    def addHistory(self, revisions: Iterable[FileRevision]):
        self._history.extend(revisions)

    def build(self) -> FileAnnotation:
        lines = [self._records[n] for n in sorted(self._records)]

        for expected, line in enumerate(lines, start=1):
            if line.lineNumber != expected:
                raise ParseError(f"no annotation for line {expected} of {self.path}")

        return FileAnnotation(
            path=self.path,
            lines=lines,
            history=list(self._history),
            currentRevision=self.currentRevision,
            encoding=self.encoding,
            repoPath=self.repoPath,
        )

# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Parser for the output of "git blame --porcelain".

Each group in the output looks like this:

    <commit-id> <orig-line> <final-line>[ <group-size>]
    author Jane Doe                 (metadata: first occurrence of the commit only)
    committer-time 1700000000
    ...
    \t<line content>

The parser threads an explicit BlameCursor through small steps, so that each
step can be tested in isolation.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Generator

from gitannotate.annotate.commitinfo import CommitInfo, CommitInfoCache, dateFromTimestamp, parseCommitId
from gitannotate.annotate.errors import ParseError

logger = logging.getLogger(__name__)

AUTHOR_KEY = "author"
COMMITTER_TIME_KEY = "committer-time"


@dataclasses.dataclass(frozen=True)
class BlameCursor:
    pos: int = 0
    "Offset of the next unread character in the output."

    lineNumber: int = 0
    "Number of output lines consumed so far (for error reports)."


def hasMoreData(stdout: str, cursor: BlameCursor) -> bool:
    return cursor.pos < len(stdout)


def startsWithTab(stdout: str, cursor: BlameCursor) -> bool:
    return stdout.startswith("\t", cursor.pos)


def readLine(stdout: str, cursor: BlameCursor) -> tuple[str, BlameCursor]:
    """ Return the line under the cursor (without its terminator) and a cursor to the next line. """
    endPos = stdout.find("\n", cursor.pos)
    if endPos < 0:
        endPos = len(stdout)
        nextPos = endPos
    else:
        nextPos = endPos + 1

    line = stdout[cursor.pos : endPos]
    line = line.removesuffix("\r")
    return line, BlameCursor(nextPos, cursor.lineNumber + 1)


def parseHeader(line: str, cursor: BlameCursor) -> tuple[str | None, int]:
    """
    Parse a group header line. Return the commit id (None if uncommitted)
    and the line number in the final file.
    `cursor` must point past the header line (it's only used for error reports).
    """
    tokens = line.split(" ")

    if len(tokens) < 3 or not tokens[0]:
        raise ParseError("malformed blame header", line, cursor.lineNumber)

    commitId = parseCommitId(tokens[0])
    # tokens[1] is the line number in the original file; we don't need it

    try:
        finalLineNumber = int(tokens[2])
    except ValueError as exc:
        raise ParseError("non-numeric line number in blame header", line, cursor.lineNumber) from exc

    return commitId, finalLineNumber


def skipMetadata(stdout: str, cursor: BlameCursor) -> BlameCursor:
    while hasMoreData(stdout, cursor) and not startsWithTab(stdout, cursor):
        _line, cursor = readLine(stdout, cursor)
    return cursor


def readMetadata(stdout: str, cursor: BlameCursor, commitId: str | None) -> tuple[CommitInfo, BlameCursor]:
    """
    Read the metadata block that follows the first header of a commit.
    Only the author name and committer timestamp are kept.
    """
    author = ""
    date = None

    while hasMoreData(stdout, cursor) and not startsWithTab(stdout, cursor):
        line, cursor = readLine(stdout, cursor)

        if commitId is None:
            # Uncommitted lines have placeholder metadata, ignore it
            continue

        key, _sep, value = line.partition(" ")

        if key == AUTHOR_KEY:
            author = value
        elif key == COMMITTER_TIME_KEY:
            try:
                date = dateFromTimestamp(int(value))
            except (ValueError, OverflowError, OSError) as exc:
                logger.error(f"Bad committer timestamp for {commitId}: {value!r}")
                raise ParseError("malformed committer timestamp", line, cursor.lineNumber) from exc

    return CommitInfo(commitId, author, date), cursor


def readContent(stdout: str, cursor: BlameCursor) -> tuple[str, BlameCursor]:
    """ Read a content line, stripping exactly one leading tab. """
    assert startsWithTab(stdout, cursor)
    line, cursor = readLine(stdout, cursor)
    return line[1:], cursor


def parseGitBlame(
        stdout: str,
        commits: CommitInfoCache | None = None,
) -> Generator[tuple[int, CommitInfo, str], None, None]:
    """
    Yield (lineNumber, commit, text) for each line annotated in the output of
    "git blame --porcelain". Lines from the same commit share the same
    CommitInfo instance. The metadata seen on a commit's first occurrence wins.

    Raises ParseError on malformed input; no partial results should be used
    in that case.
    """

    if commits is None:
        commits = CommitInfoCache()

    cursor = BlameCursor()

    while hasMoreData(stdout, cursor):
        header, cursor = readLine(stdout, cursor)
        commitId, lineNumber = parseHeader(header, cursor)

        commit = commits.get(commitId)
        if commit is not None:
            cursor = skipMetadata(stdout, cursor)
        else:
            commit, cursor = readMetadata(stdout, cursor, commitId)
            commit = commits.register(commit)

        if not hasMoreData(stdout, cursor):
            # Empty file: there's no content line after the metadata
            continue

        text, cursor = readContent(stdout, cursor)
        yield lineNumber, commit, text

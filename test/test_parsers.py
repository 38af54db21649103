# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import pytest

from gitannotate.annotate import *
from gitannotate.annotate.commitinfo import dateFromTimestamp
from gitannotate.gitdriver.parsers import *
from .util import *

HASH_A = "a" * 40
HASH_B = "b" * 40


def testParseTwoLinesSameCommit():
    stdout = "abc123 1 1 2\nauthor Jane\ncommitter-time 1000\n\thello\nabc123 2 2\n\tworld\n"

    records = list(parseGitBlame(stdout))
    assert len(records) == 2

    (line1, commit1, text1), (line2, commit2, text2) = records
    assert (line1, text1) == (1, "hello")
    assert (line2, text2) == (2, "world")
    assert commit1.revision == "abc123"
    assert commit1.author == "Jane"
    assert commit1.date == dateFromTimestamp(1000)
    assert commit1.date.timestamp() == 1000
    assert commit2 is commit1


def testParseFullPorcelainOutput():
    stdout = (porcelainGroup(HASH_A, 1, "first", author="Alice", time=1600000000, groupSize=2)
              + porcelainGroup(HASH_A, 2, "second")
              + porcelainGroup(HASH_B, 3, "third", author="Bob", time=1700000000)
              + porcelainGroup(HASH_A, 4, "fourth", origLine=3))

    commits = CommitInfoCache()
    records = list(parseGitBlame(stdout, commits))

    assert [r[0] for r in records] == [1, 2, 3, 4]
    assert [r[2] for r in records] == ["first", "second", "third", "fourth"]
    assert len(commits) == 2

    alice = commits.get(HASH_A)
    bob = commits.get(HASH_B)
    assert alice.author == "Alice"
    assert bob.author == "Bob"
    assert bob.date.timestamp() == 1700000000
    assert [r[1] for r in records] == [alice, alice, bob, alice]
    assert all(r[1] is alice for r in records if r[1].revision == HASH_A)


def testParseOutOfOrderLines():
    stdout = (porcelainGroup(HASH_B, 3, "three", author="Bob", time=2000)
              + porcelainGroup(HASH_A, 1, "one", author="Alice", time=1000)
              + porcelainGroup(HASH_B, 2, "two"))

    records = list(parseGitBlame(stdout))
    assert {r[0] for r in records} == {1, 2, 3}

    builder = AnnotationBuilder("/tmp/hello.txt")
    for lineNumber, commit, text in records:
        builder.appendCommit(lineNumber, commit, text)
    annotation = builder.build()

    assert [line.text for line in annotation] == ["one", "two", "three"]
    assert annotation.lineAuthor(1) == "Bob"


def testParseUncommittedLines():
    stdout = (porcelainGroup(HASH_A, 1, "committed", author="Alice", time=1000)
              + porcelainGroup(UNCOMMITTED_HASH, 2, "not yet", author="Not Committed Yet", time=2000))

    records = list(parseGitBlame(stdout))
    assert len(records) == 2

    _lineNumber, commit, text = records[1]
    assert text == "not yet"
    assert commit.revision is None
    assert not commit.isCommitted
    assert commit.author == ""
    assert commit.date is None


def testParseEmptyOutput():
    assert list(parseGitBlame("")) == []

    annotation = AnnotationBuilder("/tmp/empty.txt").build()
    assert annotation.lineCount == 0


def testParseMetadataWithoutContent():
    stdout = f"{HASH_A} 1 1 1\nauthor Alice\ncommitter-time 1000\n"
    assert list(parseGitBlame(stdout)) == []


def testParseFirstMetadataWins():
    stdout = (porcelainGroup(HASH_A, 1, "one", author="Alice", time=1000)
              + porcelainGroup(HASH_A, 2, "two", author="Mallory", time=9999))

    records = list(parseGitBlame(stdout))
    assert records[0][1] is records[1][1]
    assert records[1][1].author == "Alice"
    assert records[1][1].date.timestamp() == 1000


def testParseKeepsInnerTabsAndStripsCarriageReturn():
    stdout = f"{HASH_A} 1 1 2\nauthor Alice\ncommitter-time 1000\n\t\tindented\r\n{HASH_A} 2 2\n\t\n"

    records = list(parseGitBlame(stdout))
    assert [r[2] for r in records] == ["\tindented", ""]


def testParseIgnoresUnknownMetadata():
    stdout = f"{HASH_A} 1 1 1\nboundary\nprevious {HASH_B} old.txt\nauthor Alice\ncommitter-time 1000\n\thi\n"

    [(lineNumber, commit, text)] = list(parseGitBlame(stdout))
    assert commit.author == "Alice"
    assert text == "hi"


@pytest.mark.parametrize("header", [
    f"{HASH_A} 1 one 1",
    f"{HASH_A} 1",
    f"{HASH_A}",
    f" 1 1",
])
def testParseMalformedHeader(header):
    stdout = f"{header}\nauthor Alice\ncommitter-time 1000\n\thello\n"

    with pytest.raises(ParseError) as excInfo:
        list(parseGitBlame(stdout))

    assert isinstance(excInfo.value, ToolInvocationError)
    assert excInfo.value.rawText == header
    assert excInfo.value.lineNumber == 1


def testParseMalformedTimestamp():
    stdout = f"{HASH_A} 1 1 1\nauthor Alice\ncommitter-time soon\n\thello\n"

    with pytest.raises(ParseError) as excInfo:
        list(parseGitBlame(stdout))

    assert excInfo.value.rawText == "committer-time soon"
    assert excInfo.value.lineNumber == 3
    assert "soon" in str(excInfo.value)


def testParseMalformedHeaderAfterGoodLines():
    stdout = porcelainGroup(HASH_A, 1, "one", author="Alice", time=1000) + f"{HASH_A} 2 X\n\ttwo\n"

    parser = parseGitBlame(stdout)
    assert next(parser)[0] == 1
    with pytest.raises(ParseError):
        next(parser)


def testCursorSteps():
    stdout = f"{HASH_A} 1 7 1\nauthor Alice\n\tcontent\n"
    cursor = BlameCursor()

    header, cursor = readLine(stdout, cursor)
    assert parseHeader(header, cursor) == (HASH_A, 7)
    assert cursor.lineNumber == 1
    assert not startsWithTab(stdout, cursor)

    afterMetadata = skipMetadata(stdout, cursor)
    assert startsWithTab(stdout, afterMetadata)
    assert afterMetadata.lineNumber == 2

    commit, cursor = readMetadata(stdout, cursor, HASH_A)
    assert cursor == afterMetadata
    assert commit.author == "Alice"
    assert commit.date is None

    text, cursor = readContent(stdout, cursor)
    assert text == "content"
    assert not hasMoreData(stdout, cursor)


def testCursorReadLastLineWithoutTerminator():
    line, cursor = readLine("abc", BlameCursor())
    assert line == "abc"
    assert cursor == BlameCursor(3, 1)

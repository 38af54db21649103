# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Compact cacheable form of a FileAnnotation.

Only the revision of each line is kept. Authors and dates are recovered from
the file's history, and line text from the file's current contents.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Sequence

from gitannotate.annotate.errors import CacheMismatchError
from gitannotate.annotate.fileannotation import AnnotationBuilder, FileAnnotation, FileRevision
from gitannotate.toolbox.textcodec import splitLines

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class CacheEntry:
    path: str
    revisions: tuple[str | None, ...]
    "Revision of each line (None for uncommitted lines)."

    def __len__(self):
        return len(self.revisions)

    @property
    def isFullyCommitted(self) -> bool:
        return None not in self.revisions

    def toJson(self) -> list[str | None]:
        return list(self.revisions)

    @classmethod
    def fromJson(cls, path: str, data: Sequence[str | None]) -> CacheEntry:
        if not isinstance(data, list) or not all(r is None or isinstance(r, str) for r in data):
            raise ValueError(f"malformed cache entry for {path}")
        return CacheEntry(path, tuple(data))


def createCacheable(annotation: FileAnnotation) -> CacheEntry:
    revisions = tuple(annotation.lineRevision(i) for i in range(annotation.lineCount))
    return CacheEntry(annotation.path, revisions)


def restoreOrRaise(
        entry: CacheEntry,
        history: Iterable[FileRevision],
        currentText: str,
        forCurrentRevision: bool = True,
        targetRevision: str | None = None,
        encoding: str = "utf-8",
        repoPath: str = "",
) -> FileAnnotation:
    history = list(history)
    historyMap = {h.revision: h for h in history}
    lines = splitLines(currentText)

    if len(lines) != len(entry):
        raise CacheMismatchError(f"{entry.path}: cache has {len(entry)} lines, "
                                 f"current text has {len(lines)}")

    builder = AnnotationBuilder(
        entry.path,
        currentRevision=None if forCurrentRevision else targetRevision,
        encoding=encoding,
        repoPath=repoPath)
    builder.addHistory(history)

    for i, (revision, text) in enumerate(zip(entry.revisions, lines, strict=True)):
        if revision is None:
            builder.append(None, None, "", text, i + 1)
            continue

        try:
            fileRevision = historyMap[revision]
        except KeyError as exc:
            raise CacheMismatchError(f"{entry.path}: revision {revision} (line {i + 1}) "
                                     f"isn't in the history") from exc

        builder.append(fileRevision.date, revision, fileRevision.author, text, i + 1)

    return builder.build()


def restore(
        entry: CacheEntry,
        history: Iterable[FileRevision],
        currentText: str,
        forCurrentRevision: bool = True,
        targetRevision: str | None = None,
        encoding: str = "utf-8",
        repoPath: str = "",
) -> FileAnnotation | None:
    """
    Rebuild a FileAnnotation from a cache entry, the file's current text and
    its history, without running git.

    Returns None if the entry doesn't match the text or the history; the
    caller should then fall back to a live annotation.
    """
    try:
        return restoreOrRaise(entry, history, currentText, forCurrentRevision, targetRevision,
                              encoding, repoPath)
    except CacheMismatchError as exc:
        logger.info(f"Can't restore cached annotation: {exc}")
        return None

# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Iterable

import pygit2

from gitannotate import settings
from gitannotate.appconsts import *
from gitannotate.annotate.annotationcache import AnnotationCache
from gitannotate.annotate.cachecodec import CacheEntry, createCacheable, restore
from gitannotate.annotate.errors import ToolInvocationError, UsageError
from gitannotate.annotate.fileannotation import AnnotationBuilder, FileAnnotation, FileRevision
from gitannotate.annotate.history import blobData, committedPath, fileHistory, openRepository, relativePath
from gitannotate.annotate.progress import AnnotationProgress, Checkpoint, FlowGeneratorType, runFlow
from gitannotate.gitdriver import GitDriver
from gitannotate.gitdriver.parsers import parseGitBlame
from gitannotate.qt import *
from gitannotate.toolbox.qtutils import waitForProcess
from gitannotate.toolbox.textcodec import SNIFF_LENGTH, WIDE_ENCODINGS, detectEncoding

logger = logging.getLogger(__name__)

HistoryProvider = Callable[[pygit2.Repository, str, str | None], list[FileRevision]]
"Signature of fileHistory(repo, path, revision): commits that changed a file, newest first."


class AnnotationProvider:
    """
    Annotates (blames) files with "git blame", or restores annotations from
    a cache without running git.

    The annotate* methods return None if the computation was canceled via the
    AnnotationProgress object. Any git failure raises ToolInvocationError.
    """

    def __init__(self, historyProvider: HistoryProvider = fileHistory):
        self.historyProvider = historyProvider
        GitDriver.setGitPath(settings.prefs.gitPath)

    # -------------------------------------------------------------------------
    # Live annotation

    def annotate(
            self,
            file: str,
            revision: FileRevision | str | None = None,
            progress: AnnotationProgress | None = None,
    ) -> FileAnnotation | None:
        """
        Annotate a file from the working directory, as of `revision`
        (a FileRevision from the file's history, a commit id, or None for
        the tip of the current branch).
        """
        repo, file, relPath = self._prepare(file)
        flow = self._flowAnnotateFile(repo, file, relPath, revision)
        return runFlow(flow, progress)

    def annotatePath(
            self,
            path: str,
            revision: str,
            progress: AnnotationProgress | None = None,
    ) -> FileAnnotation | None:
        """
        Annotate a file as of a past revision. `path` is where the file sat
        in the working directory at that revision; it needn't exist anymore.
        """
        repo, path, relPath = self._prepare(path)
        flow = self._flowAnnotatePath(repo, path, relPath, revision)
        return runFlow(flow, progress)

    def isAnnotationValid(self, revision: FileRevision) -> bool:
        return True

    def _prepare(self, path: str) -> tuple[pygit2.Repository, str, str]:
        if os.path.isdir(path):
            raise UsageError(f"Can't annotate a directory: {path}")

        absPath = os.path.normpath(os.path.abspath(path))

        # The file may be gone from the working directory (annotatePath)
        searchDir = os.path.dirname(absPath)
        while not os.path.isdir(searchDir) and searchDir != os.path.dirname(searchDir):
            searchDir = os.path.dirname(searchDir)

        repo = openRepository(searchDir)
        relPath = relativePath(repo, absPath)
        return repo, absPath, relPath

    def _flowAnnotateFile(self, repo: pygit2.Repository, file: str, relPath: str,
                          revision: FileRevision | str | None) -> FlowGeneratorType:
        name = os.path.basename(file)

        yield Checkpoint(f"getting history for {name}")
        try:
            lastCommittedPath = committedPath(repo, relPath)
            history = self.historyProvider(repo, lastCommittedPath, None)
        except (pygit2.GitError, KeyError, ValueError) as exc:
            raise ToolInvocationError(f"Couldn't get history of {relPath}: {exc}") from exc

        if revision is None:
            revisionId = None
            repoPath = lastCommittedPath
        elif isinstance(revision, FileRevision):
            revisionId = revision.revision
            repoPath = revision.path
        else:
            revisionId = revision
            known = next((h for h in history if h.revision == revisionId), None)
            repoPath = known.path if known is not None else lastCommittedPath

        if revisionId is None and os.path.isfile(file):
            with open(file, "rb") as f:
                sample = f.read(SNIFF_LENGTH)
        else:
            sample = self._readBlob(repo, revisionId, repoPath)
        encoding = detectEncoding(sample)

        yield Checkpoint(f"computing annotation for {name}")
        annotation = yield from self._flowBlame(repo, file, repoPath, revisionId, history, encoding)
        return annotation

    def _flowAnnotatePath(self, repo: pygit2.Repository, path: str, relPath: str,
                          revision: str) -> FlowGeneratorType:
        name = os.path.basename(path)

        yield Checkpoint(f"getting history for {name}")
        try:
            history = self.historyProvider(repo, relPath, revision)
        except (pygit2.GitError, KeyError, ValueError) as exc:
            raise ToolInvocationError(f"Couldn't get history of {relPath} at {revision}: {exc}") from exc

        encoding = detectEncoding(self._readBlob(repo, revision, relPath))

        yield Checkpoint(f"computing annotation for {name}")
        annotation = yield from self._flowBlame(repo, path, relPath, revision, history, encoding)
        return annotation

    @staticmethod
    def _readBlob(repo: pygit2.Repository, revision: str | None, repoPath: str) -> bytes:
        try:
            return blobData(repo, revision, repoPath)[:SNIFF_LENGTH]
        except (pygit2.GitError, KeyError, ValueError) as exc:
            raise ToolInvocationError(f"Couldn't read {repoPath} at {revision or 'HEAD'}: {exc}") from exc

    def _flowBlame(
            self,
            repo: pygit2.Repository,
            file: str,
            repoPath: str,
            revision: str | None,
            history: list[FileRevision],
            encoding: str,
    ) -> FlowGeneratorType:
        if encoding in WIDE_ENCODINGS:
            # git blame treats these files as binary and its porcelain output can't be split into lines
            raise ToolInvocationError(f"Can't annotate {repoPath}: {encoding.upper()} files aren't supported")

        prefs = settings.prefs
        timeStart = time.perf_counter()

        args = GitDriver.buildBlameCommand(repoPath, revision,
                                           ignoreWhitespace=prefs.ignoreWhitespace,
                                           detectMoves=prefs.detectMoves)
        process = GitDriver(*args)
        process.setWorkingDirectory(repo.workdir)

        logger.info(f"Starting process (from {repo.workdir}): {process.formatCommandLine()}")
        process.start()

        try:
            for _dummy in waitForProcess(process, prefs.processPollInterval):
                yield Checkpoint()
        finally:
            if process.state() != QProcess.ProcessState.NotRunning:
                logger.info(f"Killing abandoned process: {process.formatCommandLine()}")
                process.kill()
                process.waitForFinished(-1)

        if not process.succeeded():
            message = process.errorText()
            logger.warning(message)
            raise ToolInvocationError(message,
                                      command=process.formatCommandLine(),
                                      exitCode=process.exitCode(),
                                      stderr=process.stderrScrollback())

        stdout = process.stdoutScrollback(encoding)

        builder = AnnotationBuilder(file, currentRevision=revision, encoding=encoding, repoPath=repoPath)
        for lineNumber, commit, text in parseGitBlame(stdout, builder.commits):
            builder.appendCommit(lineNumber, commit, text)
        builder.addHistory(history)
        annotation = builder.build()

        if APP_DEBUG:
            assert all(line.commit is builder.commits.get(line.revision) for line in annotation), \
                "lines from the same commit must share a CommitInfo"

        timeTaken = int(1000 * (time.perf_counter() - timeStart))
        logger.debug(f"Annotated {repoPath}: {annotation.lineCount} lines, "
                     f"{len(builder.commits)} commits ({timeTaken} ms)")
        return annotation

    # -------------------------------------------------------------------------
    # Cache

    @staticmethod
    def createCacheable(annotation: FileAnnotation) -> CacheEntry:
        return createCacheable(annotation)

    @staticmethod
    def restore(
            entry: CacheEntry,
            history: Iterable[FileRevision],
            currentText: str,
            forCurrentRevision: bool = True,
            targetRevision: str | None = None,
    ) -> FileAnnotation | None:
        return restore(entry, history, currentText, forCurrentRevision, targetRevision)

    def annotateCached(
            self,
            file: str,
            cache: AnnotationCache,
            progress: AnnotationProgress | None = None,
    ) -> FileAnnotation | None:
        """
        Restore the annotation of a working directory file from the cache if
        possible. Otherwise, annotate it with git and store the result in the
        cache (unless some lines are uncommitted).
        """
        repo, file, relPath = self._prepare(file)

        annotation = self._restoreFromCache(repo, file, relPath, cache)
        if annotation is not None:
            return annotation

        annotation = self.annotate(file, progress=progress)

        if annotation is not None:
            entry = createCacheable(annotation)
            if entry.isFullyCommitted:
                cache.put(entry)

        return annotation

    def _restoreFromCache(self, repo: pygit2.Repository, file: str, relPath: str,
                          cache: AnnotationCache) -> FileAnnotation | None:
        entry = cache.get(file)
        if entry is None:
            logger.debug(f"Cache miss: {relPath}")
            return None

        # The cache only tells us about committed contents
        try:
            status = repo.status_file(relPath)
        except (pygit2.GitError, KeyError):
            status = -1
        if status != pygit2.enums.FileStatus.CURRENT:
            logger.debug(f"Not using cached annotation for modified file: {relPath}")
            return None

        try:
            lastCommittedPath = committedPath(repo, relPath)
            history = self.historyProvider(repo, lastCommittedPath, None)
        except (pygit2.GitError, KeyError, ValueError) as exc:
            logger.warning(f"Couldn't get history of {relPath} to restore annotation: {exc}")
            return None

        with open(file, "rb") as f:
            data = f.read()
        encoding = detectEncoding(data)
        if encoding in WIDE_ENCODINGS:
            return None
        text = data.decode(encoding, errors="replace")

        annotation = restore(entry, history, text, forCurrentRevision=True,
                             encoding=encoding, repoPath=lastCommittedPath)
        if annotation is None:
            cache.invalidate(file)
            return None

        logger.debug(f"Cache hit: {relPath}")
        return annotation

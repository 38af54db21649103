# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Revision history of a single file, following renames.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pygit2
from pygit2.enums import DeltaStatus, SortMode

from gitannotate.annotate.commitinfo import dateFromTimestamp
from gitannotate.annotate.errors import UsageError
from gitannotate.annotate.fileannotation import FileRevision

logger = logging.getLogger(__name__)


def openRepository(path: str) -> pygit2.Repository:
    repoPath = pygit2.discover_repository(path)
    if not repoPath:
        raise UsageError(f"Not in a Git repository: {path}")
    repo = pygit2.Repository(repoPath)
    if repo.is_bare:
        raise UsageError(f"Can't annotate files in a bare repository: {path}")
    return repo


def relativePath(repo: pygit2.Repository, path: str) -> str:
    """ Path relative to the root of the working directory, with forward slashes. """
    absPath = Path(os.path.realpath(path))
    workdir = Path(os.path.realpath(repo.workdir))
    try:
        return absPath.relative_to(workdir).as_posix()
    except ValueError as exc:
        raise UsageError(f"{path} is outside the working directory of {repo.workdir}") from exc


def resolveCommit(repo: pygit2.Repository, revision: str | None) -> pygit2.Commit:
    revspec = revision or "HEAD"
    return repo.revparse_single(revspec).peel(pygit2.Commit)


def blobAt(tree: pygit2.Tree, path: str) -> pygit2.Blob | None:
    try:
        obj = tree[path]
    except KeyError:
        return None
    if not isinstance(obj, pygit2.Blob):
        return None
    return obj


def blobData(repo: pygit2.Repository, revision: str | None, path: str) -> bytes:
    """ Contents of the file at a revision, or b"" if the file isn't there. """
    blob = blobAt(resolveCommit(repo, revision).tree, path)
    return blob.data if blob is not None else b""


def committedPath(repo: pygit2.Repository, path: str) -> str:
    """
    Path under which a file was last committed. This differs from `path` if
    the file has been renamed in the index but the rename isn't committed yet.
    """
    try:
        headTree = repo.head.peel(pygit2.Commit).tree
    except pygit2.GitError:
        # Unborn HEAD
        return path

    if blobAt(headTree, path) is not None:
        return path

    diff = repo.index.diff_to_tree(headTree)
    diff.find_similar()
    for delta in diff.deltas:
        if delta.status == DeltaStatus.RENAMED and delta.new_file.path == path:
            logger.debug(f"Staged rename: {delta.old_file.path} -> {path}")
            return delta.old_file.path

    return path


def _pathInParent(parentTree: pygit2.Tree, childTree: pygit2.Tree, path: str,
                  blobId: pygit2.Oid) -> tuple[str, pygit2.Oid | None]:
    # Most common case: the path is in the parent's tree.
    blob = blobAt(parentTree, path)
    if blob is not None:
        return path, blob.id

    diff = parentTree.diff_to_tree(childTree)

    # If we're lucky, the commit has renamed the file without modifying it.
    # (This lets us bypass find_similar and save a ton of time.)
    adds, dels = 0, 0
    for delta in diff.deltas:
        if delta.status == DeltaStatus.DELETED:
            dels += 1
            if delta.old_file.id == blobId:
                return delta.old_file.path, blobId
        elif delta.status == DeltaStatus.ADDED:
            adds += 1

    # For a rename to occur, we need at least an add and a del.
    if adds == 0 or dels == 0:
        return "", None

    # Fall back to find_similar. Slow!
    diff.find_similar()
    for delta in diff.deltas:
        if delta.status == DeltaStatus.RENAMED and delta.new_file.path == path:
            return delta.old_file.path, delta.old_file.id

    # The file was created in the child commit.
    return "", None


def fileHistory(repo: pygit2.Repository, path: str, revision: str | None = None) -> list[FileRevision]:
    """
    List the commits that changed a file, newest first, starting at
    `revision` (HEAD if None). Renames are followed: each entry carries the
    path of the file as of that commit.

    A merge commit is listed only if the file differs from all its parents.
    """
    startCommit = resolveCommit(repo, revision)

    pending: dict[pygit2.Oid, str] = {startCommit.id: path}
    history = []

    for commit in repo.walk(startCommit.id, SortMode.TOPOLOGICAL | SortMode.TIME):
        commitPath = pending.pop(commit.id, None)
        if commitPath is None:
            continue

        blob = blobAt(commit.tree, commitPath)
        if blob is None:
            continue

        changed = True
        for parent in commit.parents:
            parentPath, parentBlobId = _pathInParent(parent.tree, commit.tree, commitPath, blob.id)
            if parentBlobId == blob.id and parentPath == commitPath:
                changed = False
            if parentPath:
                pending.setdefault(parent.id, parentPath)

        if changed:
            history.append(FileRevision(
                revision=str(commit.id),
                author=commit.author.name,
                authorEmail=commit.author.email,
                date=dateFromTimestamp(commit.commit_time),
                path=commitPath,
                message=commit.message,
                patchAvailable=not blob.is_binary,
            ))

        if not pending:
            break

    logger.debug(f"History of {path}: {len(history)} revisions")
    return history

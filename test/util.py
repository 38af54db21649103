# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import os
import shutil
import tempfile

import pygit2
import pytest

from . import *

TEST_SIGNATURE = pygit2.Signature("Test Person", "toto@example.com", 1672600000, 0)

requiresGit = pytest.mark.skipif(
    not shutil.which("git"),
    reason="Requires git")


def signatureAt(time: int, name=TEST_SIGNATURE.name, email=TEST_SIGNATURE.email):
    return pygit2.Signature(name, email, time, 0)


def writeFile(path, text):
    # Prevent accidental littering of current working directory
    assert os.path.isabs(path), "pass me an absolute path"

    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(text.encode("utf-8") if isinstance(text, str) else text)


def readTextFile(path):
    with open(path, encoding="utf-8") as f:
        return f.read()


def makeRepo(tempDir: tempfile.TemporaryDirectory | str, name="TestRepo") -> str:
    tempDirPath = tempDir if isinstance(tempDir, str) else tempDir.name

    path = os.path.realpath(f"{tempDirPath}/{name}")
    assert not os.path.exists(path)

    pygit2.init_repository(path, initial_head="master")

    path += "/"  # ease direct comparison with workdir path produced by libgit2 (it appends a slash)
    return path


def commitFiles(
        workdir: str,
        message: str,
        files: dict[str, str | bytes | None],
        signature: pygit2.Signature = TEST_SIGNATURE,
) -> str:
    """
    Write (or delete, if the contents are None) some files in the working
    directory, and commit them on HEAD. Returns the new commit's id.
    """
    repo = pygit2.Repository(workdir)
    index = repo.index
    index.read()

    for relPath, contents in files.items():
        fullPath = os.path.join(workdir, relPath)
        if contents is None:
            os.unlink(fullPath)
            index.remove(relPath)
        else:
            writeFile(fullPath, contents)
            index.add(relPath)

    index.write()
    tree = index.write_tree()
    parents = [] if repo.head_is_unborn else [repo.head.target]
    oid = repo.create_commit("HEAD", signature, signature, message, tree, parents)
    return str(oid)


def renameFile(workdir: str, oldPath: str, newPath: str, stage=True):
    repo = pygit2.Repository(workdir)
    os.rename(os.path.join(workdir, oldPath), os.path.join(workdir, newPath))
    if stage:
        index = repo.index
        index.read()
        index.remove(oldPath)
        index.add(newPath)
        index.write()


def commitRename(workdir: str, oldPath: str, newPath: str, message: str,
                 signature: pygit2.Signature = TEST_SIGNATURE) -> str:
    renameFile(workdir, oldPath, newPath)
    return commitFiles(workdir, message, {}, signature)


def porcelainGroup(commitId: str, finalLine: int, text: str, author="", time=0, origLine=0, groupSize=0) -> str:
    """ Build one group of "git blame --porcelain" output. """
    header = f"{commitId} {origLine or finalLine} {finalLine}"
    if groupSize:
        header += f" {groupSize}"
    lines = [header]
    if author:
        lines += [
            f"author {author}",
            f"author-mail <{author.lower().replace(' ', '.')}@example.com>",
            f"author-time {time}",
            "author-tz +0000",
            f"committer {author}",
            f"committer-mail <{author.lower().replace(' ', '.')}@example.com>",
            f"committer-time {time}",
            "committer-tz +0000",
            "summary Some commit",
            "filename hello.txt",
        ]
    lines.append("\t" + text)
    return "\n".join(lines) + "\n"

# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator

import pygit2
import pytest


@pytest.fixture(scope="session", autouse=True)
def maskHostGitConfig():
    """
    Keep the host's git config files out of unit tests, both for libgit2
    (history, status) and for the git executable (blame).
    """
    ConfigLevel = pygit2.enums.ConfigLevel
    for level in (ConfigLevel.GLOBAL, ConfigLevel.XDG, ConfigLevel.SYSTEM, ConfigLevel.PROGRAMDATA):
        pygit2.settings.search_path[level] = ""

    os.environ["GIT_CONFIG_NOSYSTEM"] = "1"
    os.environ["GIT_CONFIG_GLOBAL"] = os.devnull


@pytest.fixture(scope='session', autouse=True)
def setUpLogging():
    rootLogger = logging.root
    rootLogger.setLevel(logging.DEBUG)

    yield

    # Chatty destructors may cause spam after pytest has wound down.
    # Work around https://github.com/pytest-dev/pytest/issues/5502
    for handler in rootLogger.handlers:
        rootLogger.removeHandler(handler)


@pytest.fixture(scope="session")
def qapp_cls():
    from gitannotate.qt import QCoreApplication
    yield QCoreApplication


@pytest.fixture
def tempDir() -> Generator[tempfile.TemporaryDirectory, None, None]:
    td = tempfile.TemporaryDirectory(prefix="gitannotatetest-")
    yield td
    td.cleanup()


@pytest.fixture(autouse=True)
def isolatedPrefs(tempDir):
    """
    Keep prefs files (including the annotation cache) in a temp folder,
    and start every test from default prefs.
    """
    from gitannotate import settings
    from gitannotate.appconsts import APP_TESTMODE
    from gitannotate.prefsfile import PrefsFile

    assert APP_TESTMODE

    prefsDir = os.path.join(tempDir.name, "prefs")
    PrefsFile.overrideDir = prefsDir
    settings.prefs = settings.Prefs()

    yield prefsDir

    PrefsFile.overrideDir = ""
    settings.prefs = settings.Prefs()

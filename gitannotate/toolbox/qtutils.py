# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from gitannotate.qt import *


def onAppThread():
    appInstance = QCoreApplication.instance()
    return bool(appInstance and appInstance.thread() is QThread.currentThread())


def waitForProcess(process: QProcess, pollInterval: int):
    """
    Block until the process has exited, yielding control back to the caller
    every `pollInterval` milliseconds. Meant to be driven with "yield from"
    so that the caller can check for cancellation between polls.
    """
    if process.state() == QProcess.ProcessState.Starting:
        process.waitForStarted(-1)

    while process.state() != QProcess.ProcessState.NotRunning:
        if process.waitForFinished(pollInterval):
            break
        yield

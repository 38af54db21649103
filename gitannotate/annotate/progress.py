# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Cooperative progress reporting and cancellation for long computations.

A computation is written as a generator ("flow") that yields Checkpoint
tokens at the points where it may be interrupted. runFlow() reports each
checkpoint's text, checks for cancellation, and resumes the flow.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

from gitannotate.appconsts import *
from gitannotate.qt import *
from gitannotate.toolbox.qtutils import onAppThread

logger = logging.getLogger(__name__)


class Checkpoint:
    """
    Object yielded by a flow to report progress and give its driver a chance
    to stop it. A checkpoint without text just checks for cancellation.
    """

    text: str

    def __init__(self, text: str = ""):
        self.text = text

    def __str__(self):
        return f"Checkpoint({self.text!r})"


FlowGeneratorType = Generator[Checkpoint, None, Any]


class AnnotationProgress(QObject):
    """
    Progress sink and cancellation handle for a computation.
    cancel() may be called from any thread.
    """

    textChanged = Signal(str)

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self._text = ""
        self._canceled = False

    def text(self) -> str:
        return self._text

    def setText(self, text: str):
        self._text = text
        self.textChanged.emit(text)

    def cancel(self):
        self._canceled = True

    def isCanceled(self) -> bool:
        return self._canceled


class FlowOutcome:
    value: Any = None
    canceled: bool = False
    exception: BaseException | None = None


def _driveFlow(flow: FlowGeneratorType, progress: AnnotationProgress, outcome: FlowOutcome):
    try:
        token = next(flow)
        while True:
            assert isinstance(token, Checkpoint), f"In a flow, you can only yield Checkpoint. You yielded: {type(token).__name__}"

            if token.text:
                progress.setText(token.text)

            if progress.isCanceled():
                # Run the flow's cleanup (finally blocks, context managers)
                flow.close()
                outcome.canceled = True
                return

            token = next(flow)

    except StopIteration as stop:
        outcome.value = stop.value


class FlowWorkerThread(QThread):
    flow: FlowGeneratorType | None
    progress: AnnotationProgress
    outcome: FlowOutcome

    def __init__(self, flow: FlowGeneratorType, progress: AnnotationProgress, parent: QObject | None = None):
        super().__init__(parent)
        self.setObjectName("FlowWorkerThread")
        self.flow = flow
        self.progress = progress
        self.outcome = FlowOutcome()

    def run(self):
        assert self.flow is not None, "flow not set"
        try:
            _driveFlow(self.flow, self.progress, self.outcome)
        except Exception as exc:
            self.outcome.exception = exc
        finally:
            self.flow = None


def runFlow(flow: FlowGeneratorType, progress: AnnotationProgress | None = None):
    """
    Run a flow to completion and return its value, or None if it was canceled.
    Exceptions raised by the flow propagate to the caller.

    If called from the app thread, the flow runs on a worker thread while a
    local event loop keeps the app responsive (and delivers progress signals).
    Otherwise, the flow runs inline.
    """

    if progress is None:
        progress = AnnotationProgress()

    if onAppThread() and not APP_NOTHREADS:
        thread = FlowWorkerThread(flow, progress)
        loop = QEventLoop()
        thread.finished.connect(loop.quit)
        thread.start()
        if not thread.isFinished():
            loop.exec()
        thread.wait()
        outcome = thread.outcome
        thread.deleteLater()
    else:
        outcome = FlowOutcome()
        _driveFlow(flow, progress, outcome)

    if outcome.exception is not None:
        raise outcome.exception

    if outcome.canceled:
        logger.info("Flow canceled")
        return None

    return outcome.value

# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Qt compatibility layer. GitAnnotate only needs QtCore.

PyQt6 is preferred, but PySide6 works too. Pick a binding with the QT_API
environment variable ("pyqt6" or "pyside6"). Unit tests read PYTEST_QT_API
instead, so that the binding matches pytest-qt's.
"""

import logging as _logging
import os as _os

_logger = _logging.getLogger(__name__)

_supportedBindings = ("pyqt6", "pyside6")


def _bindingCandidates() -> list[str]:
    wanted = (_os.environ.get("PYTEST_QT_API", "") or _os.environ.get("QT_API", "")).lower()
    candidates = list(_supportedBindings)

    if wanted in candidates:
        candidates.sort(key=lambda name: name != wanted)
    elif wanted:
        _logger.warning(f"Unrecognized Qt binding name: '{wanted}'")

    return candidates


QT_BINDING = ""
QT_BINDING_VERSION = ""
PYQT6 = False
PYSIDE6 = False

for _candidate in _bindingCandidates():
    try:
        if _candidate == "pyqt6":
            from PyQt6.QtCore import *
            QT_BINDING_VERSION = PYQT_VERSION_STR
            QT_BINDING = "PyQt6"
            PYQT6 = True
        else:
            from PySide6.QtCore import *
            from PySide6 import __version__ as QT_BINDING_VERSION
            QT_BINDING = "PySide6"
            PYSIDE6 = True
        break
    except ImportError as _exc:
        _logger.debug(f"Skipping Qt binding {_candidate}: {_exc}")
else:
    raise ImportError("No Qt binding found. Please install PyQt6 or PySide6.")

_logger.debug(f"Using {QT_BINDING} {QT_BINDING_VERSION}")

if PYQT6:
    Signal = pyqtSignal

KERNEL = QSysInfo.kernelType().lower()
WINDOWS = KERNEL == "winnt"

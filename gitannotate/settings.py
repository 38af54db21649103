# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import logging

from gitannotate.appconsts import *
from gitannotate.prefsfile import PrefsFile

logger = logging.getLogger(__name__)


class LoggingLevel(enum.IntEnum):
    Debug = logging.DEBUG
    Info = logging.INFO
    Warning = logging.WARNING


@dataclasses.dataclass
class Prefs(PrefsFile):
    _filename = "prefs.json"

    gitPath                     : str                   = "git"
    ignoreWhitespace            : bool                  = True
    detectMoves                 : bool                  = False
    processPollInterval         : int                   = 50
    verbosity                   : LoggingLevel          = LoggingLevel.Debug if APP_TESTMODE else LoggingLevel.Warning


# Initialize default prefs.
# The app should load the user's prefs with prefs.load().
prefs = Prefs()

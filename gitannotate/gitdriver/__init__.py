# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from .gitdriver import GitDriver
from .gitdriver import HEAD_REF
from .gitdriver import argsIf
from .parsers import parseGitBlame

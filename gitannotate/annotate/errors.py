# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

class AnnotationError(Exception):
    """ Base class for errors raised while annotating a file. """


class UsageError(AnnotationError):
    """ The caller asked for something that can't be annotated (e.g. a directory). """


class ToolInvocationError(AnnotationError):
    """
    Git couldn't produce an annotation: the process failed to start, exited
    with a non-zero code, was killed, or its output was unusable.
    The underlying cause (if any) is chained via __cause__.
    """

    def __init__(self, message: str, command: str = "", exitCode: int = 0, stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.exitCode = exitCode
        self.stderr = stderr


class ParseError(ToolInvocationError):
    """ Git's blame output contains a malformed field. """

    def __init__(self, message: str, rawText: str = "", lineNumber: int = 0):
        if rawText:
            message += f" (output line {lineNumber}: {rawText!r})"
        super().__init__(message)
        self.rawText = rawText
        self.lineNumber = lineNumber


class CacheMismatchError(AnnotationError):
    """ A cached annotation doesn't fit the current text or history of the file. """

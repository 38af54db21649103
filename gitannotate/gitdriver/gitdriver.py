# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import shlex
import signal

from gitannotate.qt import *

logger = logging.getLogger(__name__)

HEAD_REF = "HEAD"


def argsIf(condition: bool, *args: str) -> tuple[str, ...]:
    if condition:
        return args
    else:
        return ()


class GitDriver(QProcess):
    _commandStem = ["git"]

    @classmethod
    def setGitPath(cls, gitPath: str):
        # Treat command as POSIX even on Windows!
        cls._commandStem = shlex.split(gitPath, posix=True)

    @classmethod
    def buildBlameCommand(
            cls,
            path: str,
            revision: str | None = None,
            ignoreWhitespace: bool = True,
            detectMoves: bool = False,
    ) -> list[str]:
        """
        Arguments for "git blame" in porcelain mode with full-length hashes
        and raw timestamps. `path` is relative to the root of the working
        directory. Blame the tip of the branch if `revision` is None.
        """
        return [
            "blame",
            "--porcelain",
            "-l",
            "-t",
            *argsIf(ignoreWhitespace, "-w"),
            *argsIf(detectMoves, "-M"),
            revision or HEAD_REF,
            "--",
            path,
        ]

    def __init__(self, *args: str, parent: QObject | None = None):
        super().__init__(parent)

        self.setObjectName("GitDriver")

        tokens = GitDriver._commandStem + list(args)
        self.setProgram(tokens[0])
        self.setArguments(tokens[1:])

        # Force Git output in English
        env = QProcessEnvironment.systemEnvironment()
        env.insert("LC_ALL", "C.UTF-8")
        self.setProcessEnvironment(env)

        self._stdout: bytes | None = None
        self._stderr: bytes | None = None

    def stdoutBytes(self) -> bytes:
        if self._stdout is None:
            self._stdout = self.readAllStandardOutput().data()
        return self._stdout

    def stdoutScrollback(self, encoding: str = "utf-8") -> str:
        return self.stdoutBytes().decode(encoding, errors="replace")

    def stderrScrollback(self) -> str:
        if self._stderr is None:
            self._stderr = self.readAllStandardError().data()
        return '\n'.join(
            line.rstrip().decode("utf-8", errors="replace")
            for line in self._stderr.splitlines(keepends=True)
            if not line.endswith(b"\r")
        )

    def formatExitCode(self) -> str:
        code = self.exitCode()

        if WINDOWS:
            code32 = code & 0xFFFFFFFF
            if code32 == 0xC000013A:
                return f"SIGTERM equivalent (0x{code32:08X})"
            elif code32 == 0xF291:
                return f"SIGKILL equivalent (0x{code32:08X})"
            else:
                return f"{code}"

        if self.exitStatus() == QProcess.ExitStatus.CrashExit:
            return f"{code} (crashed)"

        try:
            s = signal.Signals(code)
            return f"{code} ({s.name})"
        except ValueError:
            pass

        return f"{code}"

    def formatCommandLine(self) -> str:
        return shlex.join([self.program()] + self.arguments())

    def succeeded(self) -> bool:
        return (self.error() != QProcess.ProcessError.FailedToStart
                and self.exitStatus() == QProcess.ExitStatus.NormalExit
                and self.exitCode() == 0)

    def errorText(self) -> str:
        if self.error() == QProcess.ProcessError.FailedToStart:
            return f"Couldn't start Git ({self.errorString()}): {self.formatCommandLine()}"

        text = f"Git command exited with code {self.formatExitCode()}: {self.formatCommandLine()}"
        stderr = self.stderrScrollback().strip()
        if stderr:
            text += "\n" + stderr
        return text

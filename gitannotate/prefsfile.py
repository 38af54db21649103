# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import json
import logging
import os
import tempfile
from pathlib import Path

from gitannotate.appconsts import *
from gitannotate.qt import *

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class PrefsFile:
    """
    Dataclass that can be saved to/loaded from a JSON file in the user's
    config directory. Subclasses must set `_filename`.
    """

    _filename = ""

    overrideDir = ""
    """ Store all prefs files in this directory instead of the standard
    config location (used by unit tests). """

    def __post_init__(self):
        self._dirty = False

    @classmethod
    def getParentDir(cls) -> str:
        if PrefsFile.overrideDir:
            return PrefsFile.overrideDir
        configDir = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.GenericConfigLocation)
        return os.path.join(configDir, APP_SYSTEM_NAME)

    def fullPath(self) -> str:
        assert self._filename, "PrefsFile subclass must set _filename"
        return os.path.join(self.getParentDir(), self._filename)

    def setDirty(self):
        self._dirty = True

    def isDirty(self) -> bool:
        return self._dirty

    def toDict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}

    def fromDict(self, data: dict):
        for field in dataclasses.fields(self):
            try:
                value = data[field.name]
            except KeyError:
                continue

            fieldType = field.type
            if isinstance(fieldType, type) and issubclass(fieldType, enum.Enum):
                try:
                    value = fieldType(value)
                except ValueError:
                    logger.warning(f"{self._filename}: ignoring illegal value for {field.name}: {value}")
                    continue

            setattr(self, field.name, value)

    def load(self) -> bool:
        path = self.fullPath()

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return False
        except (OSError, ValueError) as exc:
            logger.warning(f"Couldn't load {path}: {exc}")
            return False

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {path}: top-level object isn't a dict")
            return False

        self.fromDict(data)
        self._dirty = False
        return True

    def write(self, force=False) -> bool:
        if not self._dirty and not force:
            return False

        path = self.fullPath()
        os.makedirs(os.path.dirname(path), exist_ok=True)

        blob = json.dumps(self.toDict(), indent=1)

        # Write to a temp file first, then swap it in atomically
        tempPath: Path | None = None
        try:
            with tempfile.NamedTemporaryFile("w", dir=os.path.dirname(path), delete=False,
                                             suffix=".tmp", encoding="utf-8") as f:
                tempPath = Path(f.name)
                f.write(blob)
            tempPath.replace(path)
        except OSError as exc:
            if tempPath is not None:
                tempPath.unlink(missing_ok=True)
            logger.warning(f"Couldn't write {path}: {exc}")
            return False

        logger.debug(f"Wrote {path}")
        self._dirty = False
        return True

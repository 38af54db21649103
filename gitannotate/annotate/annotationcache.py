# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import logging
import os
import threading

from gitannotate.annotate.cachecodec import CacheEntry
from gitannotate.prefsfile import PrefsFile

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class AnnotationCache(PrefsFile):
    """
    Store of cached annotations keyed by absolute file path.

    Safe to use from several threads. A reader may get an entry that is
    about to be replaced; callers validate entries with restore() anyway.
    """

    _filename = "annotations.json"

    entries: dict = dataclasses.field(default_factory=dict)

    def __post_init__(self):
        super().__post_init__()
        self._lock = threading.Lock()

    @staticmethod
    def normalizeKey(path: str) -> str:
        return os.path.normpath(os.path.abspath(path))

    def get(self, path: str) -> CacheEntry | None:
        key = self.normalizeKey(path)

        with self._lock:
            data = self.entries.get(key, None)

        if data is None:
            return None

        try:
            return CacheEntry.fromJson(key, data)
        except ValueError as exc:
            logger.warning(f"Dropping cached annotation: {exc}")
            self.invalidate(path)
            return None

    def put(self, entry: CacheEntry):
        key = self.normalizeKey(entry.path)

        with self._lock:
            self.entries[key] = entry.toJson()
            self.setDirty()

    def invalidate(self, path: str):
        key = self.normalizeKey(path)

        with self._lock:
            if self.entries.pop(key, None) is not None:
                self.setDirty()

    def clear(self):
        with self._lock:
            self.entries.clear()
            self.setDirty()

    def __len__(self):
        return len(self.entries)

    def __contains__(self, path: str):
        return self.normalizeKey(path) in self.entries

    def toDict(self) -> dict:
        with self._lock:
            return {"entries": dict(self.entries)}

    def fromDict(self, data: dict):
        entries = data.get("entries", {})
        if not isinstance(entries, dict):
            logger.warning(f"{self._filename}: ignoring malformed entries")
            return

        with self._lock:
            self.entries = dict(entries)

# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import json
import os

from gitannotate.annotate import *
from .util import *

HASH_A = "a" * 40


def testCacheGetPut(tempDir):
    cache = AnnotationCache()
    path = os.path.join(tempDir.name, "hello.txt")

    assert cache.get(path) is None
    assert not cache.isDirty()

    cache.put(CacheEntry(path, (HASH_A, HASH_A)))
    assert path in cache
    assert len(cache) == 1
    assert cache.isDirty()

    entry = cache.get(path)
    assert entry.revisions == (HASH_A, HASH_A)

    # Keys are normalized
    assert cache.get(os.path.join(tempDir.name, "subdir", "..", "hello.txt")) == entry

    cache.invalidate(path)
    assert cache.get(path) is None
    assert len(cache) == 0


def testCacheClear(tempDir):
    cache = AnnotationCache()
    for name in "abc":
        cache.put(CacheEntry(os.path.join(tempDir.name, name), (HASH_A,)))
    assert len(cache) == 3

    cache.clear()
    assert len(cache) == 0


def testCachePersistence(tempDir, isolatedPrefs):
    path = os.path.join(tempDir.name, "hello.txt")

    cache = AnnotationCache()
    cache.put(CacheEntry(path, (HASH_A, None)))
    assert cache.write()
    assert not cache.isDirty()
    assert not cache.write()  # not dirty anymore

    assert cache.fullPath() == os.path.join(isolatedPrefs, "annotations.json")
    assert os.path.isfile(cache.fullPath())

    cache2 = AnnotationCache()
    assert cache2.load()
    assert cache2.get(path) == CacheEntry(path, (HASH_A, None))


def testCacheLoadMissingFile():
    cache = AnnotationCache()
    assert not cache.load()
    assert len(cache) == 0


def testCacheLoadCorruptFile(isolatedPrefs):
    cache = AnnotationCache()
    writeFile(cache.fullPath(), "{ this isn't json")

    assert not cache.load()
    assert len(cache) == 0


def testCacheDropsMalformedEntry(tempDir, isolatedPrefs):
    path = os.path.join(tempDir.name, "hello.txt")
    good = os.path.join(tempDir.name, "good.txt")

    cache = AnnotationCache()
    writeFile(cache.fullPath(), json.dumps({"entries": {path: {"bogus": 1}, good: [HASH_A]}}))
    assert cache.load()

    assert cache.get(path) is None
    assert path not in cache
    assert cache.isDirty()
    assert cache.get(good).revisions == (HASH_A,)


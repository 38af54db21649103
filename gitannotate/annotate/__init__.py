# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Annotate (blame) files with "git blame --porcelain", and cache the results.

The provider lives in gitannotate.annotate.provider (it pulls in the git
driver, which itself depends on the data model exported here).
"""

from gitannotate.annotate.annotationcache import AnnotationCache
from gitannotate.annotate.cachecodec import CacheEntry, createCacheable, restore
from gitannotate.annotate.commitinfo import UNCOMMITTED_HASH, CommitInfo, CommitInfoCache
from gitannotate.annotate.errors import (
    AnnotationError,
    CacheMismatchError,
    ParseError,
    ToolInvocationError,
    UsageError,
)
from gitannotate.annotate.fileannotation import AnnotationBuilder, FileAnnotation, FileRevision, LineRecord
from gitannotate.annotate.progress import AnnotationProgress, Checkpoint, runFlow

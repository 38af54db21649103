# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging as _logging
import sys as _sys


def annotateCommandLineTool():  # pragma: no cover
    from argparse import ArgumentParser

    from gitannotate import settings
    from gitannotate.annotate import AnnotationCache, AnnotationError, AnnotationProgress
    from gitannotate.annotate.provider import AnnotationProvider
    from gitannotate.appconsts import APP_DISPLAY_NAME, APP_VERSION
    from gitannotate.qt import QCoreApplication

    parser = ArgumentParser(description=f"{APP_DISPLAY_NAME} {APP_VERSION}: annotate a file with git blame")
    parser.add_argument("path", help="File path")
    parser.add_argument("-r", "--revision", default="", help="Annotate the file as of this commit")
    parser.add_argument("--no-cache", action="store_true", help="Don't use the annotation cache")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    settings.prefs.load()
    level = _logging.DEBUG if args.verbose else settings.prefs.verbosity
    _logging.basicConfig(level=level)
    _logging.captureWarnings(True)

    # Annotations run on a worker thread while a local event loop relays progress
    _app = QCoreApplication(_sys.argv[:1])

    progress = AnnotationProgress()
    progress.textChanged.connect(lambda text: print(f"{text}...", file=_sys.stderr))

    provider = AnnotationProvider()

    try:
        if args.revision:
            annotation = provider.annotatePath(args.path, args.revision, progress)
        elif args.no_cache:
            annotation = provider.annotate(args.path, progress=progress)
        else:
            cache = AnnotationCache()
            cache.load()
            annotation = provider.annotateCached(args.path, cache, progress)
            cache.write()
    except AnnotationError as exc:
        print(f"{APP_DISPLAY_NAME}: {exc}", file=_sys.stderr)
        _sys.exit(1)

    if annotation is None:
        _sys.exit(2)

    print(annotation.toPlainText(), end="")


if __name__ == '__main__':
    annotateCommandLineTool()

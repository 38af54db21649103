# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of GitAnnotate, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import codecs

# Number of bytes to look at when guessing the encoding of a file
SNIFF_LENGTH = 8192

# The UTF-32 BOMs start with the UTF-16 BOMs, so they must be tested first.
# Pick codecs that consume the BOM for UTF-16/32. The UTF-8 BOM is kept so that
# the first line reads the same whether it comes from git or from the file.
_byteOrderMarks = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)

# Encodings in which git sees a file as binary
WIDE_ENCODINGS = ("utf-16", "utf-32")


def detectEncoding(data: bytes) -> str:
    """
    Guess the text encoding of a file from its first few bytes.
    Returns a Python codec name.

    A byte-order mark wins. Otherwise, UTF-8 is assumed if the sample decodes
    cleanly as UTF-8 (ignoring a multibyte sequence cut off at the end of the
    sample), else Latin-1.
    """
    sample = data[:SNIFF_LENGTH]

    for bom, encoding in _byteOrderMarks:
        if sample.startswith(bom):
            return encoding

    try:
        sample.decode("utf-8")
    except UnicodeDecodeError as exc:
        truncated = len(sample) == SNIFF_LENGTH and exc.start >= len(sample) - 3
        if not truncated:
            return "latin-1"

    return "utf-8"


def splitLines(text: str) -> list[str]:
    """
    Split text into lines after converting CRLF and lone CR to LF.
    A trailing newline doesn't start an extra line, and empty text has no lines.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        del lines[-1]
    return lines

"""File name helpers for matching backup records to converted content files."""

from __future__ import annotations

import re
import unicodedata
from pathlib import PurePosixPath

from pathvalidate import Platform, sanitize_filename

from qdavault.constants import DOCUMENT_EXTENSIONS

_DOCUMENT_EXTENSION_RE = re.compile(
    r"\.(" + "|".join(re.escape(ext) for ext in DOCUMENT_EXTENSIONS) + r")$",
    re.IGNORECASE,
)


def strip_document_extension(name: str) -> str:
    """Remove one trailing common document extension (.docx, .pdf, ...).

    Other extensions are left alone, so "notes.v2" stays "notes.v2".

    Example:
        >>> strip_document_extension("Interview 1.DOCX")
        'Interview 1'
    """
    return _DOCUMENT_EXTENSION_RE.sub("", name)


_UNSAFE_FILENAME_CHARS_RE = re.compile(r'[/\\:*?"<>|]')


def sanitize_candidate_name(name: str) -> str:
    """Replace the characters ``/ \\ : * ? " < > |`` with underscores.

    Nothing else changes, so trailing dots, spaces and reserved names
    survive exactly as the exporter wrote them.

    Example:
        >>> sanitize_candidate_name("Q1/Q2: notes?")
        'Q1_Q2_ notes_'
    """
    return _UNSAFE_FILENAME_CHARS_RE.sub("_", name)


def portable_filename(name: str) -> str:
    """File name valid on every platform (Windows rules are the strictest).

    Besides replacing unsafe characters this drops trailing dots and spaces,
    replaces control characters and suffixes reserved names such as ``CON``.

    Example:
        >>> portable_filename("Q1: notes.")
        'Q1_ notes'
    """
    normalized = unicodedata.normalize("NFC", name)
    return sanitize_filename(
        normalized,
        platform=Platform.WINDOWS,
        replacement_text="_",
    )


def path_stem(path: str) -> str:
    """Base name of a recorded upload path without its last extension.

    Both forward and backward slashes are treated as separators.

    Example:
        >>> path_stem("uploads/7/Interview 1.docx")
        'Interview 1'
    """
    return PurePosixPath(path.replace("\\", "/")).stem

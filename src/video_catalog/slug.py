"""Filename slugs for video titles."""

from __future__ import annotations

import re
import unicodedata

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w-]+", re.ASCII)
_REPEATED_HYPHENS = re.compile(r"--+")


def slugify(text) -> str:
    """Lowercase ASCII slug: diacritics stripped, whitespace runs become ``-``."""

    value = unicodedata.normalize("NFD", str(text))
    value = _COMBINING_MARKS.sub("", value)
    value = value.lower().strip()
    value = _WHITESPACE.sub("-", value)
    value = _NON_WORD.sub("", value)
    return _REPEATED_HYPHENS.sub("-", value)

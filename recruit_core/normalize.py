"""
Text and key normalization helpers.

Catalog text arriving from spreadsheets or CMS exports is cleaned here
(HTML stripping, unicode normalization, whitespace collapsing) so every
loader treats it the same way.  The legacy-key helpers fold the several
naming conventions seen in imported records (``matchScore``,
``match_score``, ``Match Score``) into one snake_case spelling.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Hashable, Iterable, List, TypeVar

from bs4 import BeautifulSoup

from .config import MAX_INPUT_CHARS

T = TypeVar("T", bound=Hashable)


# ---------------------------
# Basic helpers
# ---------------------------

def clamp_text_length(text: str, max_chars: int = MAX_INPUT_CHARS) -> str:
    """
    Hard cap on input size so a stray blob in a catalog cell cannot
    bloat every response that carries it.
    """
    if not isinstance(text, str):
        text = str(text)
    if len(text) <= max_chars:
        return text
    return text[:max_chars]


def strip_html(raw: str) -> str:
    """
    Strip HTML tags using BeautifulSoup, then clean up whitespace and
    spacing around punctuation.  If parsing fails, the input is
    returned unchanged to fail open rather than drop text.
    """
    if not raw:
        return ""
    # No '<' means it is not HTML
    if "<" not in raw:
        return raw

    try:
        soup = BeautifulSoup(raw, "lxml")
        text = soup.get_text(" ", strip=True)
        text = normalize_whitespace(text)
        text = re.sub(r"\s+([.,!?;:])", r"\1", text)
        return text
    except Exception:
        return raw


def normalize_unicode(text: str) -> str:
    """
    Normalize fancy quotes and composed characters into NFC.
    """
    if not text:
        return ""
    return unicodedata.normalize("NFC", text)


def normalize_whitespace(text: str) -> str:
    """
    Collapse all whitespace runs into a single space and strip edges.
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def normalize_multiline(text: str) -> str:
    """
    Like :func:`normalize_whitespace` but keeps line breaks, which
    template instructions use for numbered task lists.
    """
    if not text:
        return ""
    lines = [re.sub(r"[ \t\f\v]+", " ", ln).strip() for ln in text.splitlines()]
    return "\n".join(ln for ln in lines if ln)


# ---------------------------
# Ordering helpers
# ---------------------------

def dedup_preserve_order(items: Iterable[T]) -> List[T]:
    """Drop repeated items, keeping the first occurrence of each."""
    seen = set()
    out: List[T] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


# ---------------------------
# Legacy key canonicalisation
# ---------------------------

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NON_WORD_RE = re.compile(r"[^0-9a-zA-Z]+")


def to_snake_case(key: str) -> str:
    """
    Fold ``matchScore``, ``match_score``, ``Match Score`` and
    ``match-score`` into ``match_score``.
    """
    if not key:
        return ""
    s = _CAMEL_BOUNDARY_RE.sub("_", str(key).strip())
    s = _NON_WORD_RE.sub("_", s)
    return s.strip("_").lower()


# ---------------------------
# High-level pipelines
# ---------------------------

def basic_clean(text: str) -> str:
    """
    End-to-end cleaning for single-line catalog fields:

    - clamp length
    - strip HTML
    - normalize unicode
    - normalize whitespace
    """
    if text is None:
        return ""
    text = clamp_text_length(str(text))
    text = strip_html(text)
    text = normalize_unicode(text)
    text = normalize_whitespace(text)
    return text


def clean_instructions(text: str) -> str:
    """Same as :func:`basic_clean` but line structure survives."""
    if text is None:
        return ""
    text = clamp_text_length(str(text))
    if "<" in text:
        # strip_html flattens newlines, so protect them first
        text = "\n".join(strip_html(ln) for ln in text.splitlines())
    text = normalize_unicode(text)
    return normalize_multiline(text)

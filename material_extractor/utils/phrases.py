"""
Phrase extraction: pulls composition clauses ("55% linen") out of longer text,
and decides when a line is already a clean labeled composition line.
"""
import re
from typing import List, Optional

from material_extractor.config import config
from material_extractor.models.materials import HitSet
from material_extractor.utils.lexicon import (
    FIBER_PATTERN,
    has_fiber,
    has_percent,
    is_excluded,
    is_material_candidate,
    normalize_text,
)

# <percent> <up to three words> <fiber>
PHRASE_RE = re.compile(
    rf"\b\d{{1,3}}\s*%\s*(?:[a-z]+\s+){{0,3}}(?:{FIBER_PATTERN})\b",
    re.IGNORECASE,
)

ENTRY_DELIMITER_RE = re.compile(r"\n+|•|·|\|")


def extract_phrases(text: str, limit: Optional[int] = None) -> List[str]:
    """
    Return the minimal composition statements found in ``text``.

    Matches are normalized, deduplicated by lowercase form and capped.
    """
    hits = HitSet(limit or config.MAX_HITS)
    if not text:
        return []
    for match in PHRASE_RE.finditer(text):
        hits.add(match.group(0))
        if hits.full:
            break
    return hits.items


def is_labeled_line(text: str) -> bool:
    """A short "Label: 100% Fiber" line that should be kept whole."""
    return (
        bool(text)
        and len(text) <= config.LABELED_LINE_MAX_CHARS
        and ":" in text
        and has_percent(text)
        and has_fiber(text)
        and not is_excluded(text)
    )


def split_entries(text: str) -> List[str]:
    """Split on newline/bullet/middle-dot/pipe and normalize each entry."""
    if not text:
        return []
    entries = (normalize_text(part) for part in ENTRY_DELIMITER_RE.split(text))
    return [entry for entry in entries if entry]


def accumulate_hits(text: str, hits: HitSet) -> None:
    """Feed one piece of page text into a hit set."""
    text = normalize_text(text)
    if not text or hits.full or is_excluded(text):
        return

    if is_labeled_line(text):
        hits.add(text)
        return

    for phrase in extract_phrases(text):
        if is_material_candidate(phrase):
            hits.add(phrase)
        if hits.full:
            return

"""
Candidate Post-Processor.

Collapses the raw hits of one source into a single display string:
dedup, drop fragments subsumed by a longer entry, then pick the entry that
reads most like a composition label (or join co-equal entries).
"""
import re
from typing import List, Optional, Set, Tuple

from material_extractor.config import config
from material_extractor.models.materials import HIT_DELIMITER
from material_extractor.utils.lexicon import has_fiber, has_percent
from material_extractor.utils.phrases import split_entries

MARKETING_ADJECTIVE_RE = re.compile(
    r"\b(soft|softest|premium|comfortable|comfy|perfect|everyday|luxurious|"
    r"stylish|versatile|timeless|effortless)\b",
    re.IGNORECASE,
)

# An entry is subsumed only by one at least this much longer
SUBSET_LENGTH_MARGIN = 6
# Winner must lead the runner-up by this many points to stand alone
LABEL_WINNER_MARGIN = 2
MAX_JOINED_ENTRIES = 4
TOKEN_PUNCTUATION = ",.;:()[]\"'"


def dedupe_entries(entries: List[str]) -> List[str]:
    seen = set()
    unique = []
    for entry in entries:
        key = entry.lower()
        if key not in seen:
            seen.add(key)
            unique.append(entry)
    return unique


def is_subsumed(entry: str, other: str) -> bool:
    """True if ``other`` is a longer, more complete statement covering ``entry``."""
    if len(other) < len(entry) + SUBSET_LENGTH_MARGIN:
        return False
    entry_lower = entry.lower()
    other_lower = other.lower()
    if entry_lower in other_lower:
        return True
    tokens = _tokens(entry_lower)
    return bool(tokens) and tokens <= _tokens(other_lower)


def _tokens(text: str) -> Set[str]:
    """Whitespace-delimited tokens with surrounding punctuation removed."""
    stripped = (token.strip(TOKEN_PUNCTUATION) for token in text.split())
    return {token for token in stripped if token}


def suppress_subsets(entries: List[str]) -> List[str]:
    return [
        entry for entry in entries
        if not any(other is not entry and is_subsumed(entry, other) for other in entries)
    ]


def label_score(entry: str) -> int:
    """Label-density score: favors short, labeled percent/fiber lines."""
    score = 0
    if has_percent(entry):
        score += 3
    if has_fiber(entry):
        score += 2
    if ":" in entry:
        score += 2
    if len(entry) > config.FIELD_ENTRY_MAX_CHARS:
        score -= 2
    if MARKETING_ADJECTIVE_RE.search(entry):
        score -= 2
    return score


def rank_entries(entries: List[str]) -> List[Tuple[int, str]]:
    """Entries by label score, longest first among equals."""
    scored = [(label_score(entry), entry) for entry in entries]
    return sorted(scored, key=lambda item: (-item[0], -len(item[1])))


def collapse_candidates(raw: str) -> Optional[str]:
    """Reduce a joined raw-hit string to one display string, or None."""
    entries = suppress_subsets(dedupe_entries(split_entries(raw)))

    if not entries:
        return None
    if len(entries) == 1:
        return entries[0]

    ranked = rank_entries(entries)
    (top_score, top_entry), (runner_up_score, _) = ranked[0], ranked[1]
    if top_score - runner_up_score >= LABEL_WINNER_MARGIN:
        return top_entry

    return HIT_DELIMITER.join(entry for _, entry in ranked[:MAX_JOINED_ENTRIES])

"""
Candidate Scorer & Selector.

Scores the final string of each source for how much it reads like a
composition label rather than marketing prose, rejects description blobs,
and picks the winner.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from material_extractor.models.materials import (
    ExtractionResult,
    MaterialCandidate,
    ScoredCandidate,
)
from material_extractor.utils.lexicon import fiber_names, has_percent
from material_extractor.utils.logger import LayerLogger

TERMINAL_PUNCTUATION_RE = re.compile(r"[.!?](?=\s|$)")
DIGIT_RE = re.compile(r"\d")
LABELED_SPEC_RE = re.compile(
    r"(?:^|[\n•·|.;])\s*(?:shell|lining|body|fabric|trim|pocket|fill|outer|inner)\s*:",
    re.IGNORECASE,
)
NARRATIVE_RE = re.compile(
    r"cozy|warm|embrace|hugged|revamped|designed in-house|authentic touch|"
    r"no-gimmicks|elegant",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ScoreWeights:
    """Empirical scoring constants; tune here, not in the algorithm."""
    percent_bonus: int = 10
    per_fiber_bonus: int = 2
    digit_bonus_cap: int = 4
    long_length: int = 220
    very_long_length: int = 350
    length_penalty: int = 8
    one_sentence_penalty: int = 4
    many_sentences_penalty: int = 6
    labeled_relief: int = 4
    narrative_penalty: int = 6
    short_length: int = 6
    short_penalty: int = 5
    blob_length: int = 350
    blob_score_floor: int = 20


DEFAULT_WEIGHTS = ScoreWeights()

logger = LayerLogger("candidate_scorer")


def count_terminal_punctuation(text: str) -> int:
    return len(TERMINAL_PUNCTUATION_RE.findall(text))


def has_labeled_spec_format(text: str) -> bool:
    """Detect labeled spec lines such as "Shell: 100% Cotton"."""
    return LABELED_SPEC_RE.search(text) is not None


def score_candidate(text: str, weights: ScoreWeights = DEFAULT_WEIGHTS) -> int:
    score = 0
    if has_percent(text):
        score += weights.percent_bonus
    score += weights.per_fiber_bonus * len(fiber_names(text))
    score += min(weights.digit_bonus_cap, len(DIGIT_RE.findall(text)))

    length_penalty = 0
    if len(text) > weights.long_length:
        length_penalty += weights.length_penalty
    if len(text) > weights.very_long_length:
        length_penalty += weights.length_penalty

    punctuation_penalty = 0
    sentences = count_terminal_punctuation(text)
    if sentences >= 1:
        punctuation_penalty += weights.one_sentence_penalty
    if sentences >= 2:
        punctuation_penalty += weights.many_sentences_penalty

    if has_labeled_spec_format(text):
        length_penalty = max(0, length_penalty - weights.labeled_relief)
        punctuation_penalty = max(0, punctuation_penalty - weights.labeled_relief)

    score -= length_penalty + punctuation_penalty

    if NARRATIVE_RE.search(text):
        score -= weights.narrative_penalty
    if len(text) < weights.short_length:
        score -= weights.short_penalty

    return score


def looks_like_description_blob(
    text: str,
    score: Optional[int] = None,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> bool:
    """Long, low-scoring, sentence-punctuated text is prose, not a label."""
    if score is None:
        score = score_candidate(text, weights)
    return (
        len(text) > weights.blob_length
        and score < weights.blob_score_floor
        and count_terminal_punctuation(text) > 0
    )


def rank_candidates(
    candidates: Sequence[Optional[MaterialCandidate]],
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> List[ScoredCandidate]:
    """Score every present candidate, flagging description blobs."""
    scored = []
    for candidate in candidates:
        if candidate is None or not candidate.text:
            continue
        score = score_candidate(candidate.text, weights)
        scored.append(ScoredCandidate(
            candidate=candidate,
            score=score,
            rejected=looks_like_description_blob(candidate.text, score, weights),
        ))
    return scored


def select_best(
    candidates: Sequence[Optional[MaterialCandidate]],
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> ExtractionResult:
    """
    Pick the strictly highest-scoring surviving candidate.

    Candidates are expected in source-priority order (structured data, leaf,
    container); ties keep the earlier one.
    """
    scored = rank_candidates(candidates, weights)

    best: Optional[ScoredCandidate] = None
    for entry in scored:
        if entry.rejected:
            continue
        if best is None or entry.score > best.score:
            best = entry

    logger.log_candidates(
        [entry.to_log() for entry in scored],
        winner=best.candidate.source.value if best else None,
    )

    if best is None:
        return ExtractionResult.none()
    return ExtractionResult.from_candidate(best.candidate)

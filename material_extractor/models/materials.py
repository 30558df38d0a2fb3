"""
Material extraction models.

Every object here lives for a single extraction call; nothing is cached
between requests.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from material_extractor.utils.lexicon import has_fiber, has_percent, normalize_text

EXTRACT_MATERIALS_REQUEST = "EXTRACT_MATERIALS"
HIT_DELIMITER = " • "


class MaterialSource(str, Enum):
    """Where a candidate string came from."""
    STRUCTURED_EXPLICIT = "structured_explicit"
    STRUCTURED_DESCRIPTION = "structured_description"
    DOM_LEAF = "dom_leaf"
    DOM_CONTAINER = "dom_container"


class Confidence(str, Enum):
    """Coarse signal strength of the final result."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ResultSource(str, Enum):
    """Provenance reported to the display surface."""
    NONE = "none"
    JSONLD = "jsonld"
    DOM_LEAF = "dom_leaf"
    DOM_CONTAINER = "dom_container"


_RESULT_SOURCES = {
    MaterialSource.STRUCTURED_EXPLICIT: ResultSource.JSONLD,
    MaterialSource.STRUCTURED_DESCRIPTION: ResultSource.JSONLD,
    MaterialSource.DOM_LEAF: ResultSource.DOM_LEAF,
    MaterialSource.DOM_CONTAINER: ResultSource.DOM_CONTAINER,
}


def confidence_for(text: str) -> Confidence:
    """
    Derive the confidence tier from pattern strength.

    high: has a percentage; medium: names a fiber; low: anything else.
    """
    if not text:
        return Confidence.NONE
    if has_percent(text):
        return Confidence.HIGH
    if has_fiber(text):
        return Confidence.MEDIUM
    return Confidence.LOW


class MaterialCandidate(BaseModel):
    """
    One display string per source, the unit the selector compares.

    ``text`` is normalized on construction; ``confidence`` is derived from it
    and cannot be set.
    """
    model_config = ConfigDict(frozen=True)

    text: str
    source: MaterialSource

    @field_validator("text")
    @classmethod
    def normalize_display_text(cls, value: str) -> str:
        return normalize_text(value)

    @property
    def confidence(self) -> Confidence:
        return confidence_for(self.text)

    @property
    def result_source(self) -> ResultSource:
        return _RESULT_SOURCES[self.source]


@dataclass
class ScoredCandidate:
    """A candidate with its transient selection score."""
    candidate: MaterialCandidate
    score: int
    rejected: bool = False

    def to_log(self) -> dict:
        return {
            "source": self.candidate.source.value,
            "score": self.score,
            "rejected": self.rejected,
            "text": self.candidate.text[:120],
        }


class HitSet:
    """
    Ordered raw-hit accumulator, unique by lowercase normalized form.

    Never holds more than ``limit`` entries; later hits are ignored once full.
    """

    def __init__(self, limit: int, hits: Iterable[str] = ()):
        self.limit = limit
        self._seen = set()
        self._items: List[str] = []
        for hit in hits:
            self.add(hit)

    def add(self, text: str) -> bool:
        """Add a hit; returns True only if it was new and there was room."""
        text = normalize_text(text)
        key = text.lower()
        if not text or key in self._seen or self.full:
            return False
        self._seen.add(key)
        self._items.append(text)
        return True

    @property
    def full(self) -> bool:
        return len(self._items) >= self.limit

    @property
    def items(self) -> List[str]:
        return list(self._items)

    def joined(self) -> str:
        return HIT_DELIMITER.join(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


class ExtractionResult(BaseModel):
    """Outbound record returned to the display surface."""
    materials: Optional[str] = None
    confidence: Confidence = Confidence.NONE
    source: ResultSource = ResultSource.NONE

    @classmethod
    def none(cls) -> "ExtractionResult":
        """The canonical negative result."""
        return cls(materials=None, confidence=Confidence.NONE, source=ResultSource.NONE)

    @classmethod
    def from_candidate(cls, candidate: MaterialCandidate) -> "ExtractionResult":
        return cls(
            materials=candidate.text,
            confidence=candidate.confidence,
            source=candidate.result_source,
        )


class ExtractionRequest(BaseModel):
    """Inbound materials-extraction request carrying the page snapshot."""
    type: str = EXTRACT_MATERIALS_REQUEST
    html: str = Field(default="", description="Serialized HTML of the page to read")

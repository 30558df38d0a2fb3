"""
Harvester interface shared by every material source.
"""
from abc import ABC, abstractmethod
from typing import Optional

from material_extractor.adapters.page import PageDocument
from material_extractor.layers.postprocess import collapse_candidates
from material_extractor.models.materials import MaterialCandidate, MaterialSource
from material_extractor.utils.logger import LayerLogger


class Harvester(ABC):
    """
    A source of at most one material candidate per page.

    Subclasses gather raw hits from their slice of the page; the shared
    ``harvest`` collapses them into a single candidate.
    """

    name: str = "harvester"

    def __init__(self):
        self.logger = LayerLogger(self.name)

    @abstractmethod
    def harvest(self, page: PageDocument) -> Optional[MaterialCandidate]:
        """Return this source's candidate for the page, or None."""

    def _build_candidate(self, raw: str, source: MaterialSource) -> Optional[MaterialCandidate]:
        text = collapse_candidates(raw)
        if not text:
            self.logger.log_action("harvest", "no_candidate", source=source.value)
            return None

        candidate = MaterialCandidate(text=text, source=source)
        self.logger.log_action(
            "harvest",
            "completed",
            source=source.value,
            candidate=candidate.text[:120],
        )
        return candidate

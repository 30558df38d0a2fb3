"""
Extraction Layer for the Material Composition Extractor.
Sequences the harvesters and the selector into one request/response call.
"""
from typing import List, Optional, Sequence

from material_extractor.adapters.page import PageDocument
from material_extractor.config import config
from material_extractor.layers.dom_text import ContainerTextHarvester, LeafTextHarvester
from material_extractor.layers.harvesting import Harvester
from material_extractor.layers.scoring import DEFAULT_WEIGHTS, ScoreWeights, select_best
from material_extractor.layers.structured_data import StructuredDataHarvester
from material_extractor.models.materials import ExtractionResult, MaterialCandidate
from material_extractor.utils.logger import LayerLogger


class MaterialExtractionLayer:
    """
    Extraction Layer - one synchronous pass over a page snapshot.

    Harvesters run in source-priority order (structured data, leaf text,
    container text); each contributes at most one candidate, and the
    selector picks the winner. Nothing is kept between calls.
    """

    def __init__(
        self,
        harvesters: Optional[Sequence[Harvester]] = None,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
    ):
        self.logger = LayerLogger("extraction_layer")
        self.harvesters: List[Harvester] = list(harvesters) if harvesters else [
            StructuredDataHarvester(),
            LeafTextHarvester(),
            ContainerTextHarvester(),
        ]
        self.weights = weights

    def extract_html(self, html: str) -> ExtractionResult:
        """Parse serialized HTML and extract its material composition."""
        return self.extract(PageDocument(html))

    def extract(self, page: PageDocument) -> ExtractionResult:
        self.logger.log_action(
            "material_extraction",
            "started",
            harvesters=[h.name for h in self.harvesters],
            bounds=config.get_extraction_bounds(),
        )

        candidates: List[Optional[MaterialCandidate]] = [
            harvester.harvest(page) for harvester in self.harvesters
        ]
        result = select_best(candidates, self.weights)

        if result.materials is None:
            self.logger.log_decision(
                decision="no_materials",
                reason="No candidate survived scoring",
                candidates_found=sum(1 for c in candidates if c is not None),
            )
        else:
            self.logger.log_decision(
                decision="materials_selected",
                reason=f"Highest scoring candidate from {result.source.value}",
                materials=result.materials,
                confidence=result.confidence.value,
            )

        return result

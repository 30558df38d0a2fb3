"""Layers package initialization."""
from material_extractor.layers.harvesting import Harvester
from material_extractor.layers.structured_data import StructuredDataHarvester
from material_extractor.layers.dom_text import LeafTextHarvester, ContainerTextHarvester
from material_extractor.layers.scoring import ScoreWeights, DEFAULT_WEIGHTS, select_best
from material_extractor.layers.extraction import MaterialExtractionLayer

__all__ = [
    "Harvester",
    "StructuredDataHarvester",
    "LeafTextHarvester",
    "ContainerTextHarvester",
    "ScoreWeights",
    "DEFAULT_WEIGHTS",
    "select_best",
    "MaterialExtractionLayer",
]

"""Adapters package initialization."""
from material_extractor.adapters.page import PageDocument

__all__ = ["PageDocument"]

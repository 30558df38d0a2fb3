"""
Display rendering for extraction results.
"""
from typing import Optional, Tuple

from material_extractor.models.materials import ExtractionResult

NOT_FOUND_MESSAGE = "No materials found on this page"


def render_lines(result: Optional[ExtractionResult]) -> Tuple[str, str]:
    """
    Headline and provenance line for a result.

    ``None`` stands for a failed or timed-out request and renders like an
    empty result.
    """
    if result is None or not result.materials:
        return NOT_FOUND_MESSAGE, ""
    return (
        f"Materials: {result.materials}",
        f"Source: {result.source.value} · Confidence: {result.confidence.value}",
    )

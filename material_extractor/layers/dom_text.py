"""
DOM Text Harvesters.

Two independent passes over the rendered page text:
- leaf pass: short, already-isolated elements (list items, cells, paragraphs)
- container pass: large blocks split on line/bullet/pipe delimiters
"""
from typing import Optional

from material_extractor.adapters.page import PageDocument
from material_extractor.config import config
from material_extractor.layers.harvesting import Harvester
from material_extractor.models.materials import HitSet, MaterialCandidate, MaterialSource
from material_extractor.utils.lexicon import normalize_text
from material_extractor.utils.phrases import accumulate_hits, split_entries


class LeafTextHarvester(Harvester):
    """Harvests list items, description cells, spans, paragraphs and table cells."""

    name = "dom_leaf_harvester"
    source = MaterialSource.DOM_LEAF

    def collect_hits(self, page: PageDocument) -> HitSet:
        hits = HitSet(config.MAX_HITS)
        for raw in page.leaf_texts():
            text = normalize_text(raw)
            # Oversized "leaves" are wrappers, not isolated text
            if not text or len(text) > config.LEAF_MAX_CHARS:
                continue
            accumulate_hits(text, hits)
            if hits.full:
                break
        return hits

    def harvest(self, page: PageDocument) -> Optional[MaterialCandidate]:
        hits = self.collect_hits(page)
        self.logger.log_action("leaf_pass", "completed", hits=hits.items)
        if not hits:
            return None
        return self._build_candidate(hits.joined(), self.source)


class ContainerTextHarvester(Harvester):
    """Harvests sections, articles and divs chunk by chunk."""

    name = "dom_container_harvester"
    source = MaterialSource.DOM_CONTAINER

    def collect_hits(self, page: PageDocument) -> HitSet:
        hits = HitSet(config.MAX_HITS)
        for raw in page.container_texts():
            block = raw.strip()
            # Skip page-body sized blocks
            if not block or len(block) > config.CONTAINER_MAX_CHARS:
                continue
            for chunk in split_entries(block):
                accumulate_hits(chunk[:config.CONTAINER_CHUNK_MAX_CHARS], hits)
                if hits.full:
                    return hits
        return hits

    def harvest(self, page: PageDocument) -> Optional[MaterialCandidate]:
        hits = self.collect_hits(page)
        self.logger.log_action("container_pass", "completed", hits=hits.items)
        if not hits:
            return None
        return self._build_candidate(hits.joined(), self.source)

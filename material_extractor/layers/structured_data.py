"""
Structured-Data Harvester.

Walks every embedded JSON-LD document on the page looking for material
information on product nodes (and their variants).

Sources, in order of trust:
1. Explicit material fields (``material``, ``fabric``, ...) on product nodes
2. ``additionalProperty`` entries whose name mentions a material concept
3. Composition statements inside the product ``description``

1 and 2 share the explicit accumulator; 3 is only consulted for a node that
contributed nothing explicit.
"""
import json
import re
from typing import Any, Iterator, List, Optional, Tuple

from material_extractor.adapters.page import PageDocument
from material_extractor.config import config
from material_extractor.layers.harvesting import Harvester
from material_extractor.models.materials import HitSet, MaterialCandidate, MaterialSource
from material_extractor.utils.lexicon import (
    is_field_name_material,
    is_material_candidate,
    mentions_material_concept,
    normalize_text,
)
from material_extractor.utils.phrases import PHRASE_RE, split_entries

VARIANT_KEY = "hasVariant"
GRAPH_KEY = "@graph"
ADDITIONAL_PROPERTY_KEY = "additionalProperty"
DESCRIPTION_KEY = "description"

_SENTENCE_BREAK_RE = re.compile(r"(?<=[.!?;])\s+")


class CompositionNode:
    """Traversal-only view over one JSON-LD object."""

    def __init__(self, data: dict):
        self.data = data

    @property
    def types(self) -> List[str]:
        schema_type = self.data.get("@type")
        if isinstance(schema_type, list):
            return [str(t) for t in schema_type if t]
        if schema_type:
            return [str(schema_type)]
        return []

    @property
    def is_product(self) -> bool:
        """Product, ProductGroup, IndividualProduct, ProductModel, ..."""
        return any("product" in t.lower() for t in self.types)

    def material_values(self) -> Iterator[Any]:
        for key, value in self.data.items():
            if is_field_name_material(key):
                yield value

    def material_property_values(self) -> Iterator[Any]:
        properties = self.data.get(ADDITIONAL_PROPERTY_KEY)
        if isinstance(properties, dict):
            properties = [properties]
        if not isinstance(properties, list):
            return
        for prop in properties:
            if isinstance(prop, dict) and mentions_material_concept(prop.get("name")):
                yield prop.get("value")

    @property
    def description(self) -> Optional[str]:
        description = self.data.get(DESCRIPTION_KEY)
        return description if isinstance(description, str) else None

    @property
    def variants(self) -> List[Any]:
        return _as_list(self.data.get(VARIANT_KEY))

    @property
    def graph(self) -> List[Any]:
        return _as_list(self.data.get(GRAPH_KEY))

    def children(self) -> Iterator[Any]:
        """Nested values other than the variant and graph relations."""
        for key, value in self.data.items():
            if key in (VARIANT_KEY, GRAPH_KEY):
                continue
            if isinstance(value, (dict, list)):
                yield value


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def clip_to_composition(text: str, max_chars: int) -> str:
    """
    Cut ``text`` to at most ``max_chars``, keeping its first composition phrase.

    The window starts on a word boundary and runs as far left of the phrase as
    the limit allows. Text with no phrase match is cut from the start.
    """
    if len(text) <= max_chars:
        return text
    match = PHRASE_RE.search(text)
    if not match:
        return normalize_text(text[:max_chars])

    start = max(0, min(match.start(), len(text) - max_chars))
    if start > 0:
        space = text.find(" ", start - 1)
        if 0 <= space < match.start():
            start = space + 1
    return normalize_text(text[start:start + max_chars])


def flatten_strings(value: Any) -> List[str]:
    """Strings inside a field value, arrays flattened recursively."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        strings = []
        for item in value:
            strings.extend(flatten_strings(item))
        return strings
    return []


class StructuredDataHarvester(Harvester):
    """Harvests material fields from the page's JSON-LD product data."""

    name = "structured_data_harvester"

    def collect_hits(self, page: PageDocument) -> Tuple[HitSet, HitSet]:
        """Walk every JSON-LD document; returns (explicit, described) hits."""
        explicit = HitSet(config.MAX_HITS)
        described = HitSet(config.MAX_HITS)

        documents = self.parse_documents(page.structured_data_texts)
        for document in documents:
            self._visit(document, False, explicit, described)

        self.logger.log_action(
            "jsonld_material_scan",
            "completed",
            documents=len(documents),
            explicit_hits=explicit.items,
            description_hits=described.items,
        )
        return explicit, described

    def harvest(self, page: PageDocument) -> Optional[MaterialCandidate]:
        explicit, described = self.collect_hits(page)

        if explicit:
            return self._build_candidate(explicit.joined(), MaterialSource.STRUCTURED_EXPLICIT)

        if described:
            self.logger.log_fallback(
                from_source="explicit_material_fields",
                to_source="product_description",
                reason="No explicit material field on any product node",
            )
            return self._build_candidate(described.joined(), MaterialSource.STRUCTURED_DESCRIPTION)

        return None

    def parse_documents(self, texts: List[str]) -> List[Any]:
        """Parse each JSON-LD block; unparseable blocks are skipped."""
        documents = []
        for index, text in enumerate(texts):
            if not text or not text.strip():
                continue
            try:
                documents.append(json.loads(text))
            except json.JSONDecodeError as e:
                self.logger.log_skipped(
                    "jsonld_block",
                    reason=f"Invalid JSON: {e.msg}",
                    block_index=index,
                )
        return documents

    def _visit(self, value: Any, inherited: bool, explicit: HitSet, described: HitSet):
        if isinstance(value, list):
            for item in value:
                self._visit(item, inherited, explicit, described)
            return
        if not isinstance(value, dict):
            return

        node = CompositionNode(value)
        in_scope = inherited or node.is_product
        if in_scope:
            self._harvest_node(node, explicit, described)

        for variant in node.variants:
            self._visit(variant, True, explicit, described)
        for sibling in node.graph:
            self._visit(sibling, in_scope, explicit, described)
        for child in node.children():
            self._visit(child, False, explicit, described)

    def _harvest_node(self, node: CompositionNode, explicit: HitSet, described: HitSet):
        found = 0
        for value in node.material_values():
            found += self._add_field_value(value, explicit)

        if not explicit.full:
            for value in node.material_property_values():
                found += self._add_field_value(value, explicit)

        if found == 0 and node.description:
            for entry in self._description_entries(node.description):
                if not is_material_candidate(entry):
                    continue
                clipped = clip_to_composition(entry, config.FIELD_ENTRY_MAX_CHARS)
                if is_material_candidate(clipped):
                    described.add(clipped)

    def _add_field_value(self, value: Any, hits: HitSet) -> int:
        """Add the entries of one field value; returns how many entries it held."""
        entries = [entry for text in flatten_strings(value) for entry in split_entries(text)]
        for entry in entries:
            hits.add(entry[:config.FIELD_ENTRY_MAX_CHARS])
        return len(entries)

    def _description_entries(self, description: str) -> List[str]:
        entries = []
        for entry in split_entries(description):
            entries.extend(
                normalize_text(sentence)
                for sentence in _SENTENCE_BREAK_RE.split(entry)
                if sentence.strip()
            )
        return entries

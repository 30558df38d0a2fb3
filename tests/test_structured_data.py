import pytest

from material_extractor.layers.structured_data import (
    CompositionNode,
    clip_to_composition,
    StructuredDataHarvester,
    flatten_strings,
)
from material_extractor.models.materials import Confidence, MaterialSource

from tests.pages import build_page


@pytest.fixture
def harvester():
    return StructuredDataHarvester()


class TestExplicitFields:

    def test_material_field_on_product(self, harvester):
        page = build_page(jsonld=[{"@type": "Product", "material": "95% Cotton, 5% Spandex"}])
        candidate = harvester.harvest(page)
        assert candidate.text == "95% Cotton, 5% Spandex"
        assert candidate.source == MaterialSource.STRUCTURED_EXPLICIT

    def test_array_values_are_flattened_and_joined(self, harvester):
        page = build_page(jsonld=[{
            "@type": "Product",
            "fabric": [["Shell: 100% Nylon"], "Lining: 100% Polyester"],
        }])
        candidate = harvester.harvest(page)
        assert candidate.text == "Lining: 100% Polyester • Shell: 100% Nylon"

    def test_non_product_nodes_are_ignored(self, harvester):
        page = build_page(jsonld=[{"@type": "Organization", "material": "100% Linen"}])
        assert harvester.harvest(page) is None

    def test_product_nested_inside_other_node(self, harvester):
        page = build_page(jsonld=[{
            "@type": "WebPage",
            "mainEntity": {"@type": "Product", "composition": "100% Wool"},
        }])
        assert harvester.harvest(page).text == "100% Wool"

    def test_type_list_with_product(self, harvester):
        page = build_page(jsonld=[{"@type": ["Thing", "IndividualProduct"], "material": "100% Silk"}])
        assert harvester.harvest(page).text == "100% Silk"

    def test_additional_property_with_material_name(self, harvester):
        page = build_page(jsonld=[{
            "@type": "Product",
            "additionalProperty": [
                {"@type": "PropertyValue", "name": "Color", "value": "Black"},
                {"@type": "PropertyValue", "name": "Outer Material", "value": "100% Polyamide"},
            ],
        }])
        candidate = harvester.harvest(page)
        assert candidate.text == "100% Polyamide"
        assert candidate.source == MaterialSource.STRUCTURED_EXPLICIT

    def test_long_entries_are_capped(self, harvester):
        page = build_page(jsonld=[{"@type": "Product", "material": "100% cotton " + "x" * 300}])
        assert len(harvester.harvest(page).text) <= 220


class TestRelations:

    def test_variants_are_in_scope_regardless_of_type(self, harvester):
        page = build_page(jsonld=[{
            "@type": "WebPage",
            "hasVariant": [{"@type": "Offer", "material": "100% Linen"}],
        }])
        assert harvester.harvest(page).text == "100% Linen"

    def test_graph_nodes_are_visited(self, harvester):
        page = build_page(jsonld=[{
            "@context": "https://schema.org",
            "@graph": [
                {"@type": "BreadcrumbList", "itemListElement": []},
                {"@type": "Product", "material": "70% Wool, 30% Nylon"},
            ],
        }])
        assert harvester.harvest(page).text == "70% Wool, 30% Nylon"

    def test_graph_does_not_force_scope(self, harvester):
        page = build_page(jsonld=[{"@graph": [{"@type": "WebSite", "material": "100% cotton"}]}])
        assert harvester.harvest(page) is None

    def test_product_group_variants(self, harvester):
        page = build_page(jsonld=[{
            "@type": "ProductGroup",
            "hasVariant": [
                {"@type": "Product", "sku": "A-S", "material": "100% Cotton"},
                {"@type": "Product", "sku": "A-M", "material": "100% cotton"},
            ],
        }])
        assert harvester.harvest(page).text == "100% Cotton"


class TestDescriptionFallback:

    def test_description_used_without_explicit_fields(self, harvester):
        page = build_page(jsonld=[{
            "@type": "Product",
            "description": "A relaxed tee for sunny days. Made with 60% cotton and 40% modal. Machine wash cold.",
        }])
        candidate = harvester.harvest(page)
        assert candidate.text == "Made with 60% cotton and 40% modal"
        assert candidate.source == MaterialSource.STRUCTURED_DESCRIPTION

    def test_explicit_field_wins_over_description(self, harvester):
        page = build_page(jsonld=[{
            "@type": "Product",
            "material": "Cotton",
            "description": "Made with 60% cotton and 40% modal.",
        }])
        candidate = harvester.harvest(page)
        assert candidate.text == "Cotton"
        assert candidate.source == MaterialSource.STRUCTURED_EXPLICIT

    def test_excluded_description_sentences_ignored(self, harvester):
        page = build_page(jsonld=[{
            "@type": "Product",
            "description": "Save 20% on all wool coats this week.",
        }])
        assert harvester.harvest(page) is None


class TestMalformedDocuments:

    def test_bad_json_is_skipped(self, harvester):
        page = build_page(
            jsonld=[{"@type": "Product", "material": "100% Hemp"}],
            raw_scripts=["{not valid json"],
        )
        assert harvester.harvest(page).text == "100% Hemp"

    def test_parse_documents_skips_failures(self, harvester):
        documents = harvester.parse_documents(['{"@type": "Product"}', "{oops", "", "[1, 2]"])
        assert documents == [{"@type": "Product"}, [1, 2]]

    def test_page_without_structured_data(self, harvester):
        assert harvester.harvest(build_page("<p>Hello</p>")) is None


class TestCompositionNode:

    def test_types_and_product_detection(self):
        assert CompositionNode({"@type": "ProductModel"}).is_product
        assert not CompositionNode({"@type": "Offer"}).is_product
        assert not CompositionNode({}).is_product

    def test_single_variant_object_is_listed(self):
        node = CompositionNode({"hasVariant": {"@type": "Product"}})
        assert node.variants == [{"@type": "Product"}]

    def test_flatten_strings(self):
        assert flatten_strings(["a", ["b", 3, {"c": "d"}], "e"]) == ["a", "b", "e"]
        assert flatten_strings(None) == []


class TestLongDescriptions:

    FILLER = "A wonderfully relaxed shirt for long weekends " * 6

    def test_composition_past_the_entry_limit_is_kept(self, harvester):
        description = self.FILLER + "made from 100% cotton"
        assert description.index("100% cotton") > 220
        candidate = harvester.harvest(build_page(jsonld=[{"@type": "Product", "description": description}]))
        assert candidate.text.endswith("made from 100% cotton")
        assert len(candidate.text) <= 220
        assert candidate.confidence == Confidence.HIGH

    def test_clip_starts_on_word_boundary(self):
        clipped = clip_to_composition(self.FILLER + "made from 100% cotton", 60)
        assert clipped.endswith("made from 100% cotton")
        assert clipped.split()[0] in self.FILLER.split()

    def test_short_text_untouched(self):
        assert clip_to_composition("Woven from 100% linen", 220) == "Woven from 100% linen"


class TestAccumulatorCaps:

    def test_explicit_entries_capped(self, harvester):
        parts = [f"Part {n}: 100% cotton" for n in range(1, 5)]
        parts += ["Part 5: 100% cotton with a brushed back", "Part 6: 100% cotton with a quilted lining"]
        page = build_page(jsonld=[{"@type": "Product", "material": parts}])

        explicit, _ = harvester.collect_hits(page)
        assert explicit.items == parts[:4]

        candidate = harvester.harvest(page)
        assert len(candidate.text.split(" • ")) <= 4
        assert "Part 5" not in candidate.text and "Part 6" not in candidate.text

    def test_description_entries_capped(self, harvester):
        sentences = [f"Layer {n} is 10% wool." for n in range(1, 5)]
        sentences += ["Layer 5 is 10% wool with a felted finish.", "Layer 6 is 10% wool with a waxed finish."]
        page = build_page(jsonld=[{"@type": "Product", "description": " ".join(sentences)}])

        _, described = harvester.collect_hits(page)
        assert len(described) == 4
        assert "Layer 5" not in harvester.harvest(page).text

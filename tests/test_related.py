"""Tests for the related products service."""

from unittest.mock import MagicMock

import pytest

from shoppable.errors import NetworkError
from shoppable.services import RelatedProductService
from shoppable.services.related import extract_product_info


def clip(video_id="v1", start=1.0, end=2.0, text=""):
    return {"video_id": video_id, "start": start, "end": end, "metadata": {"text": text}}


@pytest.fixture
def client():
    client = MagicMock()
    client.generate.return_value = "Pairs well with the outfit in this scene."
    return client


@pytest.fixture
def service(client):
    return RelatedProductService(client)


class TestFindRelated:

    def test_requires_a_hint(self, service):
        with pytest.raises(ValueError):
            service.find_related("idx1")

    def test_query_and_options(self, service, client):
        client.search.return_value = []
        service.find_related("idx1", product_name="Trail Runner", category="fitness", product_id="p1", limit=3)

        index_id, query, options = client.search.call_args.args
        assert index_id == "idx1"
        assert query == "Products similar to Trail Runner in the fitness category"
        assert "visual_similarity" in options
        assert client.search.call_args.kwargs["page_limit"] == 6

    def test_filters_dedups_and_sorts(self, service, client):
        client.search.return_value = [
            {"confidence": 0.4, "clips": [clip(start=0.0, text="ignored low confidence")]},
            {"confidence": 0.7, "clips": [clip(start=5.0, text="A man wearing running shoes. Then")]},
            {"confidence": 0.9, "clips": [
                clip(start=9.0, text="She features leather watches in close-up"),
                clip(start=5.0, text="duplicate clip"),
            ]},
        ]
        related = service.find_related("idx1", category="fitness")

        assert [p.id for p in related] == ["v1-9.0-2.0", "v1-5.0-2.0"]
        assert related[0].confidence == 0.9
        assert related[1].name == "Running shoes"
        assert related[0].category == "Watches"
        assert all(p.price is None for p in related)

    def test_limit(self, service, client):
        client.search.return_value = [
            {"confidence": 0.8, "clips": [clip(start=float(i), text="item") for i in range(10)]},
        ]
        assert len(service.find_related("idx1", product_name="x", limit=4)) == 4

    def test_skips_malformed_results_and_clips(self, service, client):
        client.search.return_value = [
            "not a result",
            {"confidence": None, "clips": [clip(start=1.0)]},
            {"confidence": 0.9, "clips": "nope"},
            {"confidence": 0.8, "clips": [
                None,
                {"video_id": "v1", "start": None, "end": 4.0},
                {"video_id": "v1", "start": "3", "end": 4.0},
                {"video_id": "v1", "start": 3.0, "end": 4.0, "metadata": "text"},
                clip(start=7.0, text=None),
            ]},
        ]
        related = service.find_related("idx1", product_name="Mug")

        assert [p.id for p in related] == ["v1-3.0-4.0", "v1-7.0-2.0"]
        assert related[0].time_appearance == (3.0, 4.0)
        assert related[0].name == "Related Item"


class TestRecommendations:

    def test_enrich_adds_why_recommended(self, service, client):
        client.search.return_value = [{"confidence": 0.8, "clips": [clip(start=3.0, end=6.0, text="using a ceramic mug")]}]
        related = service.find_related("idx1", product_name="Mug")

        assert related[0].why_recommended == "Pairs well with the outfit in this scene."
        video_id, prompt = client.generate.call_args.args
        assert video_id == "v1"
        assert "A ceramic mug" in prompt and "3.0s" in prompt

    def test_enrich_only_kept_products(self, service, client):
        client.search.return_value = [{"confidence": 0.8, "clips": [clip(start=float(i)) for i in range(6)]}]
        service.find_related("idx1", product_name="Mug", limit=2)
        assert client.generate.call_count == 2

    def test_enrich_failure_keeps_product(self, service, client):
        client.search.return_value = [{"confidence": 0.8, "clips": [clip(text="using a ceramic mug")]}]
        client.generate.side_effect = NetworkError("generate down", status_code=500)

        related = service.find_related("idx1", product_name="Mug")
        assert related[0].name == "A ceramic mug"
        assert related[0].why_recommended is None

    def test_clip_without_video_is_not_enriched(self, service, client):
        client.search.return_value = [{"confidence": 0.8, "clips": [clip(video_id=None)]}]
        related = service.find_related("idx1", product_name="Mug")

        assert related[0].why_recommended is None
        client.generate.assert_not_called()

    def test_enrich_disabled(self, service, client):
        client.search.return_value = [{"confidence": 0.8, "clips": [clip()]}]
        related = service.find_related("idx1", product_name="Mug", enrich=False)

        assert related[0].why_recommended is None
        client.generate.assert_not_called()


class TestQuery:

    @pytest.mark.parametrize("name,category,expected", [
        ("Mug", None, "Products similar to Mug"),
        (None, "kitchenware", "Show me kitchenware products"),
        (None, None, "Show me related products"),
    ])
    def test_build_query(self, name, category, expected):
        assert RelatedProductService.build_query(name, category) == expected


class TestExtractProductInfo:

    def test_empty_text(self):
        assert extract_product_info("") == ("Related Item", "", "")

    def test_falls_back_to_first_words(self):
        name, description, category = extract_product_info("bright red jacket outdoors")
        assert name == "Bright red jacket"
        assert description == "bright red jacket outdoors"
        assert category == ""

    def test_long_description_truncated(self):
        _, description, _ = extract_product_info("word " * 50)
        assert description.endswith("...")
        assert len(description) == 103

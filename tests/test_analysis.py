"""Tests for the analysis service."""

from unittest.mock import MagicMock

import pytest

from shoppable.errors import NetworkError, ParseError
from shoppable.models import VideoItem
from shoppable.normalizer import normalize, serialize
from shoppable.services import AnalysisService


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def service(client):
    return AnalysisService(client)


class TestAnalyze:

    def test_normalizes_fenced_response(self, service, client, raw_products_json):
        client.generate.return_value = "```json\n" + raw_products_json + "\n```"
        products = service.analyze("vid1")
        assert len(products) == 2
        assert client.generate.call_args.args[0] == "vid1"

    def test_malformed_response_raises(self, service, client):
        client.generate.return_value = "Sorry, I could not find products."
        with pytest.raises(ParseError):
            service.analyze("vid1")


class TestMetadata:

    def test_save_stores_products_as_string(self, service, client, products):
        service.save_metadata("idx1", "vid1", products, reanalyzed=True)

        index_id, video_id, metadata = client.update_user_metadata.call_args.args
        assert (index_id, video_id) == ("idx1", "vid1")
        assert normalize(metadata["products"]) == products
        assert metadata["reanalyzed"] is True
        assert "T" in metadata["analyzed_at"]

    def test_existing_products(self, service, products):
        video = VideoItem(id="vid1", user_metadata={"products": serialize(products)})
        assert service.existing_products(video) == products

    def test_no_existing_products(self, service):
        assert service.existing_products(VideoItem(id="vid1", user_metadata={"sector": "food"})) is None


class TestProductsForVideo:

    def test_uses_stored_products(self, service, client, products):
        video = VideoItem(id="vid1", index_id="idx1", user_metadata={"products": serialize(products)})
        assert service.products_for_video(video) == products
        client.generate.assert_not_called()

    def test_analyzes_and_saves_when_missing(self, service, client, raw_products_json):
        client.generate.return_value = raw_products_json
        video = VideoItem(id="vid1", index_id="idx1")

        products = service.products_for_video(video)

        assert len(products) == 2
        client.update_user_metadata.assert_called_once()
        assert client.update_user_metadata.call_args.args[:2] == ("idx1", "vid1")

    def test_force_reanalyze_ignores_stored(self, service, client, products, raw_products_json):
        client.generate.return_value = raw_products_json
        video = VideoItem(id="vid1", index_id="idx1", user_metadata={"products": serialize(products)})

        assert len(service.products_for_video(video, force_reanalyze=True)) == 2
        assert client.update_user_metadata.call_args.args[2]["reanalyzed"] is True

    def test_save_failure_propagates(self, service, client, raw_products_json):
        client.generate.return_value = raw_products_json
        client.update_user_metadata.side_effect = NetworkError("boom", status_code=500)
        with pytest.raises(NetworkError):
            service.products_for_video(VideoItem(id="vid1", index_id="idx1"))

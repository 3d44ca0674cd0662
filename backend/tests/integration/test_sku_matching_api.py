"""Integration tests for the SKU matching API

Tests the HTTP surface built by create_app():
- POST /api/v1/sku-matching/match
- POST /api/v1/sku-matching/match/batch
- POST /api/v1/sku-matching/corrections
- Error codes and request id correlation
"""

import pytest
from fastapi.testclient import TestClient

from catalog import InMemoryCatalogReader
from feedback import InMemoryCorrectionSink
from main import create_app
from platforms import EcommercePlatform


@pytest.fixture
def correction_sink():
    return InMemoryCorrectionSink()


@pytest.fixture
def client(settings, sample_catalog, correction_sink):
    app = create_app(
        settings=settings,
        catalog_reader=InMemoryCatalogReader(sample_catalog),
        correction_sink=correction_sink,
    )
    with TestClient(app) as test_client:
        yield test_client


class TestMatchEndpoint:
    """Tests for POST /api/v1/sku-matching/match"""

    def test_match_food(self, client):
        response = client.post(
            "/api/v1/sku-matching/match",
            json={"food": {"id": "food-1", "name": "鸡胸肉", "category": "PROTEIN"}},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["food_id"] == "food-1"
        assert [r["platform_product"]["platform_product_id"] for r in body["results"]] == ["hm-001", "sc-001"]

        top = body["results"][0]
        assert top["platform_product"]["platform"] == "HEMA"
        assert top["confidence"] == pytest.approx(0.85)
        assert top["matched_keywords"] == ["鸡胸肉"]
        assert top["match_reasons"] == ["high match: name and keywords strongly aligned"]
        assert top["score_breakdown"]["name_similarity"] == 1.0

    def test_config_overrides(self, client):
        response = client.post(
            "/api/v1/sku-matching/match",
            json={
                "food": {"id": "food-1", "name": "鸡胸肉"},
                "config": {"include_out_of_stock": True, "platforms": ["HEMA"], "max_results": 5},
            },
        )

        assert response.status_code == 200
        ids = [r["platform_product"]["platform_product_id"] for r in response.json()["results"]]
        assert ids == ["hm-001", "hm-002"]

    def test_no_matches(self, client):
        response = client.post(
            "/api/v1/sku-matching/match",
            json={"food": {"id": "food-2", "name": "苹果"}},
        )

        assert response.status_code == 200
        assert response.json()["results"] == []

    def test_invalid_config(self, client):
        response = client.post(
            "/api/v1/sku-matching/match",
            json={"food": {"id": "food-1", "name": "鸡胸肉"}, "config": {"min_confidence": 1.5}},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "INVALID_CONFIG"

    def test_unknown_platform(self, client):
        response = client.post(
            "/api/v1/sku-matching/match",
            json={"food": {"id": "food-1", "name": "鸡胸肉"}, "config": {"platforms": ["TAOBAO"]}},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "UNKNOWN_PLATFORM"

    def test_malformed_body(self, client):
        response = client.post("/api/v1/sku-matching/match", json={"food": {"id": "food-1"}})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_request_id_is_echoed(self, client):
        response = client.post(
            "/api/v1/sku-matching/match",
            json={"food": {"id": "food-1", "name": "鸡胸肉"}},
            headers={"X-Request-ID": "req-abc"},
        )

        assert response.headers["X-Request-ID"] == "req-abc"

    def test_request_id_is_generated(self, client):
        response = client.post(
            "/api/v1/sku-matching/match",
            json={"food": {"id": "food-1", "name": "鸡胸肉"}},
        )

        assert response.headers["X-Request-ID"]


class TestBatchEndpoint:
    """Tests for POST /api/v1/sku-matching/match/batch"""

    def test_batch(self, client):
        response = client.post(
            "/api/v1/sku-matching/match/batch",
            json={
                "foods": [
                    {"id": "milk", "name": "纯牛奶", "aliases": ["牛奶"]},
                    {"id": "chicken", "name": "鸡胸肉"},
                    {"id": "apple", "name": "苹果"},
                ],
                "config": {"min_confidence": 0.5},
            },
        )

        assert response.status_code == 200
        results = response.json()["results"]
        assert list(results) == ["milk", "chicken", "apple"]
        assert [r["platform_product"]["platform_product_id"] for r in results["milk"]] == ["sc-002"]
        assert len(results["chicken"]) == 2
        assert results["apple"] == []

    def test_batch_invalid_config(self, client):
        response = client.post(
            "/api/v1/sku-matching/match/batch",
            json={"foods": [{"id": "a", "name": "鸡胸肉"}], "config": {"price_range": {"min": 9, "max": 1}}},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "INVALID_CONFIG"


class TestCorrectionsEndpoint:
    """Tests for POST /api/v1/sku-matching/corrections"""

    def test_correction_accepted(self, settings, sample_catalog, correction_sink):
        app = create_app(
            settings=settings,
            catalog_reader=InMemoryCatalogReader(sample_catalog),
            correction_sink=correction_sink,
        )
        with TestClient(app) as client:
            response = client.post(
                "/api/v1/sku-matching/corrections",
                json={"food_id": "food-1", "platform_product_id": "hm-001", "platform": "HEMA", "is_correct": True},
            )

        # Leaving the client runs shutdown, which flushes pending corrections
        assert response.status_code == 202
        assert response.json() == {"status": "accepted", "food_id": "food-1"}
        assert len(correction_sink.records) == 1
        assert correction_sink.records[0].platform == EcommercePlatform.HEMA
        assert correction_sink.records[0].is_correct is True

    def test_correction_unknown_platform(self, client, correction_sink):
        response = client.post(
            "/api/v1/sku-matching/corrections",
            json={"food_id": "food-1", "platform_product_id": "x", "platform": "TAOBAO", "is_correct": False},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "UNKNOWN_PLATFORM"
        assert correction_sink.records == []

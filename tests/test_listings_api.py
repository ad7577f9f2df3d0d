# =============================================================================
# tests/test_listings_api.py - Listing Endpoint Tests
# =============================================================================
# HTTP-contract tests for /api/v1/listings with the auth dependency
# overridden. Provider keys are blank, so listing copy is templated and
# background previews are mocks.
#
# Run with: pytest tests/test_listings_api.py -v
# =============================================================================

import re
from unittest.mock import patch

from core.services.listing_service import IMAGE_BASE_URL, ListingService, listing_store

BASE = "/api/v1/listings"


# =============================================================================
# Auth
# =============================================================================

class TestListingAuth:
    def test_requires_session(self, client):
        response = client.get(BASE)
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"


# =============================================================================
# CRUD
# =============================================================================

class TestListListings:
    """Tests for GET /listings."""

    def test_returns_seed_inventory(self, authed_client):
        response = authed_client.get(BASE)
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 3
        assert body["limit"] == 50
        assert body["offset"] == 0
        assert [item["id"] for item in body["data"]] == ["listing_123", "listing_456", "listing_789"]

    def test_count_is_total_before_pagination(self, authed_client):
        body = authed_client.get(BASE, params={"limit": 1, "offset": 1}).json()
        assert body["count"] == 3
        assert [item["id"] for item in body["data"]] == ["listing_456"]

    def test_filter_by_status(self, authed_client, sample_listing_payload):
        authed_client.post(BASE, json=sample_listing_payload)
        body = authed_client.get(BASE, params={"status": "draft"}).json()
        assert body["count"] == 1
        assert body["data"][0]["status"] == "draft"


class TestCreateListing:
    """Tests for POST /listings."""

    def test_creates_draft_with_generated_id(self, authed_client, sample_listing_payload):
        response = authed_client.post(BASE, json=sample_listing_payload)
        assert response.status_code == 201
        listing = response.json()
        assert re.fullmatch(r"listing_[a-z0-9]{8}", listing["id"])
        assert listing["status"] == "draft"
        assert listing["createdAt"]
        assert listing_store.get(listing["id"])["title"] == "2021 Ford F-150 XLT"

    def test_client_id_ignored(self, authed_client):
        listing = authed_client.post(BASE, json={"id": "listing_mine", "make": "Kia"}).json()
        assert listing["id"] != "listing_mine"

    def test_explicit_status_kept(self, authed_client):
        listing = authed_client.post(BASE, json={"make": "Kia", "status": "published"}).json()
        assert listing["status"] == "published"

    def test_invalid_body_is_400(self, authed_client):
        response = authed_client.post(BASE, json={"price": -5})
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestGetUpdateDelete:
    """Tests for GET/PUT/DELETE /listings/{id}."""

    def test_get_listing(self, authed_client):
        response = authed_client.get(f"{BASE}/listing_123")
        assert response.status_code == 200
        assert response.json()["make"] == "Honda"

    def test_get_missing_listing(self, authed_client):
        response = authed_client.get(f"{BASE}/listing_nope")
        assert response.status_code == 404
        assert response.json()["code"] == "LISTING_NOT_FOUND"

    def test_update_merges_and_keeps_id(self, authed_client):
        response = authed_client.put(f"{BASE}/listing_123", json={"price": 24999, "id": "other"})
        assert response.status_code == 200
        listing = response.json()
        assert listing["id"] == "listing_123"
        assert listing["price"] == 24999
        assert listing["make"] == "Honda"
        assert listing["updatedAt"]

    def test_update_missing_listing(self, authed_client):
        assert authed_client.put(f"{BASE}/listing_nope", json={"price": 1}).status_code == 404

    def test_delete(self, authed_client):
        response = authed_client.delete(f"{BASE}/listing_456")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Listing listing_456 has been deleted"}
        assert listing_store.get("listing_456") is None

    def test_delete_missing(self, authed_client):
        assert authed_client.delete(f"{BASE}/listing_nope").status_code == 404


# =============================================================================
# Images
# =============================================================================

class TestListingImages:
    """Tests for /listings/{id}/images."""

    def test_get_images(self, authed_client):
        body = authed_client.get(f"{BASE}/listing_123/images").json()
        assert body["count"] == 1
        assert body["images"][0]["publicId"] == "car-images/honda-civic"

    def test_add_images(self, authed_client):
        images = [
            {"url": "https://example.com/a.jpg", "publicId": "car-images/a"},
            {"url": "https://example.com/b.jpg"},
        ]
        response = authed_client.post(f"{BASE}/listing_123/images", json={"images": images})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Added 2 images to listing listing_123"
        assert len(ListingService.get_images("listing_123")) == 3

    def test_add_images_requires_list(self, authed_client):
        response = authed_client.post(f"{BASE}/listing_123/images", json={"images": "nope"})
        assert response.status_code == 400

    def test_add_images_item_without_url(self, authed_client):
        response = authed_client.post(f"{BASE}/listing_123/images", json={"images": [{"publicId": "x"}]})
        assert response.status_code == 400
        assert response.json()["detail"] == "Each image needs a url"
        assert len(ListingService.get_images("listing_123")) == 1

    def test_replace_with_urls(self, authed_client):
        response = authed_client.put(
            f"{BASE}/listing_123/images",
            json={"selectedImageUrls": ["https://example.com/x.jpg", "https://example.com/y.jpg"]},
        )
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 2
        assert body["message"] == "Updated images for listing listing_123"
        assert ListingService.get_images("listing_123") == [
            {"url": "https://example.com/x.jpg"},
            {"url": "https://example.com/y.jpg"},
        ]

    def test_selected_images_win_over_urls(self, authed_client):
        response = authed_client.put(
            f"{BASE}/listing_123/images",
            json={
                "selectedImages": [{"url": "https://example.com/z.jpg", "publicId": "car-images/z"}],
                "selectedImageUrls": ["https://example.com/ignored.jpg"],
            },
        )
        assert response.json()["images"] == [{"url": "https://example.com/z.jpg", "publicId": "car-images/z"}]

    def test_replace_requires_selection(self, authed_client):
        response = authed_client.put(f"{BASE}/listing_123/images", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "Selected images data is required"


# =============================================================================
# Listing Copy
# =============================================================================

class TestListingContent:
    """Tests for POST /listings/{id}/content."""

    def test_templated_copy_without_openai(self, authed_client):
        response = authed_client.post(
            f"{BASE}/listing_123/content",
            json={"generateDescription": True, "generateFeatures": True},
        )
        assert response.status_code == 200
        content = response.json()["content"]
        assert "2023 Honda Civic" in content["description"]
        assert len(content["highlightedFeatures"]) == 3
        assert "Bluetooth" in content["highlightedFeatures"][2]

    def test_description_only(self, authed_client):
        content = authed_client.post(
            f"{BASE}/listing_123/content", json={"generateDescription": True}
        ).json()["content"]
        assert "highlightedFeatures" not in content

    def test_requires_a_flag(self, authed_client):
        response = authed_client.post(f"{BASE}/listing_123/content", json={})
        assert response.status_code == 400

    def test_missing_listing(self, authed_client):
        response = authed_client.post(f"{BASE}/listing_nope/content", json={"generateFeatures": True})
        assert response.status_code == 404

    def test_openai_answer_is_split(self, authed_client):
        answer = "A great car.\n\n- Sunroof\n- Heated seats"
        with patch("agents.content_writer.settings") as mock_settings, \
                patch("agents.content_writer.complete", return_value=answer):
            mock_settings.openai_configured = True
            content = authed_client.post(
                f"{BASE}/listing_123/content",
                json={"generateDescription": True, "generateFeatures": True},
            ).json()["content"]
        assert content == {"description": "A great car.", "highlightedFeatures": ["Sunroof", "Heated seats"]}


# =============================================================================
# Background Processing
# =============================================================================

class TestBackgroundProcess:
    """Tests for POST /listings/{id}/background-process."""

    def test_mock_previews_without_cloudinary(self, authed_client):
        response = authed_client.post(
            f"{BASE}/listing_123/background-process",
            json={"imageIds": ["car-images/honda-civic"], "mode": "remove"},
        )
        assert response.status_code == 200
        result = response.json()["batchResults"][0]
        stem = f"{IMAGE_BASE_URL}/car-images/honda-civic"
        assert result["success"] is True
        assert result["originalUrl"] == f"{stem}.jpg"
        assert result["previews"] == [f"{stem}_preview_{i}.jpg" for i in (1, 2, 3)]

    def test_unknown_image_gets_temporary_entry(self, authed_client):
        result = authed_client.post(
            f"{BASE}/listing_123/background-process",
            json={"imageIds": ["fresh-upload"]},
        ).json()["batchResults"][0]
        assert result["originalUrl"] == "https://example.com/mock-upload/fresh-upload.jpg"
        assert len(result["previews"]) == 3

    def test_results_keep_order_across_batches(self, authed_client):
        ids = [f"img{i}" for i in range(7)]
        results = authed_client.post(
            f"{BASE}/listing_123/background-process",
            json={"imageIds": ids, "batchSize": 3},
        ).json()["batchResults"]
        assert [r["imageId"] for r in results] == ids

    def test_empty_image_ids(self, authed_client):
        response = authed_client.post(f"{BASE}/listing_123/background-process", json={"imageIds": []})
        assert response.status_code == 400
        assert response.json()["detail"] == "imageIds must be an array of image public IDs"

    def test_invalid_mode(self, authed_client):
        response = authed_client.post(
            f"{BASE}/listing_123/background-process",
            json={"imageIds": ["a"], "mode": "blur"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == 'mode must be either "remove" or "replace"'

    def test_unknown_listing(self, authed_client):
        response = authed_client.post(
            f"{BASE}/listing_nope/background-process",
            json={"imageIds": ["a"]},
        )
        assert response.status_code == 404

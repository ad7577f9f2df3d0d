# =============================================================================
# tests/test_gallery.py - Gallery Endpoint Tests
# =============================================================================
# Cloudinary is patched at core.services.gallery_service.CloudinaryClient.
# =============================================================================

from unittest.mock import call, patch

import pytest

from lib.cloudinary_client import CloudinaryClientError

CLOUDINARY = "core.services.gallery_service.CloudinaryClient"


@pytest.fixture
def mock_cloudinary():
    with patch(CLOUDINARY) as mock:
        yield mock


class TestListGallery:
    """Tests for GET /api/v1/gallery."""

    def test_formats_from_eager_versions(self, authed_client, mock_cloudinary):
        mock_cloudinary.search_folder.return_value = {
            "total_count": 2,
            "resources": [
                {
                    "public_id": "gallery/civic",
                    "eager": [
                        {"width": 640, "height": 480, "secure_url": "https://cdn/640.jpg"},
                        {"width": 1024, "height": 768, "secure_url": "https://cdn/1024.jpg"},
                    ],
                },
                {"public_id": "gallery/rav4"},
            ],
        }
        response = authed_client.get("/api/v1/gallery")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["images"][0]["formats"][1] == {"width": 1024, "height": 768, "url": "https://cdn/1024.jpg"}
        assert "formats" not in body["images"][1]
        mock_cloudinary.search_folder.assert_called_once_with("gallery", 100)

    def test_empty_gallery(self, authed_client, mock_cloudinary):
        mock_cloudinary.search_folder.return_value = {"resources": []}
        assert authed_client.get("/api/v1/gallery").json() == {"images": [], "message": "No images found in gallery"}

    def test_without_cloudinary_is_500(self, authed_client):
        response = authed_client.get("/api/v1/gallery")
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch gallery images"


class TestManageGallery:
    """Tests for POST /api/v1/gallery/manage."""

    def test_requires_session(self, client, mock_cloudinary):
        response = client.post("/api/v1/gallery/manage", json={"action": "delete", "publicId": "gallery/civic"})
        assert response.status_code == 401
        mock_cloudinary.destroy.assert_not_called()

    def test_delete_invalidates_cache(self, authed_client, mock_cloudinary):
        response = authed_client.post("/api/v1/gallery/manage", json={"action": "delete", "publicId": "gallery/civic"})
        assert response.json() == {"success": True, "action": "delete", "publicId": "gallery/civic"}
        mock_cloudinary.destroy.assert_called_once_with("gallery/civic", invalidate=True)

    def test_rename(self, authed_client, mock_cloudinary):
        mock_cloudinary.rename.return_value = {
            "public_id": "gallery/civic-front",
            "secure_url": "https://cdn/gallery/civic-front.jpg",
        }
        body = authed_client.post(
            "/api/v1/gallery/manage",
            json={"action": "rename", "publicId": "gallery/civic", "newPublicId": "gallery/civic-front"},
        ).json()
        assert body["oldPublicId"] == "gallery/civic"
        assert body["newPublicId"] == "gallery/civic-front"
        assert body["url"] == "https://cdn/gallery/civic-front.jpg"

    def test_rename_requires_new_id(self, authed_client, mock_cloudinary):
        response = authed_client.post("/api/v1/gallery/manage", json={"action": "rename", "publicId": "gallery/civic"})
        assert response.status_code == 400
        assert response.json()["detail"] == "New public ID is required for rename action"
        mock_cloudinary.rename.assert_not_called()

    @pytest.mark.parametrize("payload", [
        {"action": "delete"},
        {"action": "archive", "publicId": "gallery/civic"},
    ])
    def test_bad_requests(self, authed_client, mock_cloudinary, payload):
        assert authed_client.post("/api/v1/gallery/manage", json=payload).status_code == 400

    def test_cloudinary_failure(self, authed_client, mock_cloudinary):
        mock_cloudinary.destroy.side_effect = CloudinaryClientError("boom")
        response = authed_client.post("/api/v1/gallery/manage", json={"action": "delete", "publicId": "gallery/civic"})
        assert response.status_code == 500


class TestGalleryTags:
    """Tests for /api/v1/gallery/tags."""

    def test_add_applies_per_image(self, authed_client, mock_cloudinary):
        response = authed_client.post(
            "/api/v1/gallery/tags",
            json={"action": "add", "publicIds": ["a", "b"], "tags": ["suv", "featured"]},
        )
        assert response.json()["success"] is True
        assert mock_cloudinary.add_tags.call_args_list == [
            call(["suv", "featured"], ["a"]),
            call(["suv", "featured"], ["b"]),
        ]

    def test_replace_applies_once(self, authed_client, mock_cloudinary):
        authed_client.post("/api/v1/gallery/tags", json={"action": "replace", "publicIds": ["a", "b"], "tags": ["sold"]})
        mock_cloudinary.replace_tags.assert_called_once_with(["sold"], ["a", "b"])

    @pytest.mark.parametrize("payload,detail", [
        ({"action": "add", "publicIds": [], "tags": ["x"]}, "At least one public ID is required"),
        ({"action": "add", "publicIds": ["a"], "tags": []}, "At least one tag is required"),
        ({"action": "merge", "publicIds": ["a"], "tags": ["x"]}, "Invalid action"),
    ])
    def test_validation(self, authed_client, mock_cloudinary, payload, detail):
        response = authed_client.post("/api/v1/gallery/tags", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == detail

    def test_tags_for_image(self, authed_client, mock_cloudinary):
        mock_cloudinary.resource.return_value = {"tags": ["suv"]}
        body = authed_client.get("/api/v1/gallery/tags", params={"publicId": "gallery/rav4"}).json()
        assert body == {"success": True, "publicId": "gallery/rav4", "tags": ["suv"]}

    def test_tags_by_prefix(self, authed_client, mock_cloudinary):
        mock_cloudinary.list_tags.return_value = ["suv", "sedan"]
        body = authed_client.get("/api/v1/gallery/tags", params={"prefix": "s"}).json()
        assert body == {"success": True, "tags": ["suv", "sedan"]}

    def test_tags_need_id_or_prefix(self, authed_client, mock_cloudinary):
        assert authed_client.get("/api/v1/gallery/tags").status_code == 400

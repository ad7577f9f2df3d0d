# =============================================================================
# tests/test_dashboard.py - Dashboard Tests
# =============================================================================

from tests.conftest import TEST_DEALERSHIP_ID


class TestDashboardSummary:
    """Tests for GET /api/v1/dashboard."""

    def test_requires_session(self, client):
        assert client.get("/api/v1/dashboard").status_code == 401

    def test_summary(self, authed_client):
        body = authed_client.get("/api/v1/dashboard").json()
        assert body["user"]["dealershipId"] == TEST_DEALERSHIP_ID
        assert body["listings"] == {"total": 3, "byStatus": {"published": 3}}
        assert set(body["plans"]) == {"pro", "growth", "enterprise"}

    def test_recent_listings_are_formatted(self, authed_client):
        recent = authed_client.get("/api/v1/dashboard").json()["recent"]
        assert [item["id"] for item in recent] == ["listing_123", "listing_456", "listing_789"]
        assert recent[0]["price"] == "$25,999"
        assert recent[0]["mileage"] == "5,000 mi"

    def test_new_listing_counted_and_first(self, authed_client, sample_listing_payload):
        created = authed_client.post("/api/v1/listings", json=sample_listing_payload).json()
        body = authed_client.get("/api/v1/dashboard").json()
        assert body["listings"]["byStatus"] == {"published": 3, "draft": 1}
        assert body["recent"][0]["id"] == created["id"]

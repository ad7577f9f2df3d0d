# =============================================================================
# tests/test_health.py - Health Endpoint Tests
# =============================================================================

from unittest.mock import patch

from app.routers.health import VERSION


class TestHealth:
    def test_health(self, client):
        body = client.get("/api/v1/health").json()
        assert body["status"] == "healthy"
        assert body["environment"] == "development"
        assert body["version"] == VERSION

    def test_live(self, client):
        assert client.get("/api/v1/health/live").json()["status"] == "alive"

    @patch("app.routers.health.SupabaseClient")
    def test_ready(self, mock_supabase, client):
        mock_supabase.ping.return_value = True
        body = client.get("/api/v1/health/ready").json()
        assert body == {"status": "ready", "checks": {"database": "healthy"}, "timestamp": body["timestamp"]}

    @patch("app.routers.health.SupabaseClient")
    def test_ready_degraded(self, mock_supabase, client):
        mock_supabase.ping.side_effect = RuntimeError("connection refused")
        body = client.get("/api/v1/health/ready").json()
        assert body["status"] == "degraded"
        assert body["checks"]["database"].startswith("unhealthy: connection refused")

    def test_config_reports_flags_only(self, client):
        body = client.get("/api/v1/health/config").json()
        assert body["supabase"] is True
        assert body["supabase_jwt_secret"] is True
        assert body["openai"] is False
        assert body["stripe"] is False
        assert all(isinstance(v, bool) for k, v in body.items() if k != "environment")

    def test_root(self, client):
        body = client.get("/").json()
        assert body["name"] == "DealerAI API"

# =============================================================================
# tests/test_auth.py - Authentication Tests
# =============================================================================
# Tests for token extraction, JWT verification, the /auth routes and the
# session middleware. Tokens are real HS256 JWTs signed with the test secret
# from conftest.
#
# Run with: pytest tests/test_auth.py -v
# =============================================================================

import base64
import json
import time
from unittest.mock import patch

import pytest
from jose import ExpiredSignatureError, JWTError, jwt

from app.auth import decode_token
from app.auth.dependencies import session_cookie_name, token_from_cookies
from app.config import settings
from lib.supabase_client import SupabaseClientError
from tests.conftest import TEST_DEALERSHIP_ID, TEST_USER_ID, make_token


def cookie_header(cookies: dict[str, str]) -> dict[str, str]:
    return {"cookie": "; ".join(f"{name}={value}" for name, value in cookies.items())}


def empty_secret_token() -> str:
    """Token signed with an empty HS256 key."""
    claims = {"sub": str(TEST_USER_ID), "aud": "authenticated", "exp": int(time.time()) + 3600}
    return jwt.encode(claims, "", algorithm="HS256")


def session_json(token: str) -> str:
    return json.dumps({"access_token": token, "refresh_token": "refresh"}, separators=(",", ":"))


# =============================================================================
# Token Extraction
# =============================================================================

class TestTokenFromCookies:
    """Tests for token_from_cookies."""

    def test_session_cookie_name_uses_project_ref(self):
        assert session_cookie_name() == "sb-testref-auth-token"

    def test_plain_access_token_cookie(self):
        assert token_from_cookies({"sb-access-token": "abc"}) == "abc"

    def test_json_session_cookie(self):
        assert token_from_cookies({"sb-testref-auth-token": session_json("abc")}) == "abc"

    def test_base64_session_cookie(self):
        encoded = base64.urlsafe_b64encode(session_json("abc").encode()).decode().rstrip("=")
        assert token_from_cookies({"sb-testref-auth-token": f"base64-{encoded}"}) == "abc"

    def test_chunked_session_cookie(self):
        value = session_json("abc")
        middle = len(value) // 2
        cookies = {
            "sb-testref-auth-token.0": value[:middle],
            "sb-testref-auth-token.1": value[middle:],
        }
        assert token_from_cookies(cookies) == "abc"

    def test_legacy_list_cookie(self):
        assert token_from_cookies({"sb-testref-auth-token": '["abc","refresh"]'}) == "abc"

    @pytest.mark.parametrize("cookies", [
        {},
        {"sb-testref-auth-token": "not json"},
        {"sb-testref-auth-token": "base64-!!!"},
        {"sb-otherref-auth-token": '{"access_token":"abc"}'},
    ])
    def test_no_token(self, cookies):
        assert token_from_cookies(cookies) is None


# =============================================================================
# Token Verification
# =============================================================================

class TestDecodeToken:
    """Tests for decode_token."""

    def test_valid_token(self):
        user = decode_token(make_token())
        assert user.id == TEST_USER_ID
        assert user.email == "dealer@example.com"
        assert user.dealership_id == TEST_DEALERSHIP_ID

    def test_token_without_dealership(self):
        assert decode_token(make_token(dealership_id=None)).dealership_id is None

    def test_expired_token(self):
        with pytest.raises(ExpiredSignatureError):
            decode_token(make_token(expires_in=-60))

    def test_wrong_audience(self):
        with pytest.raises(JWTError):
            decode_token(make_token(audience="anon"))

    def test_wrong_secret(self):
        with pytest.raises(JWTError):
            decode_token(make_token(secret="some-other-secret-value-0123456789abcdef"))

    def test_missing_secret_refuses_hs256(self):
        with patch.object(settings, "SUPABASE_JWT_SECRET", ""):
            with pytest.raises(JWTError, match="not configured"):
                decode_token(empty_secret_token())


# =============================================================================
# Auth Routes
# =============================================================================

class TestAuthRoutes:
    """Tests for /api/v1/auth/me, /verify and /callback."""

    def test_verify_with_bearer_header(self, client):
        response = client.get("/api/v1/auth/verify", headers={"Authorization": f"Bearer {make_token()}"})
        assert response.status_code == 200
        assert response.json() == {"valid": True, "user_id": str(TEST_USER_ID), "email": "dealer@example.com"}

    def test_verify_with_session_cookie(self, client):
        headers = cookie_header({"sb-testref-auth-token": session_json(make_token())})
        assert client.get("/api/v1/auth/verify", headers=headers).status_code == 200

    def test_missing_token(self, client):
        response = client.get("/api/v1/auth/verify")
        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_missing_secret_rejects_empty_key_tokens(self, client):
        headers = {"Authorization": f"Bearer {empty_secret_token()}"}
        with patch.object(settings, "SUPABASE_JWT_SECRET", ""):
            assert client.get("/api/v1/auth/verify", headers=headers).status_code == 401
            assert client.get("/api/v1/listings", headers=headers).status_code == 401

    def test_expired_token(self, client):
        response = client.get(
            "/api/v1/auth/verify",
            headers={"Authorization": f"Bearer {make_token(expires_in=-60)}"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    @patch("app.auth.routes.SupabaseClient")
    def test_me_from_users_row(self, mock_supabase, client):
        mock_supabase.fetch_user.return_value = {
            "id": str(TEST_USER_ID),
            "email": "dealer@example.com",
            "full_name": "Dana Dealer",
            "role": "admin",
            "dealership_id": TEST_DEALERSHIP_ID,
            "subscription_status": "active",
        }
        body = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {make_token()}"}).json()
        assert body["full_name"] == "Dana Dealer"
        assert body["subscription_status"] == "active"

    @patch("app.auth.routes.SupabaseClient")
    def test_me_falls_back_to_token(self, mock_supabase, client):
        mock_supabase.fetch_user.side_effect = SupabaseClientError("db down")
        body = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {make_token()}"}).json()
        assert body["id"] == str(TEST_USER_ID)
        assert body["dealership_id"] == TEST_DEALERSHIP_ID
        assert body["full_name"] is None

    def test_callback_without_code(self, client):
        response = client.get("/api/v1/auth/callback", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"].endswith("/sign-in?error=No%20authentication%20code%20provided")

    @patch("app.auth.routes.SupabaseClient")
    def test_callback_exchange_error(self, mock_supabase, client):
        mock_supabase.exchange_code_for_session.side_effect = SupabaseClientError("Code expired")
        response = client.get("/api/v1/auth/callback?code=abc", follow_redirects=False)
        assert response.headers["location"].endswith("/sign-in?error=Code%20expired")

    @patch("app.auth.routes.SupabaseClient")
    def test_callback_without_session(self, mock_supabase, client):
        mock_supabase.exchange_code_for_session.return_value = None
        response = client.get("/api/v1/auth/callback?code=abc", follow_redirects=False)
        assert response.headers["location"].endswith("/dashboard")

    @patch("app.auth.routes.SupabaseClient")
    def test_callback_renders_token_page(self, mock_supabase, client):
        mock_supabase.exchange_code_for_session.return_value = {
            "access_token": "access-123",
            "refresh_token": "refresh-456",
        }
        response = client.get("/api/v1/auth/callback?code=abc")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert 'access_token: "access-123"' in response.text
        assert 'refresh_token: "refresh-456"' in response.text
        assert "'/dashboard'" in response.text


# =============================================================================
# Session Middleware
# =============================================================================

class TestSessionMiddleware:
    """Tests for page guarding in app.middleware."""

    def test_page_without_session_redirects(self, client):
        response = client.get("/dashboard", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/sign-in?redirect=/dashboard"

    def test_page_with_session(self, client):
        response = client.get("/dashboard", headers=cookie_header({"sb-access-token": make_token()}))
        assert response.status_code == 200
        assert response.json()["page"] == "dashboard"

    def test_missing_secret_cookie_redirects(self, client):
        headers = cookie_header({"sb-access-token": empty_secret_token()})
        with patch.object(settings, "SUPABASE_JWT_SECRET", ""):
            response = client.get("/dashboard", headers=headers, follow_redirects=False)
        assert response.status_code == 307

    def test_invalid_cookie_redirects(self, client):
        response = client.get(
            "/dashboard",
            headers=cookie_header({"sb-access-token": make_token(expires_in=-60)}),
            follow_redirects=False,
        )
        assert response.status_code == 307

    @pytest.mark.parametrize("path", ["/", "/sign-in"])
    def test_public_pages_pass(self, client, path):
        assert client.get(path, follow_redirects=False).status_code == 200

    def test_sign_in_keeps_redirect(self, client):
        body = client.get("/sign-in?redirect=/dashboard/listings").json()
        assert body["page"] == "sign-in"
        assert body["redirect"] == "/dashboard/listings"

    def test_api_paths_answer_401_instead_of_redirecting(self, client):
        response = client.get("/api/v1/listings", follow_redirects=False)
        assert response.status_code == 401

    def test_public_api_prefix_passes(self, client):
        with patch("core.services.analytics_service.SupabaseClient") as mock_supabase:
            mock_supabase.fetch_vehicle.return_value = {"id": "veh-1", "dealership_id": TEST_DEALERSHIP_ID}
            response = client.post("/api/v1/public/vehicles/veh-1/views")
        assert response.status_code == 200

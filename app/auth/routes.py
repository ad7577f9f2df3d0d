# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes return user info after authentication and finish the
# email-link / OAuth flow by exchanging the callback code for a session.
# =============================================================================

import json
import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_REDIRECT = "/dashboard"

CALLBACK_HTML = """<!DOCTYPE html>
<html>
  <head>
    <title>Authentication Successful</title>
    <meta http-equiv="Content-Security-Policy" content="default-src 'self'; script-src 'unsafe-inline';">
  </head>
  <body>
    <p>Authentication successful. Redirecting...</p>
    <script>
      localStorage.setItem('supabase.auth.token', JSON.stringify({
        access_token: __ACCESS_TOKEN__,
        refresh_token: __REFRESH_TOKEN__
      }));
      localStorage.setItem('auth_status', 'authenticated');
      const redirectPath = localStorage.getItem('auth_redirect') || '__DEFAULT_REDIRECT__';
      localStorage.removeItem('auth_redirect');
      window.location.href = __ORIGIN__ + redirectPath;
    </script>
  </body>
</html>
"""


def _origin(request: Request) -> str:
    return f"{request.url.scheme}://{request.url.netloc}"


def _sign_in_error(request: Request, message: str) -> RedirectResponse:
    return RedirectResponse(f"{_origin(request)}/sign-in?error={quote(message)}")


def render_callback_page(origin: str, access_token: str, refresh_token: str) -> str:
    """HTML that stores the session tokens in localStorage and then redirects."""
    return (
        CALLBACK_HTML
        .replace("__ACCESS_TOKEN__", json.dumps(access_token))
        .replace("__REFRESH_TOKEN__", json.dumps(refresh_token))
        .replace("__ORIGIN__", json.dumps(origin))
        .replace("__DEFAULT_REDIRECT__", DEFAULT_REDIRECT)
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Returns:
        UserResponse: Profile from public.users, or token data if no row yet

    Raises:
        401: If not authenticated
    """
    try:
        row = SupabaseClient.fetch_user(str(user.id))
        if row:
            return UserResponse(**row)
    except SupabaseClientError as e:
        logger.warning(f"Could not fetch user profile: {e.message}")

    # User exists in auth but not yet in public.users
    return UserResponse(id=user.id, email=user.email, dealership_id=user.dealership_id)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Returns:
        dict: Confirmation with user_id

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email,
    }


@router.get("/callback")
async def auth_callback(request: Request, code: str | None = None):
    """
    Finish sign-in by exchanging the callback code for a session.

    - no code: redirect to /sign-in with an error
    - exchange error: redirect to /sign-in with the error message
    - session: HTML page storing the tokens, then redirecting
    - no session: redirect to /dashboard
    """
    logger.info(f"Auth callback called with code: {'present' if code else 'missing'}")
    if not code:
        return _sign_in_error(request, "No authentication code provided")

    try:
        session = SupabaseClient.exchange_code_for_session(code)
    except SupabaseClientError as e:
        logger.error(f"Error exchanging code for session: {e.message}")
        return _sign_in_error(request, e.message)

    if session is None:
        return RedirectResponse(f"{_origin(request)}{DEFAULT_REDIRECT}")

    html = render_callback_page(_origin(request), session["access_token"], session["refresh_token"])
    return HTMLResponse(html)

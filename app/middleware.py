# =============================================================================
# app/middleware.py - Session Middleware
# =============================================================================
# Resolves the Supabase session on every request and guards page paths.
#
# - Static assets and API docs are skipped entirely
# - request.state.user holds the AuthUser, or None without a valid session
# - Public pages, /api/v1/public/* and every other /api/ path pass through
#   (API routes enforce auth with their own dependencies and answer 401)
# - Any other page without a session redirects to /sign-in?redirect=<path>
#
# Usage:
#   app.middleware("http")(session_middleware)
# =============================================================================

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import RedirectResponse
from jose import JWTError

from app.auth.dependencies import decode_token, token_from_request
from app.auth.models import AuthUser

logger = logging.getLogger(__name__)

SKIPPED_PATHS = {"/favicon.ico", "/robots.txt", "/docs", "/redoc", "/openapi.json"}
SKIPPED_PREFIXES = ("/static/", "/docs/")

PUBLIC_PATHS = {
    "/",
    "/sign-in",
    "/sign-up",
    "/forgot-password",
    "/reset-password",
    "/api/v1/auth/callback",
}
PUBLIC_PREFIXES = ("/api/v1/public/",)
API_PREFIX = "/api/"


def resolve_session(request: Request) -> Optional[AuthUser]:
    """AuthUser for the request's token, or None if absent or invalid."""
    token = token_from_request(request)
    if not token:
        return None
    try:
        return decode_token(token)
    except (JWTError, ValueError) as e:
        logger.debug(f"Ignoring invalid session token: {e}")
        return None


def is_public(path: str) -> bool:
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


async def session_middleware(request: Request, call_next):
    path = request.url.path
    if path in SKIPPED_PATHS or path.startswith(SKIPPED_PREFIXES):
        return await call_next(request)

    request.state.user = resolve_session(request)

    if is_public(path) or path.startswith(API_PREFIX):
        return await call_next(request)

    if request.state.user is None:
        logger.info(f"No session for {path}, redirecting to sign-in")
        return RedirectResponse(url=f"/sign-in?redirect={quote(path)}", status_code=307)

    return await call_next(request)

# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# The access token is read from, in order:
# - Authorization: Bearer <token>
# - the sb-access-token cookie
# - the sb-<project-ref>-auth-token cookie (possibly split into .0, .1, ...
#   chunks) holding JSON, or "base64-" prefixed JSON, with access_token
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret)
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import base64
import binascii
import json
import logging
import time
from typing import Optional
from urllib.parse import urlparse
from uuid import UUID

import httpx
from fastapi import HTTPException, Request, status
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.auth.models import AuthUser

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "sb-access-token"
BASE64_PREFIX = "base64-"

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


# =============================================================================
# Token Extraction
# =============================================================================

def project_ref() -> str:
    """Project ref from SUPABASE_URL (https://<project-ref>.supabase.co)."""
    host = urlparse(settings.SUPABASE_URL).hostname or ""
    return host.split(".")[0]


def session_cookie_name() -> str:
    return f"sb-{project_ref()}-auth-token"


def _decode_session_cookie(value: str) -> Optional[str]:
    """Pull access_token out of a Supabase session cookie value."""
    if value.startswith(BASE64_PREFIX):
        encoded = value[len(BASE64_PREFIX):]
        try:
            value = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4)).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None
    try:
        data = json.loads(value)
    except json.JSONDecodeError:
        return None

    # Older helpers stored [access_token, refresh_token, ...]
    if isinstance(data, list):
        return data[0] if data and isinstance(data[0], str) else None
    if isinstance(data, dict):
        return data.get("access_token")
    return None


def token_from_cookies(cookies: dict[str, str]) -> Optional[str]:
    if cookies.get(ACCESS_TOKEN_COOKIE):
        return cookies[ACCESS_TOKEN_COOKIE]

    name = session_cookie_name()
    value = cookies.get(name)
    if value is None:
        chunks = []
        index = 0
        while f"{name}.{index}" in cookies:
            chunks.append(cookies[f"{name}.{index}"])
            index += 1
        value = "".join(chunks) or None
    return _decode_session_cookie(value) if value else None


def token_from_request(request: Request) -> Optional[str]:
    """Access token from the Authorization header, falling back to cookies."""
    header = request.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return token_from_cookies(request.cookies)


# =============================================================================
# Token Verification
# =============================================================================

def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = settings.SUPABASE_URL.rstrip('/')
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()

    # Return cached if valid
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        jwks_url = _get_jwks_url()
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return _jwks_cache
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Stale keys beat no keys
        if _jwks_cache:
            return _jwks_cache
        return {"keys": []}


def _hs256_key() -> tuple[object, str]:
    if not settings.SUPABASE_JWT_SECRET:
        raise JWTError("HS256 verification not configured")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def _get_signing_key(token: str) -> tuple[object, str]:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification

    Raises:
        JWTError: HS256 token but no JWT secret configured
    """
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        return _hs256_key()

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return _hs256_key()

    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return _hs256_key()


def decode_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and build the AuthUser.

    Raises:
        JWTError: Bad signature, wrong audience or malformed token
        ExpiredSignatureError: Token has expired
        ValueError: Missing or malformed sub claim
    """
    signing_key, algorithm = _get_signing_key(token)
    payload = jwt.decode(token, signing_key, algorithms=[algorithm], audience="authenticated")

    user_id = payload.get("sub")
    if not user_id:
        raise ValueError("Invalid token: missing user ID")

    metadata = payload.get("user_metadata") or {}
    return AuthUser(
        id=UUID(user_id),
        email=payload.get("email"),
        dealership_id=metadata.get("dealership_id"),
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# =============================================================================
# Dependencies
# =============================================================================

async def get_current_user(request: Request) -> AuthUser:
    """
    Extract and validate the user from the Supabase session.

    This dependency:
    1. Finds the token in the Authorization header or the session cookies
    2. Verifies the JWT signature (supports ES256 and HS256)
    3. Validates the token hasn't expired
    4. Returns an AuthUser with id, email and dealership_id

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    token = token_from_request(request)
    if not token:
        raise _unauthorized("Not authenticated")

    try:
        user = decode_token(token)
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {str(e)}")
    except ValueError as e:
        logger.warning(f"JWT token has a bad subject: {e}")
        raise _unauthorized("Invalid token: malformed user ID")

    logger.debug(f"Authenticated user: {user.id}")
    return user


async def get_current_user_optional(request: Request) -> Optional[AuthUser]:
    """
    Optionally get the current user.

    Returns None if no valid session is present, instead of raising an error.
    """
    try:
        return await get_current_user(request)
    except HTTPException:
        return None

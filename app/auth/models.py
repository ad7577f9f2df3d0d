# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database. dealership_id comes from the token's
    user_metadata.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None
    dealership_id: Optional[str] = None


class UserResponse(BaseModel):
    """
    Profile returned by /auth/me.

    Built from the public.users row when one exists.
    """
    model_config = ConfigDict(extra="ignore")

    id: UUID
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None
    dealership_id: Optional[str] = None
    subscription_status: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

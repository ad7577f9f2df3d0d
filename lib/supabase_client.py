# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for:
# - Users and dealerships (profile, billing state)
# - Vehicles and generated vehicle content
# - Analytics event tables (views, leads, social engagement, impressions)
# - Cloudinary image events recorded by the webhook
# - The OAuth/magic-link code exchange used by the auth callback
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   user = SupabaseClient.fetch_user(user_id)
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(ApplicationError):
    """Error during Supabase operations."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "SUPABASE_ERROR")
        super().__init__(message, **kwargs)


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        user = SupabaseClient.fetch_user("550e8400-...")
        SupabaseClient.update_user(user["id"], {"subscription_status": "active"})
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _fetch_single(cls, table: str, column: str, value: Any, columns: str = "*") -> dict[str, Any] | None:
        """Fetch one row by column value, returning None when no row matches."""
        client = cls.get_client()
        try:
            response = (
                client.table(table)
                .select(columns)
                .eq(column, value)
                .single()
                .execute()
            )
            return response.data
        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_FAILED",
                details={"table": table, column: value}
            )

    @classmethod
    def _update(cls, table: str, column: str, value: Any, data: dict[str, Any]) -> list[dict[str, Any]]:
        """Update rows matching column == value and return the updated rows."""
        client = cls.get_client()
        try:
            response = client.table(table).update(data).eq(column, value).execute()
            logger.debug(f"Updated {len(response.data or [])} rows in {table} where {column}={value}")
            return response.data or []
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table}: {e}",
                code="UPDATE_FAILED",
                details={"table": table, column: value}
            )

    @classmethod
    def _insert(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        client = cls.get_client()
        try:
            response = client.table(table).insert(data).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                details={"table": table}
            )
        if response.data:
            return response.data[0]
        raise SupabaseClientError(
            message="Insert returned no data",
            code="INSERT_NO_DATA",
            details={"table": table}
        )

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    @classmethod
    def exchange_code_for_session(cls, code: str) -> dict[str, str] | None:
        """
        Exchange an auth callback code for a session.

        Uses a fresh anon-key client, since the exchange establishes a user
        session rather than a service session.

        Args:
            code: The `code` query parameter from the auth redirect

        Returns:
            {"access_token", "refresh_token"} or None when no session came back

        Raises:
            SupabaseClientError: If the exchange is rejected
        """
        try:
            client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
            response = client.auth.exchange_code_for_session({"auth_code": code})
        except Exception as e:
            raise SupabaseClientError(
                message=str(e),
                code="CODE_EXCHANGE_FAILED",
                suggestion="Request a new sign-in link; codes are single-use"
            )

        session = getattr(response, "session", None)
        if session is None:
            return None
        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
        }

    # -------------------------------------------------------------------------
    # Users & Dealerships
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_user(cls, user_id: str) -> dict[str, Any] | None:
        """
        Fetch a user row by ID.

        Returns:
            User dict (id, email, full_name, role, dealership_id,
            stripe_customer_id, subscription_status), or None if not found
        """
        return cls._fetch_single("users", "id", user_id)

    @classmethod
    def fetch_user_with_dealership(cls, user_id: str) -> dict[str, Any] | None:
        """Fetch a user row with the joined dealership name and location."""
        return cls._fetch_single("users", "id", user_id, "*, dealerships(name, city, state)")

    @classmethod
    def update_user(cls, user_id: str, data: dict[str, Any]) -> list[dict[str, Any]]:
        return cls._update("users", "id", user_id, data)

    @classmethod
    def update_dealership(cls, dealership_id: str, data: dict[str, Any]) -> list[dict[str, Any]]:
        return cls._update("dealerships", "id", dealership_id, data)

    @classmethod
    def update_dealership_by_subscription(
        cls,
        subscription_id: str,
        data: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Update the dealership that owns a Stripe subscription."""
        return cls._update("dealerships", "stripe_subscription_id", subscription_id, data)

    # -------------------------------------------------------------------------
    # Vehicles & Content
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_vehicle(cls, vehicle_id: str) -> dict[str, Any] | None:
        return cls._fetch_single("vehicles", "id", vehicle_id)

    @classmethod
    def fetch_vehicle_by_stock_number(cls, stock_number: str) -> dict[str, Any] | None:
        return cls._fetch_single("vehicles", "stock_number", stock_number, "id, dealership_id")

    @classmethod
    def fetch_vehicles(cls, dealership_id: str) -> list[dict[str, Any]]:
        """
        Fetch every vehicle of a dealership.

        Returns:
            List of vehicle dicts (id, make, model, year, trim, body_type,
            price, status, created_at)
        """
        client = cls.get_client()
        try:
            response = (
                client.table("vehicles")
                .select("id, make, model, year, trim, body_type, price, status, created_at")
                .eq("dealership_id", dealership_id)
                .execute()
            )
            return response.data or []
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch vehicles: {e}",
                code="FETCH_VEHICLES_FAILED",
                details={"dealership_id": dealership_id}
            )

    @classmethod
    def upsert_vehicle_content(
        cls,
        vehicle_id: str,
        content: dict[str, Any],
        dealership_id: str | None = None,
    ) -> None:
        """
        Store generated copy for a vehicle, replacing any previous version.

        Args:
            vehicle_id: The vehicles.id the content belongs to
            content: Generated content with description, highlights, seoTitle
                and seoDescription keys
            dealership_id: Owning dealership, counted by analytics
        """
        client = cls.get_client()
        data = {
            "vehicle_id": vehicle_id,
            "dealership_id": dealership_id,
            "description": content.get("description"),
            "highlights": content.get("highlights"),
            "seo_title": content.get("seoTitle"),
            "seo_description": content.get("seoDescription"),
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            client.table("vehicle_content").upsert(data).execute()
            logger.info(f"Saved generated content for vehicle {vehicle_id}")
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to save vehicle content: {e}",
                code="UPSERT_CONTENT_FAILED",
                details={"vehicle_id": vehicle_id}
            )

    # -------------------------------------------------------------------------
    # Analytics Events
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_events(
        cls,
        table: str,
        dealership_id: str,
        time_column: str,
        start: datetime,
        end: datetime,
    ) -> list[dict[str, Any]]:
        """
        Fetch a dealership's event rows inside a time window (inclusive).

        Args:
            table: vehicle_views, leads, social_engagement,
                search_impressions or vehicle_content
            dealership_id: Dealership UUID
            time_column: Timestamp column to filter on
            start: Window start
            end: Window end

        Returns:
            List of row dicts, possibly empty

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        try:
            response = (
                client.table(table)
                .select("*")
                .eq("dealership_id", dealership_id)
                .gte(time_column, start.isoformat())
                .lte(time_column, end.isoformat())
                .execute()
            )
            return response.data or []
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch {table}: {e}",
                code="FETCH_EVENTS_FAILED",
                details={"table": table, "dealership_id": dealership_id}
            )

    @classmethod
    def insert_vehicle_view(cls, vehicle_id: str, dealership_id: str, user_id: str | None = None) -> dict[str, Any]:
        return cls._insert("vehicle_views", {
            "vehicle_id": vehicle_id,
            "dealership_id": dealership_id,
            "user_id": user_id,
            "viewed_at": datetime.now(timezone.utc).isoformat(),
        })

    @classmethod
    def insert_lead(cls, vehicle_id: str, dealership_id: str, lead: dict[str, Any]) -> dict[str, Any]:
        return cls._insert("leads", {
            "vehicle_id": vehicle_id,
            "dealership_id": dealership_id,
            "name": lead.get("name"),
            "email": lead.get("email"),
            "phone": lead.get("phone"),
            "message": lead.get("message"),
            "created_at": datetime.now(timezone.utc).isoformat(),
        })

    # -------------------------------------------------------------------------
    # Image Events
    # -------------------------------------------------------------------------

    @classmethod
    def insert_image_event(
        cls,
        event_type: str,
        public_id: str | None,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Record a Cloudinary notification.

        Args:
            event_type: upload, generation or error
            public_id: Cloudinary public ID the event concerns (may be None)
            payload: The full notification body

        Returns:
            Inserted row
        """
        return cls._insert("image_events", {
            "event_type": event_type,
            "public_id": public_id,
            "payload": payload,
            "received_at": datetime.now(timezone.utc).isoformat(),
        })

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    @classmethod
    def ping(cls) -> bool:
        """Run a trivial query to confirm the database is reachable."""
        client = cls.get_client()
        client.table("dealerships").select("id").limit(1).execute()
        return True

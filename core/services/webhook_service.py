# =============================================================================
# core/services/webhook_service.py - Provider Notification Handling
# =============================================================================
# Verifies and dispatches inbound notifications:
# - Stripe: checkout completion and subscription lifecycle -> users and
#   dealerships rows
# - Cloudinary: upload, generation and error notifications -> image_events
#
# Handlers forward parsed data to the database and return. Stripe retries
# failed deliveries on its own, so nothing here is retried or deduplicated.
# =============================================================================

import json
import logging
from typing import Any

import stripe

from app.config import settings
from app.exceptions import InvalidWebhookSignatureError
from core.models.subscription import tier_for_price_id
from core.services.billing_service import NO_DEALERSHIP
from lib.cloudinary_client import CloudinaryClient
from lib.stripe_client import StripeClient
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

CLOUDINARY_RECORDED_TYPES = ("upload", "generation", "error")


class WebhookError(Exception):
    """A Stripe event could not be verified or applied."""


class WebhookService:
    """Service for Stripe and Cloudinary webhooks."""

    # -------------------------------------------------------------------------
    # Stripe
    # -------------------------------------------------------------------------

    @staticmethod
    def parse_stripe_event(payload: bytes, signature: str) -> dict[str, Any]:
        """
        Verify a Stripe delivery and return the event as a plain dict.

        Raises:
            WebhookError: Bad signature or malformed body
        """
        try:
            StripeClient.verify_webhook(payload, signature)
            return json.loads(payload)
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Stripe signature verification failed: {e}")
            raise WebhookError(str(e))
        except ValueError as e:
            raise WebhookError(f"Invalid payload: {e}")

    @staticmethod
    def handle_stripe_event(event: dict[str, Any]) -> None:
        """
        Apply a verified Stripe event to the database.

        Unknown event types are acknowledged without changes.

        Raises:
            WebhookError: If a database or Stripe call fails
        """
        event_type = event.get("type")
        obj = (event.get("data") or {}).get("object") or {}
        logger.info(f"Stripe webhook received: {event_type}")

        try:
            if event_type == "checkout.session.completed":
                WebhookService._checkout_completed(obj)
            elif event_type == "customer.subscription.updated":
                SupabaseClient.update_dealership_by_subscription(
                    obj["id"], {"subscription_status": obj.get("status")}
                )
                logger.info(f"Subscription {obj['id']} is now {obj.get('status')}")
            elif event_type == "customer.subscription.deleted":
                SupabaseClient.update_dealership_by_subscription(
                    obj["id"], {"subscription_status": "canceled", "subscription_tier": None}
                )
                logger.info(f"Subscription {obj['id']} canceled")
            else:
                logger.info(f"Ignoring Stripe event type {event_type}")
        except WebhookError:
            raise
        except Exception as e:
            logger.error(f"Failed to apply Stripe event {event_type}: {e}")
            raise WebhookError(str(e))

    @staticmethod
    def _checkout_completed(session: dict[str, Any]) -> None:
        metadata = session.get("metadata") or {}
        user_id = metadata.get("userId")
        dealership_id = metadata.get("dealershipId")
        if not user_id:
            raise WebhookError("Checkout session has no userId in metadata")

        SupabaseClient.update_user(user_id, {
            "stripe_customer_id": session.get("customer"),
            "subscription_status": "active",
        })
        logger.info(f"User {user_id} subscription activated")

        subscription_id = session.get("subscription")
        if not dealership_id or dealership_id == NO_DEALERSHIP or not subscription_id:
            return

        tier = tier_for_price_id(StripeClient.get_subscription_price_id(subscription_id))
        if tier is None:
            logger.warning(f"Subscription {subscription_id} uses a price that matches no plan")
            return
        SupabaseClient.update_dealership(dealership_id, {
            "subscription_tier": tier,
            "stripe_subscription_id": subscription_id,
        })
        logger.info(f"Dealership {dealership_id} moved to tier {tier}")

    # -------------------------------------------------------------------------
    # Cloudinary
    # -------------------------------------------------------------------------

    @staticmethod
    def verify_cloudinary(body: str, timestamp: str | None, signature: str | None) -> None:
        """
        Check a Cloudinary notification signature.

        Only enforced in production; other environments accept unsigned
        notifications so local tunnels work.

        Raises:
            InvalidWebhookSignatureError: 403 in production when the check fails
        """
        logger.info(
            f"Cloudinary webhook received: timestamp={timestamp}, "
            f"signature={'present' if signature else 'missing'}, body_length={len(body)}"
        )
        if not settings.is_production:
            return
        if not CloudinaryClient.verify_notification(body, timestamp or "", signature or ""):
            logger.warning("Rejected Cloudinary webhook with invalid signature")
            raise InvalidWebhookSignatureError(status_code=403)

    @staticmethod
    def handle_cloudinary_notification(notification: dict[str, Any]) -> None:
        """
        Record upload, generation and error notifications; log anything else.

        Raises:
            SupabaseClientError: If the event row can't be written
        """
        notification_type = notification.get("notification_type")
        public_id = notification.get("public_id")

        if notification_type in CLOUDINARY_RECORDED_TYPES:
            SupabaseClient.insert_image_event(notification_type, public_id, notification)
            if notification_type == "error":
                logger.error(f"Cloudinary reported an error for {public_id}: {notification.get('error')}")
            else:
                logger.info(f"Recorded Cloudinary {notification_type} event for {public_id}")
        else:
            logger.info(f"Unhandled Cloudinary notification type: {notification_type}")

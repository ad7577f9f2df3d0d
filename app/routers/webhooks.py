# =============================================================================
# app/routers/webhooks.py - Provider Webhook Endpoints
# =============================================================================
# Public endpoints for Stripe and Cloudinary notifications. Both read the
# raw body, since signatures are computed over the exact bytes sent.
# =============================================================================

import json
import logging

from fastapi import APIRouter, Request

from app.exceptions import InvalidRequestError, InvalidWebhookSignatureError, ProviderError
from core.services.webhook_service import WebhookError, WebhookService
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/stripe/webhooks")
async def stripe_webhook(request: Request):
    """
    Receive a Stripe event.

    Raises:
        400: Missing stripe-signature header, failed verification, or an
            event that couldn't be applied
    """
    signature = request.headers.get("stripe-signature")
    if not signature:
        raise InvalidWebhookSignatureError("Missing stripe-signature header")

    payload = await request.body()
    try:
        event = WebhookService.parse_stripe_event(payload, signature)
        WebhookService.handle_stripe_event(event)
    except WebhookError as e:
        logger.error(f"Stripe webhook error: {e}")
        raise InvalidRequestError(f"Webhook error: {e}")

    return {"received": True}


@router.post("/cloudinary/webhook")
async def cloudinary_webhook(request: Request):
    """
    Receive a Cloudinary notification.

    Raises:
        403: Invalid signature (production only)
        500: The notification couldn't be parsed or recorded
    """
    body = (await request.body()).decode("utf-8", errors="replace")
    WebhookService.verify_cloudinary(
        body,
        request.headers.get("x-cld-timestamp"),
        request.headers.get("x-cld-signature"),
    )

    try:
        notification = json.loads(body)
        if not isinstance(notification, dict):
            raise ValueError("Notification body must be a JSON object")
        WebhookService.handle_cloudinary_notification(notification)
    except (ValueError, ApplicationError) as e:
        logger.error(f"Error processing Cloudinary webhook: {e}")
        raise ProviderError("Error processing webhook", error=str(e))

    return {"success": True}

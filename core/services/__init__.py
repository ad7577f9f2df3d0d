# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .listing_service import ListingService, listing_store
from .enhancement_service import EnhancementService
from .content_service import ContentService
from .gallery_service import GalleryService
from .billing_service import BillingService
from .webhook_service import WebhookService, WebhookError
from .social_service import SocialService, social_store
from .analytics_service import AnalyticsService

__all__ = [
    "ListingService",
    "listing_store",
    "EnhancementService",
    "ContentService",
    "GalleryService",
    "BillingService",
    "WebhookService",
    "WebhookError",
    "SocialService",
    "social_store",
    "AnalyticsService",
]

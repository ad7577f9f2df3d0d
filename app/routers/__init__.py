# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - listings.py: Listing CRUD, images, copy and background previews
# - chat.py: Dealership chat assistant
# - content.py: AI copywriting, suggestions and generated backgrounds
# - images.py: Cloudinary upload, enhancement and analysis
# - gallery.py: Gallery listing, management and tags
# - social.py: Simulated social publishing and schedule
# - billing.py: Subscription plans, checkout and billing portal
# - webhooks.py: Stripe and Cloudinary notifications
# - analytics.py: Dealership analytics and public tracking
# - dashboard.py: Dashboard summary and page paths
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import listings
from . import chat
from . import content
from . import images
from . import gallery
from . import social
from . import billing
from . import webhooks
from . import analytics
from . import dashboard

__all__ = [
    "health",
    "listings",
    "chat",
    "content",
    "images",
    "gallery",
    "social",
    "billing",
    "webhooks",
    "analytics",
    "dashboard",
]

# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable provider wrappers and utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - cloudinary_client.py: Cloudinary uploads, transformations and tags
# - stripe_client.py: Stripe checkout, billing portal and webhooks
# - formatters.py: Display formatting for prices, dates and distances
# - utils.py: Shared utilities (error base class, retry helper)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.cloudinary_client import CloudinaryClient, CloudinaryClientError
from lib.stripe_client import StripeClient, StripeClientError
from lib.utils import ApplicationError, with_retry

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Cloudinary
    "CloudinaryClient",
    "CloudinaryClientError",
    # Stripe
    "StripeClient",
    "StripeClientError",
    # Utils
    "ApplicationError",
    "with_retry",
]

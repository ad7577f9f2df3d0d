# =============================================================================
# core/services/listing_service.py - Listing Business Logic
# =============================================================================
# Handles listing CRUD against a process-local store seeded with three
# demo vehicles. Nothing persists across restarts.
#
# Listings are stored as camelCase dicts (the wire format), so fields the
# dashboard sends that the schema doesn't know about round-trip unchanged.
# Writes go through a lock so concurrent requests see whole updates.
# =============================================================================

import copy
import logging
import string
import threading
from datetime import datetime, timedelta, timezone
from typing import Any

from app.exceptions import ListingNotFoundError
from core.models.listing import ListingImage, ListingStatus, ListingWrite
from lib.formatters import random_string

logger = logging.getLogger(__name__)

LISTING_ID_ALPHABET = string.ascii_lowercase + string.digits

IMAGE_BASE_URL = "https://res.cloudinary.com/dtqezpvul/image/upload/v1707246137"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _seed_image(slug: str) -> dict[str, str]:
    return {
        "url": f"{IMAGE_BASE_URL}/car-images/{slug}.jpg",
        "publicId": f"car-images/{slug}",
    }


def seed_listings(now: datetime | None = None) -> list[dict[str, Any]]:
    """
    Build the demo inventory.

    Args:
        now: Reference time; createdAt is 10, 15 and 20 days before it

    Returns:
        Three published listings, newest first
    """
    now = now or datetime.now(timezone.utc)
    common = {
        "status": ListingStatus.PUBLISHED.value,
        "condition": "Used",
        "fuelType": "Gasoline",
        "transmission": "Automatic",
    }
    return [
        {
            "id": "listing_123",
            "title": "2023 Honda Civic EX",
            "make": "Honda",
            "model": "Civic",
            "year": 2023,
            "price": 25999,
            "mileage": 5000,
            **common,
            "exteriorColor": "Crystal Black Pearl",
            "interiorColor": "Gray",
            "drivetrain": "FWD",
            "features": ["Bluetooth", "Backup Camera", "Apple CarPlay", "Android Auto"],
            "description": "Well-equipped Civic EX with low miles and a clean interior.",
            "images": [_seed_image("honda-civic")],
            "createdAt": (now - timedelta(days=10)).isoformat(),
        },
        {
            "id": "listing_456",
            "title": "2022 Toyota Camry SE",
            "make": "Toyota",
            "model": "Camry",
            "year": 2022,
            "price": 27500,
            "mileage": 12000,
            **common,
            "exteriorColor": "Celestial Silver Metallic",
            "interiorColor": "Black",
            "drivetrain": "FWD",
            "features": ["Bluetooth", "Backup Camera", "Leather Seats", "Heated Seats"],
            "description": "Sporty Camry SE with leather and heated seats.",
            "images": [_seed_image("toyota-camry")],
            "createdAt": (now - timedelta(days=15)).isoformat(),
        },
        {
            "id": "listing_789",
            "title": "2021 Ford F-150 XLT",
            "make": "Ford",
            "model": "F-150",
            "year": 2021,
            "price": 39995,
            "mileage": 18500,
            **common,
            "exteriorColor": "Oxford White",
            "interiorColor": "Medium Earth Gray",
            "drivetrain": "4WD",
            "features": ["Bluetooth", "Backup Camera", "Navigation System", "Towing Package"],
            "description": "Capable F-150 XLT 4x4 ready to tow.",
            "images": [_seed_image("ford-f150")],
            "createdAt": (now - timedelta(days=20)).isoformat(),
        },
    ]


class ListingStore:
    """
    Process-local listing storage.

    Insertion order is preserved; reads return deep copies so callers can't
    mutate stored records.
    """

    def __init__(self, listings: list[dict[str, Any]] | None = None):
        self._lock = threading.Lock()
        self._listings: dict[str, dict[str, Any]] = {}
        self.reset(listings)

    def reset(self, listings: list[dict[str, Any]] | None = None) -> None:
        """Replace the contents (defaults to a fresh demo seed)."""
        seeded = seed_listings() if listings is None else listings
        with self._lock:
            self._listings = {item["id"]: copy.deepcopy(item) for item in seeded}

    def all(self) -> list[dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(item) for item in self._listings.values()]

    def get(self, listing_id: str) -> dict[str, Any] | None:
        with self._lock:
            item = self._listings.get(listing_id)
            return copy.deepcopy(item) if item is not None else None

    def put(self, listing: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            self._listings[listing["id"]] = copy.deepcopy(listing)
            return copy.deepcopy(listing)

    def update(self, listing_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        """Merge changes into a listing under the lock; None if it doesn't exist."""
        with self._lock:
            current = self._listings.get(listing_id)
            if current is None:
                return None
            merged = {**current, **copy.deepcopy(changes), "id": listing_id}
            self._listings[listing_id] = merged
            return copy.deepcopy(merged)

    def delete(self, listing_id: str) -> bool:
        with self._lock:
            return self._listings.pop(listing_id, None) is not None


# Shared store for the process
listing_store = ListingStore()


class ListingService:
    """
    Service for listing operations.

    Provides a clean interface between API routes and the listing store.
    """

    @staticmethod
    def list_listings(
        status: ListingStatus | str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List listings with optional status filter and pagination.

        Args:
            status: Only include listings with this status
            limit: Page size
            offset: Number of filtered listings to skip

        Returns:
            Tuple of (page of listings, filtered total before pagination)
        """
        listings = listing_store.all()
        if status:
            wanted = status.value if isinstance(status, ListingStatus) else status
            listings = [item for item in listings if item.get("status") == wanted]
        total = len(listings)
        return listings[offset:offset + limit], total

    @staticmethod
    def get_listing(listing_id: str) -> dict[str, Any]:
        """
        Get a listing by ID.

        Raises:
            ListingNotFoundError: If no listing has this ID
        """
        listing = listing_store.get(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return listing

    @staticmethod
    def create_listing(data: ListingWrite) -> dict[str, Any]:
        """
        Create and store a listing.

        The ID is generated here; status defaults to draft.
        """
        fields = data.model_dump(by_alias=True, exclude_unset=True, mode="json")
        fields.pop("id", None)
        listing = {
            "id": f"listing_{random_string(8, LISTING_ID_ALPHABET)}",
            **fields,
            "status": fields.get("status") or ListingStatus.DRAFT.value,
            "createdAt": _now_iso(),
        }
        stored = listing_store.put(listing)
        logger.info(f"Created listing {stored['id']}")
        return stored

    @staticmethod
    def update_listing(listing_id: str, data: ListingWrite) -> dict[str, Any]:
        """
        Merge the provided fields into a listing.

        The ID never changes; updatedAt is refreshed.

        Raises:
            ListingNotFoundError: If no listing has this ID
        """
        changes = data.model_dump(by_alias=True, exclude_unset=True, mode="json")
        changes.pop("id", None)
        changes["updatedAt"] = _now_iso()
        updated = listing_store.update(listing_id, changes)
        if updated is None:
            raise ListingNotFoundError(listing_id)
        logger.info(f"Updated listing {listing_id}: {sorted(changes)}")
        return updated

    @staticmethod
    def delete_listing(listing_id: str) -> None:
        if not listing_store.delete(listing_id):
            raise ListingNotFoundError(listing_id)
        logger.info(f"Deleted listing {listing_id}")

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------

    @staticmethod
    def get_images(listing_id: str) -> list[dict[str, Any]]:
        return ListingService.get_listing(listing_id).get("images") or []

    @staticmethod
    def add_images(listing_id: str, images: list[ListingImage]) -> list[dict[str, Any]]:
        """
        Append images to a listing.

        Returns:
            The images that were added
        """
        listing = ListingService.get_listing(listing_id)
        added = [image.to_wire() for image in images]
        listing_store.update(listing_id, {
            "images": (listing.get("images") or []) + added,
            "updatedAt": _now_iso(),
        })
        logger.info(f"Added {len(added)} images to listing {listing_id}")
        return added

    @staticmethod
    def replace_images(
        listing_id: str,
        selected_images: list[ListingImage] | None = None,
        selected_image_urls: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Replace a listing's image set with the user's selection.

        selected_images wins when both are given; bare URLs become
        images without a public ID.
        """
        ListingService.get_listing(listing_id)
        if selected_images is not None:
            images = [image.to_wire() for image in selected_images]
        else:
            images = [{"url": url} for url in selected_image_urls or []]
        listing_store.update(listing_id, {"images": images, "updatedAt": _now_iso()})
        logger.info(f"Replaced images on listing {listing_id} ({len(images)} selected)")
        return images

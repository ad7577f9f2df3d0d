# =============================================================================
# core/models/listing.py - Listing Schemas
# =============================================================================
# These models define the API contract for vehicle listings:
# - ListingStatus: Enum for listing lifecycle states
# - ListingImage: One photo attached to a listing
# - Listing: The full record as stored and returned
# - ListingWrite: Input for create/update (every field optional, extra
#   dealership-specific fields are kept as sent)
#
# Listings live in a process-local store; see core/services/listing_service.py.
# =============================================================================

from enum import Enum

from pydantic import ConfigDict, Field

from .base import CamelModel


class ListingStatus(str, Enum):
    """
    Lifecycle states for a listing.

    Flow: draft -> published -> sold | archived
    """
    DRAFT = "draft"
    PUBLISHED = "published"
    SOLD = "sold"
    ARCHIVED = "archived"


class ListingImage(CamelModel):
    """
    A listing photo.

    Example:
        {"url": "https://res.cloudinary.com/.../honda-civic.jpg",
         "publicId": "car-images/honda-civic"}
    """

    model_config = ConfigDict(extra="allow")

    url: str = Field(..., description="Delivery URL")
    public_id: str | None = Field(default=None, description="Cloudinary public ID")


class Listing(CamelModel):
    """
    A vehicle listing.

    Example:
        {
            "id": "listing_123",
            "title": "2023 Honda Civic EX",
            "make": "Honda",
            "model": "Civic",
            "year": 2023,
            "price": 25999,
            "mileage": 5000,
            "status": "published",
            "images": [...],
            "createdAt": "2024-01-05T10:30:00+00:00"
        }
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Listing identifier (listing_xxxxxxxx)")
    title: str | None = Field(default=None, description="Display title")
    make: str | None = None
    model: str | None = None
    year: int | None = Field(default=None, ge=1886)
    price: float | None = Field(default=None, ge=0)
    mileage: int | None = Field(default=None, ge=0)
    status: ListingStatus = Field(default=ListingStatus.DRAFT)
    condition: str | None = None
    exterior_color: str | None = None
    interior_color: str | None = None
    fuel_type: str | None = None
    transmission: str | None = None
    drivetrain: str | None = None
    features: list[str] = Field(default_factory=list)
    description: str | None = None
    images: list[ListingImage] = Field(default_factory=list)
    created_at: str = Field(..., description="ISO-8601 creation time")
    updated_at: str | None = Field(default=None, description="ISO-8601 time of last update")


class ListingWrite(CamelModel):
    """
    Body for POST /listings and PUT /listings/{id}.

    Only fields present in the request are applied on update.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    make: str | None = None
    model: str | None = None
    year: int | None = Field(default=None, ge=1886)
    price: float | None = Field(default=None, ge=0)
    mileage: int | None = Field(default=None, ge=0)
    status: ListingStatus | None = None
    condition: str | None = None
    exterior_color: str | None = None
    interior_color: str | None = None
    fuel_type: str | None = None
    transmission: str | None = None
    drivetrain: str | None = None
    features: list[str] | None = None
    description: str | None = None
    images: list[ListingImage] | None = None

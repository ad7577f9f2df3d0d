# =============================================================================
# app/routers/listings.py - Listing Endpoints
# =============================================================================
# CRUD over the process-local listing store, listing images, AI-written
# listing copy and background-preview processing.
# All endpoints require authentication.
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import Field, ValidationError

from app.auth import get_current_user
from app.exceptions import InvalidRequestError, MissingFieldError
from core.models.base import CamelModel
from core.models.listing import ListingImage, ListingStatus, ListingWrite
from core.services.content_service import ContentService
from core.services.enhancement_service import BACKGROUND_MODES, EnhancementService
from core.services.listing_service import ListingService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


# =============================================================================
# Request Models
# =============================================================================

class AddImagesRequest(CamelModel):
    images: Any = None


class SelectImagesRequest(CamelModel):
    """Either full image objects or bare URLs; selectedImages wins when both are sent."""
    selected_images: list[ListingImage] | None = None
    selected_image_urls: list[str] | None = None


class ListingContentRequest(CamelModel):
    generate_description: bool = False
    generate_features: bool = False
    tone: str = "professional"


class BackgroundProcessRequest(CamelModel):
    image_ids: Any = None
    mode: str = "replace"
    prompt: str = "dealership showroom"
    batch_size: int = Field(default=5, ge=1, le=50)


# =============================================================================
# CRUD
# =============================================================================

@router.get("")
async def list_listings(
    status: ListingStatus | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
):
    """
    List listings, optionally filtered by status.

    count is the number of matching listings before pagination.
    """
    listings, total = ListingService.list_listings(status=status, limit=limit, offset=offset)
    return {"data": listings, "count": total, "limit": limit, "offset": offset}


@router.post("", status_code=201)
async def create_listing(request: ListingWrite):
    """Create a listing. Status defaults to draft."""
    return ListingService.create_listing(request)


@router.get("/{listing_id}")
async def get_listing(listing_id: str):
    return ListingService.get_listing(listing_id)


@router.put("/{listing_id}")
async def update_listing(listing_id: str, request: ListingWrite):
    """Merge the sent fields into the listing. The id never changes."""
    return ListingService.update_listing(listing_id, request)


@router.delete("/{listing_id}")
async def delete_listing(listing_id: str):
    ListingService.delete_listing(listing_id)
    return {"success": True, "message": f"Listing {listing_id} has been deleted"}


# =============================================================================
# Images
# =============================================================================

@router.get("/{listing_id}/images")
async def get_listing_images(listing_id: str):
    images = ListingService.get_images(listing_id)
    return {"images": images, "count": len(images)}


@router.post("/{listing_id}/images")
async def add_listing_images(listing_id: str, request: AddImagesRequest):
    """Append images to a listing."""
    if not isinstance(request.images, list):
        raise InvalidRequestError("Images must be an array", details={"field": "images"})
    try:
        images = [ListingImage.model_validate(item) for item in request.images]
    except ValidationError as e:
        raise InvalidRequestError("Each image needs a url", details={"error": str(e)})
    added = ListingService.add_images(listing_id, images)
    return {
        "success": True,
        "message": f"Added {len(added)} images to listing {listing_id}",
        "images": added,
    }


@router.put("/{listing_id}/images")
async def select_listing_images(listing_id: str, request: SelectImagesRequest):
    """Replace the listing's images with the user's selection."""
    if request.selected_images is None and request.selected_image_urls is None:
        raise MissingFieldError("Selected images data is required", ["selectedImages", "selectedImageUrls"])
    images = ListingService.replace_images(listing_id, request.selected_images, request.selected_image_urls)
    return {
        "success": True,
        "message": f"Updated images for listing {listing_id}",
        "images": images,
        "count": len(images),
    }


# =============================================================================
# AI Content & Background Processing
# =============================================================================

@router.post("/{listing_id}/content")
async def generate_listing_content(listing_id: str, request: ListingContentRequest):
    """
    Write a description and/or highlighted features for the listing.

    Without an OpenAI key, copy is assembled from the listing's own fields.
    """
    content = ContentService.listing_copy(
        listing_id,
        request.generate_description,
        request.generate_features,
        request.tone,
    )
    return {"success": True, "content": content}


@router.post("/{listing_id}/background-process")
async def process_backgrounds(listing_id: str, request: BackgroundProcessRequest):
    """
    Build background-removal or replacement previews for listing photos.

    Images are processed batchSize at a time, one after another; each gets
    three preview URLs.
    """
    if not isinstance(request.image_ids, list) or not request.image_ids:
        raise InvalidRequestError("imageIds must be an array of image public IDs", details={"field": "imageIds"})
    if request.mode not in BACKGROUND_MODES:
        raise InvalidRequestError('mode must be either "remove" or "replace"', details={"mode": request.mode})

    listing = ListingService.get_listing(listing_id)
    logger.info(f"Processing {len(request.image_ids)} images for listing {listing_id} ({request.mode})")
    results = EnhancementService.process_listing_backgrounds(
        listing,
        [str(image_id) for image_id in request.image_ids],
        mode=request.mode,
        prompt=request.prompt,
        batch_size=request.batch_size,
    )
    return {"success": True, "batchResults": results}

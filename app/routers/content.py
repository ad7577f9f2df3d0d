# =============================================================================
# app/routers/content.py - AI Content Endpoints
# =============================================================================
# Vehicle copywriting, social posts, image enhancement suggestions and
# generated backgrounds.
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from app.exceptions import InvalidRequestError
from core.models.base import CamelModel
from core.models.content import GenerationOptions, SocialPlatformName, VehicleInfo
from core.services.content_service import ContentService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


# =============================================================================
# Request Models
# =============================================================================

class GenerateContentRequest(CamelModel):
    vehicle_info: VehicleInfo | None = None
    options: GenerationOptions | None = None


class SocialContentRequest(CamelModel):
    vehicle_info: VehicleInfo | None = None
    platform: str | None = None
    include_image: bool = True
    dealership_info: dict[str, Any] | None = None


class EnhanceSuggestionsRequest(CamelModel):
    image_url: str | None = None


class BackgroundRequest(CamelModel):
    prompt: str | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/generate-content")
async def generate_content(
    request: GenerateContentRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Write a description, highlights, SEO fields and a social post for a vehicle.

    Content is saved against the vehicle when its stock number is on file.

    Raises:
        400: make, model or year missing
        401: Not authenticated
        500: OpenAI failed
    """
    content = ContentService.generate_for_user(str(user.id), request.vehicle_info, request.options)
    return content.to_wire(exclude_none=False)


@router.post("/generate-content/social")
async def generate_social_content(
    request: SocialContentRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Write a post for facebook, instagram or twitter."""
    allowed = [p.value for p in SocialPlatformName]
    if request.platform not in allowed:
        raise InvalidRequestError(
            f"Platform must be one of: {', '.join(allowed)}",
            details={"platform": request.platform},
        )
    post = ContentService.social_post(
        request.vehicle_info,
        request.platform,
        include_image=request.include_image,
        dealership_info=request.dealership_info,
    )
    return {"platform": request.platform, "post": post}


@router.post("/enhance-suggestions")
async def enhance_suggestions(request: EnhanceSuggestionsRequest):
    """Vision-model advice for a photo plus four preset preview URLs."""
    return ContentService.enhancement_suggestions(request.image_url)


@router.post("/generate-background")
async def generate_background(request: BackgroundRequest):
    """Generate a showroom-style background and store it in Cloudinary."""
    return ContentService.background(request.prompt)

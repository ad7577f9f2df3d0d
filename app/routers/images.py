# =============================================================================
# app/routers/images.py - Image Upload & Enhancement Endpoints
# =============================================================================
# Cloudinary uploads and deletes, slider and preset enhancement, batch
# processing, analysis, saving edits to the gallery and per-purpose
# delivery URLs.
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter, Depends, File, Request, UploadFile
from pydantic import Field, ValidationError
from starlette.datastructures import UploadFile as FormFile

from app.auth import get_current_user
from app.config import settings
from app.exceptions import FileTooLargeError, InvalidFileTypeError, InvalidRequestError, MissingFieldError
from core.models.base import CamelModel
from core.services.enhancement_service import EnhancementService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])

UPLOAD_FOLDER = "car-images"


# =============================================================================
# Request Models
# =============================================================================

class PublicIdRequest(CamelModel):
    public_id: str | None = None


class EnhanceImageRequest(CamelModel):
    image_url: str | None = None
    adjustments: dict[str, Any] = Field(default_factory=dict, alias="settings")


class BatchEnhanceRequest(CamelModel):
    public_ids: Any = None
    preset: str | None = None


class ImageSelectOptions(CamelModel):
    width: int | None = None
    crop: str | None = None
    format: str | None = None
    quality: str | int | None = None
    social_platform: str | None = None


class ImageSelectRequest(CamelModel):
    public_id: str | None = None
    purpose: str | None = None
    options: ImageSelectOptions = Field(default_factory=ImageSelectOptions)


class SaveToGalleryRequest(CamelModel):
    public_id: str | None = None
    transformations: list[dict[str, Any]] | None = None
    adjustments: dict[str, Any] | None = Field(default=None, alias="settings")


# =============================================================================
# Helper Functions
# =============================================================================

async def _validated_upload(file: UploadFile | None) -> tuple[bytes, str]:
    """
    Read an uploaded image after checking its extension and size.

    Raises:
        MissingFieldError: No file
        InvalidFileTypeError: Extension not allowed
        FileTooLargeError: Over MAX_UPLOAD_SIZE_MB
    """
    if file is None or not file.filename:
        raise MissingFieldError("No file provided", ["file"])

    filename = file.filename
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    allowed = settings.allowed_image_formats_list
    if extension not in allowed:
        raise InvalidFileTypeError(filename, allowed)

    content = await file.read()
    if len(content) > settings.max_upload_size_bytes:
        raise FileTooLargeError(len(content) / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    logger.info(f"Processing upload: {filename} ({len(content) / (1024 * 1024):.2f}MB)")
    return content, filename


def _require_public_id(public_id: str | None) -> str:
    if not public_id:
        raise MissingFieldError("Public ID is required", ["publicId"])
    return public_id


# =============================================================================
# Upload & Delete
# =============================================================================

@router.post("/cloudinary/upload")
async def upload_image(file: UploadFile | None = File(default=None)):
    """
    Upload a dealer photo to the car-images folder.

    Returns:
        {url, public_id, width, height}

    Raises:
        400: No file or unsupported type
        413: File too large
        500: Cloudinary failed
    """
    content, filename = await _validated_upload(file)
    return EnhancementService.upload_image(content, filename, folder=UPLOAD_FOLDER)


@router.post("/cloudinary/delete")
async def delete_image(request: PublicIdRequest):
    EnhancementService.delete_image(_require_public_id(request.public_id))
    return {"success": True}


# =============================================================================
# Enhancement
# =============================================================================

@router.post("/enhance-image")
async def enhance_image(request: Request):
    """
    Enhance an image.

    A multipart body with a file behaves like /cloudinary/upload. A JSON
    body {imageUrl, settings} applies slider settings to a remote image and
    stores the result in enhanced-images.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        content, filename = await _validated_upload(upload if isinstance(upload, FormFile) else None)
        return EnhancementService.upload_image(content, filename, folder=UPLOAD_FOLDER)

    try:
        body = EnhanceImageRequest.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        raise InvalidRequestError("Request body must be JSON with imageUrl and settings", details={"error": str(e)})
    if not body.image_url:
        raise MissingFieldError("Image URL is required", ["imageUrl"])
    return EnhancementService.enhance_from_url(body.image_url, body.adjustments)


@router.post("/enhance-image/{preset}")
async def enhance_with_preset(preset: str, request: PublicIdRequest):
    """Delivery URL for the image with a preset applied. Unknown presets use auto."""
    url = EnhancementService.apply_preset(_require_public_id(request.public_id), preset)
    return {"url": url}


@router.post("/enhance-batch")
async def enhance_batch(request: BatchEnhanceRequest):
    """
    Re-process several images, one at a time.

    A failure on one image is reported in its result and doesn't stop the
    rest of the batch.
    """
    if not isinstance(request.public_ids, list) or not request.public_ids:
        raise MissingFieldError("At least one public ID is required", ["publicIds"])
    return EnhancementService.batch_enhance([str(pid) for pid in request.public_ids], request.preset)


# =============================================================================
# Analysis & Gallery
# =============================================================================

@router.post("/analyze-image")
async def analyze_image(request: PublicIdRequest):
    analysis = EnhancementService.analyze(_require_public_id(request.public_id))
    return {"success": True, "analysis": analysis}


@router.post("/save-to-gallery")
async def save_to_gallery(request: SaveToGalleryRequest):
    """Copy an edited image into the gallery, with eager versions at three sizes."""
    public_id = _require_public_id(request.public_id)
    result = EnhancementService.save_to_gallery(public_id, request.transformations, request.adjustments)
    logger.info(f"Saved {public_id} to gallery as {result.get('public_id')}")
    return {"success": True, **result}


@router.post("/image-select")
async def select_image(request: ImageSelectRequest):
    """
    Delivery URLs for content, marketing or a social platform.

    Raises:
        400: Missing public ID or purpose, or an unknown purpose or platform
        500: Cloudinary failed
    """
    public_id = _require_public_id(request.public_id)
    return EnhancementService.select_image(public_id, request.purpose, request.options.model_dump())

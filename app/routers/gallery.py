# =============================================================================
# app/routers/gallery.py - Gallery Endpoints
# =============================================================================
# Listing, deleting, renaming and tagging images in the gallery folder.
# =============================================================================

from typing import Any

from fastapi import APIRouter, Depends, Query

from app.auth import get_current_user
from core.models.base import CamelModel
from core.services.gallery_service import GalleryService

router = APIRouter(dependencies=[Depends(get_current_user)])


class ManageRequest(CamelModel):
    action: str | None = None
    public_id: str | None = None
    new_public_id: str | None = None


class TagsRequest(CamelModel):
    action: str | None = None
    public_ids: Any = None
    tags: Any = None


@router.get("/gallery")
async def list_gallery():
    """Newest gallery images first, at most 100."""
    return GalleryService.list_images()


@router.post("/gallery/manage")
async def manage_gallery_item(request: ManageRequest):
    """Delete or rename a gallery image."""
    return GalleryService.manage(request.action, request.public_id, request.new_public_id)


@router.post("/gallery/tags")
async def update_gallery_tags(request: TagsRequest):
    return GalleryService.update_tags(request.action, request.public_ids, request.tags)


@router.get("/gallery/tags")
async def get_gallery_tags(
    public_id: str | None = Query(default=None, alias="publicId"),
    prefix: str | None = Query(default=None),
):
    """Tags on one image (publicId), or all tags starting with prefix."""
    return GalleryService.get_tags(public_id=public_id, prefix=prefix)

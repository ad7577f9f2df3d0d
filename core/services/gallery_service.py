# =============================================================================
# core/services/gallery_service.py - Gallery Logic
# =============================================================================
# Browses and manages the Cloudinary "gallery" folder: listing with derived
# formats, delete/rename, and tag management.
# =============================================================================

import logging
from typing import Any

from app.exceptions import InvalidRequestError, MissingFieldError, ProviderError
from lib.cloudinary_client import CloudinaryClient, CloudinaryClientError

logger = logging.getLogger(__name__)

GALLERY_FOLDER = "gallery"
GALLERY_MAX_RESULTS = 100

MANAGE_ACTIONS = ("delete", "rename")
TAG_ACTIONS = ("add", "remove", "replace")


class GalleryService:
    """Service for the gallery folder."""

    @staticmethod
    def list_images() -> dict[str, Any]:
        """
        Newest gallery images first, each with a formats list built from its
        eager versions.

        Returns:
            {"images", "total"} or {"images": [], "message"} when empty
        """
        try:
            result = CloudinaryClient.search_folder(GALLERY_FOLDER, GALLERY_MAX_RESULTS)
        except CloudinaryClientError as e:
            raise ProviderError("Failed to fetch gallery images", error=e.message)

        resources = result.get("resources") or []
        if not resources:
            return {"images": [], "message": "No images found in gallery"}

        images = []
        for resource in resources:
            image = dict(resource)
            eager = resource.get("eager")
            if eager:
                image["formats"] = [
                    {"width": v.get("width"), "height": v.get("height"), "url": v.get("secure_url")}
                    for v in eager
                ]
            images.append(image)
        return {"images": images, "total": result.get("total_count", len(images))}

    @staticmethod
    def manage(action: str | None, public_id: str | None, new_public_id: str | None = None) -> dict[str, Any]:
        """
        Delete or rename a gallery image.

        Raises:
            MissingFieldError: No public ID, or rename without a new ID
            InvalidRequestError: Unknown action
            ProviderError: Cloudinary failed
        """
        if not public_id:
            raise MissingFieldError("Public ID is required", ["publicId"])
        if action not in MANAGE_ACTIONS:
            raise InvalidRequestError("Invalid action", details={"allowed": list(MANAGE_ACTIONS)})
        if action == "rename" and not new_public_id:
            raise MissingFieldError("New public ID is required for rename action", ["newPublicId"])

        try:
            if action == "delete":
                CloudinaryClient.destroy(public_id, invalidate=True)
                logger.info(f"Deleted gallery image {public_id}")
                return {"success": True, "action": "delete", "publicId": public_id}

            result = CloudinaryClient.rename(public_id, new_public_id)
        except CloudinaryClientError as e:
            raise ProviderError("Failed to manage gallery item", error=e.message)

        logger.info(f"Renamed gallery image {public_id} -> {result.get('public_id')}")
        return {
            "success": True,
            "action": "rename",
            "oldPublicId": public_id,
            "newPublicId": result.get("public_id"),
            "url": result.get("secure_url"),
        }

    @staticmethod
    def update_tags(action: str | None, public_ids: Any, tags: Any) -> dict[str, Any]:
        """
        Add, remove or replace tags on several images.

        add/remove apply each tag separately to each image; replace sets the
        full tag list on all images at once.
        """
        if not isinstance(public_ids, list) or not public_ids:
            raise MissingFieldError("At least one public ID is required", ["publicIds"])
        if not isinstance(tags, list) or not tags:
            raise MissingFieldError("At least one tag is required", ["tags"])
        if action not in TAG_ACTIONS:
            raise InvalidRequestError("Invalid action", details={"allowed": list(TAG_ACTIONS)})

        try:
            if action == "add":
                result: Any = [CloudinaryClient.add_tags(tags, [pid]) for pid in public_ids]
            elif action == "remove":
                result = [CloudinaryClient.remove_tags(tags, [pid]) for pid in public_ids]
            else:
                result = CloudinaryClient.replace_tags(tags, public_ids)
        except CloudinaryClientError as e:
            raise ProviderError("Failed to manage tags", error=e.message)

        logger.info(f"Tags {action}: {tags} on {len(public_ids)} images")
        return {"success": True, "action": action, "publicIds": public_ids, "tags": tags, "result": result}

    @staticmethod
    def get_tags(public_id: str | None = None, prefix: str | None = None) -> dict[str, Any]:
        """Tags of one image, or every tag starting with prefix."""
        if not public_id and not prefix:
            raise MissingFieldError("Either publicId or prefix is required", ["publicId", "prefix"])
        try:
            if public_id:
                resource = CloudinaryClient.resource(public_id)
                return {"success": True, "publicId": public_id, "tags": resource.get("tags") or []}
            return {"success": True, "tags": CloudinaryClient.list_tags(prefix)}
        except CloudinaryClientError as e:
            raise ProviderError("Failed to retrieve tags", error=e.message)

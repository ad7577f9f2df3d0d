# =============================================================================
# lib/cloudinary_client.py - Cloudinary Client Wrapper
# =============================================================================
# Thin wrapper around the Cloudinary SDK: configuration, uploads, deletes,
# explicit (eager) transformations, delivery URLs, metadata lookups, gallery
# search, tags and webhook signature checks.
#
# Flaky network calls go through lib.utils.with_retry using the configured
# attempts and delay. Callers check CloudinaryClient.is_configured() before
# calling, and fall back to mock responses when it returns False.
#
# Usage:
#   from lib.cloudinary_client import CloudinaryClient
#   result = CloudinaryClient.upload(data, folder="car-images")
# =============================================================================

from __future__ import annotations

import logging
import time
from typing import Any

import cloudinary
import cloudinary.api
import cloudinary.uploader
import cloudinary.utils
from cloudinary.search import Search

from app.config import settings
from lib.utils import ApplicationError, with_retry

logger = logging.getLogger(__name__)


class CloudinaryClientError(ApplicationError):
    """Error during Cloudinary operations."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "CLOUDINARY_ERROR")
        super().__init__(message, **kwargs)


class CloudinaryClient:
    """
    Class-level wrapper around the Cloudinary SDK.

    The SDK keeps its configuration globally, so configuration happens once
    on first use.
    """

    _configured: bool = False

    @classmethod
    def is_configured(cls) -> bool:
        return settings.cloudinary_configured

    @classmethod
    def _ensure_config(cls) -> None:
        if cls._configured:
            return
        if not cls.is_configured():
            raise CloudinaryClientError(
                message="Cloudinary is not configured",
                code="CLOUDINARY_NOT_CONFIGURED",
                suggestion="Set CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET"
            )
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )
        cls._configured = True
        logger.info("Cloudinary client configured")

    @classmethod
    def _call(cls, description: str, operation, retry: bool = True) -> Any:
        """Run an SDK call, optionally retried, mapping failures to CloudinaryClientError."""
        cls._ensure_config()
        try:
            if retry:
                return with_retry(
                    operation,
                    attempts=settings.CLOUDINARY_RETRY_ATTEMPTS,
                    delay=settings.CLOUDINARY_RETRY_DELAY_SECONDS,
                    description=f"Cloudinary {description}",
                )
            return operation()
        except Exception as e:
            logger.error(f"Cloudinary {description} failed: {e}")
            raise CloudinaryClientError(
                message=f"Cloudinary {description} failed: {e}",
                details={"action": description},
            )

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    @classmethod
    def upload(
        cls,
        source: bytes | str,
        folder: str,
        transformation: list[dict[str, Any]] | None = None,
        resource_type: str = "auto",
        eager: list[dict[str, Any]] | None = None,
        retry: bool = False,
    ) -> dict[str, Any]:
        """
        Upload an image from bytes or a remote URL.

        Args:
            source: Raw file bytes, a remote URL or a data URI
            folder: Destination folder
            transformation: Incoming transformation applied before storing
            resource_type: Cloudinary resource type ("auto" or "image")
            eager: Derived versions to generate asynchronously after upload
            retry: Re-run the upload on failure

        Returns:
            Upload result with secure_url, public_id, width and height
        """
        options: dict[str, Any] = {
            "folder": folder,
            "resource_type": resource_type,
            "allowed_formats": settings.allowed_image_formats_list,
        }
        if transformation:
            options["transformation"] = transformation
        if eager:
            options["eager"] = eager
            options["eager_async"] = True
        if settings.CLOUDINARY_UPLOAD_PRESET:
            options["upload_preset"] = settings.CLOUDINARY_UPLOAD_PRESET

        result = cls._call("upload", lambda: cloudinary.uploader.upload(source, **options), retry=retry)
        logger.info(f"Uploaded image to {folder}: {result.get('public_id')}")
        return result

    @classmethod
    def destroy(cls, public_id: str, invalidate: bool = False) -> str:
        """Delete an image and return Cloudinary's result string ("ok", "not found")."""
        result = cls._call("destroy", lambda: cloudinary.uploader.destroy(public_id, invalidate=invalidate))
        return result.get("result", "")

    @classmethod
    def explicit(cls, public_id: str, eager: list[list[dict[str, Any]]] | None = None) -> dict[str, Any]:
        """Re-process an existing image, generating eager derived versions when given."""
        options: dict[str, Any] = {"type": "upload", "invalidate": True}
        if eager:
            options["eager"] = [{"transformation": chain} for chain in eager]
        return cls._call("explicit", lambda: cloudinary.uploader.explicit(public_id, **options))

    @classmethod
    def rename(cls, public_id: str, new_public_id: str) -> dict[str, Any]:
        return cls._call(
            "rename",
            lambda: cloudinary.uploader.rename(public_id, new_public_id, overwrite=True, invalidate=True),
        )

    # -------------------------------------------------------------------------
    # URLs & Metadata
    # -------------------------------------------------------------------------

    @classmethod
    def url(
        cls,
        public_id: str,
        transformation: list[dict[str, Any]] | None = None,
        cache_bust: bool = False,
    ) -> str:
        """
        Build a secure delivery URL.

        Args:
            public_id: Image public ID
            transformation: Chained transformation steps
            cache_bust: Use the current time in ms as the URL version

        Returns:
            The delivery URL (no network call is made)
        """
        cls._ensure_config()
        options: dict[str, Any] = {"secure": True}
        if transformation:
            options["transformation"] = transformation
        if cache_bust:
            options["version"] = int(time.time() * 1000)
        url, _ = cloudinary.utils.cloudinary_url(public_id, **options)
        return url

    @classmethod
    def resource(cls, public_id: str, analysis: bool = False) -> dict[str, Any]:
        """Fetch resource details, optionally with colors, faces and quality analysis."""
        options: dict[str, Any] = {}
        if analysis:
            options.update(colors=True, faces=True, quality_analysis=True, image_metadata=True)
        return cls._call("resource lookup", lambda: cloudinary.api.resource(public_id, **options))

    @classmethod
    def search_folder(cls, folder: str, max_results: int = 100) -> dict[str, Any]:
        """Search a folder, newest first, including each resource's context."""
        return cls._call(
            "search",
            lambda: Search()
            .expression(f"folder:{folder}")
            .sort_by("created_at", "desc")
            .with_field("context")
            .max_results(max_results)
            .execute(),
        )

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    @classmethod
    def add_tags(cls, tags: list[str], public_ids: list[str]) -> list[dict[str, Any]]:
        return [
            cls._call("add tag", lambda tag=tag: cloudinary.uploader.add_tag(tag, public_ids))
            for tag in tags
        ]

    @classmethod
    def remove_tags(cls, tags: list[str], public_ids: list[str]) -> list[dict[str, Any]]:
        return [
            cls._call("remove tag", lambda tag=tag: cloudinary.uploader.remove_tag(tag, public_ids))
            for tag in tags
        ]

    @classmethod
    def replace_tags(cls, tags: list[str], public_ids: list[str]) -> dict[str, Any]:
        return cls._call("replace tag", lambda: cloudinary.uploader.replace_tag(",".join(tags), public_ids))

    @classmethod
    def list_tags(cls, prefix: str, max_results: int = 100) -> list[str]:
        result = cls._call("tag listing", lambda: cloudinary.api.tags(prefix=prefix, max_results=max_results))
        return result.get("tags") or []

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------

    @classmethod
    def verify_notification(cls, body: str, timestamp: str, signature: str) -> bool:
        """
        Check a notification's X-Cld-Signature against the API secret.

        Returns False for any missing piece instead of raising.
        """
        if not (cls.is_configured() and settings.CLOUDINARY_API_SECRET and timestamp and signature):
            return False
        cls._ensure_config()
        try:
            return cloudinary.utils.verify_notification_signature(body, int(timestamp), signature)
        except ValueError:
            return False

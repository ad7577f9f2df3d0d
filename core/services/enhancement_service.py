# =============================================================================
# core/services/enhancement_service.py - Image Enhancement Logic
# =============================================================================
# Builds Cloudinary transformation chains and runs image operations:
# - Named enhancement presets (auto, hdr, vintage, ...)
# - Manual adjustments (brightness, contrast, saturation, blur, sharpen)
# - Background removal/replacement previews for listing photos
# - Batch enhancement, analysis, gallery saves, uploads and deletes
# - Per-purpose delivery URLs (content, marketing, social crops)
#
# Every batch is a plain sequential loop: one failing image is recorded in
# its result entry and the loop moves on. When Cloudinary isn't configured,
# uploads, preset URLs and listing previews return mock values instead.
# =============================================================================

import logging
import re
from typing import Any

from app.config import settings
from app.exceptions import InvalidEnhancementPresetError, InvalidRequestError, MissingFieldError, ProviderError
from lib.cloudinary_client import CloudinaryClient, CloudinaryClientError

logger = logging.getLogger(__name__)


# =============================================================================
# Transformation Tables
# =============================================================================

ENHANCEMENT_PRESETS: dict[str, list[str]] = {
    "auto": ["e_improve", "e_enhance"],
    "professional": ["e_enhance:50", "e_saturation:20", "e_contrast:10"],
    "hdr": ["e_improve", "e_contrast:30", "e_vibrance:30"],
    "dramatic": ["e_art:athena", "e_contrast:40"],
    "artistic": ["e_art:zorro"],
    "portrait": ["e_improve", "e_redeye", "e_skin_tone"],
    "product": ["e_gen_restore", "e_enhance", "e_improve"],
    "landscape": ["e_improve", "e_vibrance:30", "e_saturation:20"],
    "blackAndWhite": ["e_grayscale", "e_contrast:30"],
    "vintage": ["e_sepia:50", "e_vignette"],
}

DEFAULT_PRESET = "auto"

SUGGESTION_PREVIEWS: list[tuple[str, list[str]]] = [
    ("Balanced", ["e_auto_contrast", "e_auto_color", "e_improve"]),
    ("Vibrant", ["e_vibrance:50", "e_saturation:20", "e_auto_contrast"]),
    ("Sharp", ["e_sharpen:100", "e_improve", "e_auto_contrast"]),
    ("Soft", ["e_improve", "e_auto_brightness", "e_saturation:-10"]),
]

# Keyword groups checked in order; first match wins
PROMPT_COLORS: list[tuple[tuple[str, ...], tuple[str, str]]] = [
    (("luxury", "showroom"), ("darkblue", "black")),
    (("beach", "ocean", "sea"), ("azure", "lightblue")),
    (("sunset", "dusk"), ("orange", "red")),
    (("mountain", "hill", "cliff"), ("darkgreen", "brown")),
    (("desert", "sand"), ("khaki", "sandybrown")),
    (("night", "dark"), ("midnightblue", "navy")),
    (("snow", "winter"), ("aliceblue", "white")),
    (("city", "urban"), ("gray", "darkgray")),
]
DEFAULT_COLORS = ("darkblue", "black")

# Gallery copies get these derived sizes
GALLERY_EAGER_SIZES = [
    {"width": 640, "height": 480, "crop": "fill", "gravity": "auto"},
    {"width": 1024, "height": 768, "crop": "fill", "gravity": "auto"},
    {"width": 1920, "height": 1080, "crop": "fill", "gravity": "auto"},
]

GALLERY_DEFAULT_TRANSFORMATION = [
    {"quality": "auto:best"},
    {"fetch_format": "auto"},
    {"dpr": "auto"},
    {"crop": "limit"},
]

BACKGROUND_MODES = ("remove", "replace")

# Crop sizes per social platform and post type
SOCIAL_PLATFORM_PRESETS: dict[str, dict[str, tuple[int, int]]] = {
    "facebook": {"timeline": (1200, 630), "post": (1200, 1200), "story": (1080, 1920)},
    "instagram": {"post": (1080, 1080), "story": (1080, 1920), "portrait": (1080, 1350)},
    "twitter": {"post": (1200, 675), "header": (1500, 500)},
    "linkedin": {"post": (1200, 627), "banner": (1584, 396)},
}

IMAGE_PURPOSES = ("content", "social", "marketing")


def effect_chain(codes: list[str]) -> list[dict[str, str]]:
    """
    Convert URL-style effect codes into SDK transformation steps.

    Example:
        effect_chain(["e_improve", "e_contrast:30"])
        # [{"effect": "improve"}, {"effect": "contrast:30"}]
    """
    return [{"effect": code[2:] if code.startswith("e_") else code} for code in codes]


def resolve_preset(name: str | None) -> str | None:
    """Return the canonical preset key for a case-insensitive name, or None."""
    if not name:
        return None
    lowered = name.lower()
    for key in ENHANCEMENT_PRESETS:
        if key.lower() == lowered:
            return key
    return None


def colors_from_prompt(prompt: str) -> tuple[str, str]:
    """Map a background prompt to a (primary, secondary) colour pair."""
    lowered = prompt.lower()
    for keywords, colors in PROMPT_COLORS:
        if any(word in lowered for word in keywords):
            return colors
    return DEFAULT_COLORS


def background_preview_chains(mode: str, prompt: str) -> list[list[dict[str, Any]]]:
    """
    Build the three preview transformation chains for a background job.

    remove: transparent, white and light-gradient backgrounds.
    replace: generative fill, then solid and gradient fallbacks coloured by
    the prompt.
    """
    scale = {"width": 1200, "crop": "scale"}
    if mode == "remove":
        return [
            [scale, {"effect": "bgremoval"}],
            [scale, {"background": "white", "effect": "bgremoval"}],
            [scale, {"background": "linear_gradient:lightblue:white", "effect": "bgremoval"}],
        ]
    primary, secondary = colors_from_prompt(prompt)
    return [
        [{"width": 1200, "height": 800, "crop": "pad", "background": "auto"}, {"effect": "generative-fill"}],
        [scale, {"background": primary, "effect": "bgremoval"}],
        [scale, {"background": f"linear_gradient:{primary}:{secondary}", "effect": "bgremoval"}],
    ]


def manual_transformation(adjustments: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Build steps from slider settings.

    Zero brightness/contrast/saturation, non-positive blur/sharpen and an
    effect of "none" are skipped.
    """
    steps: list[dict[str, Any]] = []
    for name in ("brightness", "contrast", "saturation"):
        value = adjustments.get(name) or 0
        if value != 0:
            steps.append({"effect": f"{name}:{value}"})
    for name in ("blur", "sharpen"):
        value = adjustments.get(name) or 0
        if value > 0:
            steps.append({"effect": f"{name}:{value}"})
    effect = adjustments.get("effect")
    if effect and effect != "none":
        steps.append({"effect": effect})
    return steps


def format_transformation(adjustments: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Like manual_transformation, but named artistic effects expand into
    their approximations (art_audrey, art_zorro, cartoonify, vignette,
    oil_paint). Unknown effects are dropped.
    """
    steps = manual_transformation({**adjustments, "effect": None})
    effect = adjustments.get("effect")
    if effect == "art_audrey":
        steps += [{"effect": "grayscale"}, {"effect": "brightness:30"}, {"effect": "contrast:50"}]
    elif effect == "art_zorro":
        steps += [{"effect": "grayscale"}, {"effect": "contrast:50"}]
    elif effect == "cartoonify":
        steps.append({"effect": "cartoonify"})
    elif effect == "vignette":
        steps.append({"effect": "vignette:30"})
    elif effect == "oil_paint":
        steps.append({"effect": "art:oil_paint"})
    return steps


def social_variation_chain(width: int, height: int) -> list[dict[str, Any]]:
    return [
        {"width": width, "height": height, "crop": "fill", "gravity": "auto"},
        {"quality": "auto:best", "fetch_format": "auto"},
    ]


def purpose_transformation(purpose: str, options: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Build the delivery chain for content or marketing use.

    content: auto width scaled, best auto quality and auto DPR.
    marketing: 1920 wide fill, quality 90 and auto format unless the
    options override them.
    """
    if purpose == "content":
        return [
            {"width": options.get("width") or "auto", "crop": options.get("crop") or "scale"},
            {"quality": "auto:best", "fetch_format": "auto"},
            {"dpr": "auto"},
        ]
    return [
        {"width": options.get("width") or 1920, "crop": options.get("crop") or "fill", "gravity": "auto"},
        {"quality": options.get("quality") or 90},
        {"fetch_format": options.get("format") or "auto"},
        {"dpr": "auto"},
    ]


def mock_previews(url: str, count: int = 3, suffix: str = "preview") -> list[str]:
    """Preview URLs derived from the original URL, used when Cloudinary can't build them."""
    stem = re.sub(r"\.[^/.]+$", "", url)
    return [f"{stem}_{suffix}_{i}.jpg" for i in range(1, count + 1)]


def _upload_summary(result: dict[str, Any]) -> dict[str, Any]:
    return {
        "url": result.get("secure_url"),
        "public_id": result.get("public_id"),
        "width": result.get("width"),
        "height": result.get("height"),
    }


# =============================================================================
# Service
# =============================================================================

class EnhancementService:
    """Service for image uploads, enhancement and analysis."""

    # -------------------------------------------------------------------------
    # Uploads & Deletes
    # -------------------------------------------------------------------------

    @staticmethod
    def upload_image(data: bytes, filename: str, folder: str = "car-images") -> dict[str, Any]:
        """
        Upload a dealer photo.

        Returns:
            {url, public_id, width, height}; a mock 800x600 result when
            Cloudinary is not configured

        Raises:
            ProviderError: If the upload fails
        """
        if not CloudinaryClient.is_configured():
            logger.warning("Cloudinary credentials not set, using mock upload response")
            stem = filename.rsplit(".", 1)[0]
            return {
                "url": f"https://example.com/mock-upload/{filename}",
                "public_id": f"mock-car-images/{stem}",
                "width": 800,
                "height": 600,
            }
        try:
            return _upload_summary(CloudinaryClient.upload(data, folder=folder))
        except CloudinaryClientError as e:
            raise ProviderError("Failed to upload to Cloudinary", error=e.message)

    @staticmethod
    def upload_remote(url: str, folder: str) -> dict[str, Any]:
        """Copy a remote image into Cloudinary. Returns {url, publicId, width, height}."""
        try:
            result = CloudinaryClient.upload(url, folder=folder, resource_type="image", retry=True)
        except CloudinaryClientError as e:
            raise ProviderError("Failed to store generated image", error=e.message)
        return {
            "url": result.get("secure_url"),
            "publicId": result.get("public_id"),
            "width": result.get("width"),
            "height": result.get("height"),
        }

    @staticmethod
    def delete_image(public_id: str) -> None:
        """
        Delete an image.

        Raises:
            ProviderError: If the call fails or Cloudinary doesn't answer "ok"
        """
        try:
            outcome = CloudinaryClient.destroy(public_id)
        except CloudinaryClientError as e:
            raise ProviderError("Failed to delete image", error=e.message)
        if outcome != "ok":
            logger.error(f"Cloudinary refused to delete {public_id}: {outcome}")
            raise ProviderError("Failed to delete image", error=outcome or "unknown result")
        logger.info(f"Deleted image {public_id}")

    # -------------------------------------------------------------------------
    # Enhancement
    # -------------------------------------------------------------------------

    @staticmethod
    def enhance_from_url(image_url: str, adjustments: dict[str, Any]) -> dict[str, Any]:
        """Apply slider settings to a remote image and store it in enhanced-images."""
        try:
            result = CloudinaryClient.upload(
                image_url,
                folder="enhanced-images",
                transformation=manual_transformation(adjustments),
                resource_type="image",
            )
        except CloudinaryClientError as e:
            raise ProviderError("Failed to process image", error=e.message)
        return _upload_summary(result)

    @staticmethod
    def apply_preset(public_id: str, preset: str) -> str:
        """
        Build the delivery URL for an image with a preset applied.

        Unknown presets fall back to auto. Without Cloudinary, returns
        https://example.com/mock-enhance/<id>/<preset>.
        """
        if not CloudinaryClient.is_configured():
            logger.warning("Cloudinary credentials not set, using mock enhancement URL")
            return f"https://example.com/mock-enhance/{public_id}/{preset}"

        key = resolve_preset(preset) or DEFAULT_PRESET
        if key != preset:
            logger.info(f"Preset '{preset}' resolved to '{key}'")
        try:
            return CloudinaryClient.url(public_id, effect_chain(ENHANCEMENT_PRESETS[key]), cache_bust=True)
        except CloudinaryClientError as e:
            raise ProviderError("Failed to apply preset", error=e.message)

    @staticmethod
    def select_image(public_id: str, purpose: str | None, options: dict[str, Any]) -> dict[str, Any]:
        """
        Build delivery URLs for an image's intended use.

        Args:
            public_id: Image public ID
            purpose: content, social or marketing
            options: width, crop, quality, format and, for social,
                social_platform

        Returns:
            For social, {success, purpose, platform, variations} with one
            cropped variation per post type. Otherwise
            {success, purpose, url, transformation}.

        Raises:
            MissingFieldError: No purpose, or social without a platform
            InvalidRequestError: Unknown purpose or platform
            ProviderError: Cloudinary couldn't build the URL
        """
        if not purpose:
            raise MissingFieldError("Purpose is required", ["purpose"])
        if purpose not in IMAGE_PURPOSES:
            raise InvalidRequestError(
                f"Invalid purpose '{purpose}'",
                details={"valid_purposes": list(IMAGE_PURPOSES)},
            )

        mock = not CloudinaryClient.is_configured()
        if mock:
            logger.warning("Cloudinary credentials not set, using mock selection URLs")

        try:
            if purpose == "social":
                platform = options.get("social_platform")
                if not platform:
                    raise MissingFieldError(
                        "Social platform is required for social media purpose",
                        ["options.socialPlatform"],
                    )
                presets = SOCIAL_PLATFORM_PRESETS.get(platform)
                if presets is None:
                    raise InvalidRequestError(
                        "Invalid social platform",
                        details={"valid_platforms": list(SOCIAL_PLATFORM_PRESETS)},
                    )
                variations = []
                for post_type, (width, height) in presets.items():
                    if mock:
                        url = f"https://example.com/mock-select/{public_id}/{platform}-{post_type}"
                    else:
                        url = CloudinaryClient.url(public_id, social_variation_chain(width, height))
                    variations.append({"type": post_type, "url": url, "width": width, "height": height})
                return {"success": True, "purpose": purpose, "platform": platform, "variations": variations}

            transformation = purpose_transformation(purpose, options)
            if mock:
                url = f"https://example.com/mock-select/{public_id}/{purpose}"
            else:
                url = CloudinaryClient.url(public_id, transformation)
            return {"success": True, "purpose": purpose, "url": url, "transformation": transformation}
        except CloudinaryClientError as e:
            raise ProviderError("Failed to process image selection", error=e.message)

    @staticmethod
    def batch_enhance(public_ids: list[str], preset: str | None = None) -> dict[str, Any]:
        """
        Re-process several images with an optional preset.

        Args:
            public_ids: Images to process, in order
            preset: Preset name; None just re-processes the originals

        Returns:
            {"results": [...], "summary": {total, successful, failed}}

        Raises:
            InvalidEnhancementPresetError: If preset names no known preset
        """
        key = None
        if preset:
            key = resolve_preset(preset)
            if key is None:
                raise InvalidEnhancementPresetError(preset, list(ENHANCEMENT_PRESETS))

        eager = [effect_chain(ENHANCEMENT_PRESETS[key])] if key else None
        results: list[dict[str, Any]] = []
        for public_id in public_ids:
            try:
                result = CloudinaryClient.explicit(public_id, eager=eager)
            except CloudinaryClientError as e:
                logger.warning(f"Batch enhancement failed for {public_id}: {e.message}")
                results.append({"status": "error", "publicId": public_id, "error": e.message})
                continue

            derived = result.get("eager") or []
            results.append({
                "status": "success",
                "publicId": public_id,
                "url": derived[0].get("secure_url") if derived else result.get("secure_url"),
                "public_id": result.get("public_id"),
                "width": result.get("width"),
                "height": result.get("height"),
                "eager": derived,
            })

        successful = sum(1 for item in results if item["status"] == "success")
        logger.info(f"Batch enhancement finished: {successful}/{len(results)} succeeded")
        return {
            "results": results,
            "summary": {
                "total": len(public_ids),
                "successful": successful,
                "failed": len(results) - successful,
            },
        }

    @staticmethod
    def suggestion_previews(image_url: str) -> list[dict[str, str]]:
        """
        Preview URLs for the four suggestion looks.

        The public ID is taken from the last path segment of the URL, without
        extension. Returns an empty list when previews can't be built.
        """
        public_id = image_url.rstrip("/").split("/")[-1].split(".")[0]
        try:
            return [
                {"name": name, "url": CloudinaryClient.url(public_id, effect_chain(codes))}
                for name, codes in SUGGESTION_PREVIEWS
            ]
        except CloudinaryClientError as e:
            logger.warning(f"Could not build suggestion previews: {e.message}")
            return []

    # -------------------------------------------------------------------------
    # Listing Backgrounds
    # -------------------------------------------------------------------------

    @staticmethod
    def process_listing_backgrounds(
        listing: dict[str, Any],
        image_ids: list[str],
        mode: str = "replace",
        prompt: str = "dealership showroom",
        batch_size: int = 5,
    ) -> list[dict[str, Any]]:
        """
        Generate background previews for a listing's photos.

        Images are handled in batch_size chunks, one after another. IDs not on
        the listing get a temporary image entry so previews can still be built.

        Args:
            listing: The listing dict (for image URLs)
            image_ids: Cloudinary public IDs to process
            mode: "remove" or "replace"
            prompt: Scene description for replacement colours
            batch_size: Chunk size

        Returns:
            One result per image id, in order
        """
        images_by_id = {img.get("publicId"): img for img in listing.get("images") or []}
        chains = background_preview_chains(mode, prompt)
        use_mock = not CloudinaryClient.is_configured()
        if use_mock:
            logger.warning("Cloudinary credentials not set, using mock previews")

        size = max(batch_size, 1)
        results: list[dict[str, Any]] = []
        for start in range(0, len(image_ids), size):
            chunk = image_ids[start:start + size]
            logger.info(f"Processing chunk of {len(chunk)} images for listing {listing['id']}")
            for image_id in chunk:
                image = images_by_id.get(image_id)
                if image is None:
                    logger.info(f"Image {image_id} not on listing yet, using temporary entry")
                    image = {"publicId": image_id, "url": _temporary_url(image_id)}
                original_url = image.get("url")
                if not original_url:
                    logger.error(f"Image {image_id} on listing {listing['id']} has no URL")
                    results.append({"imageId": image_id, "success": False, "error": "Image has no URL"})
                    continue

                if use_mock:
                    previews = mock_previews(original_url)
                else:
                    try:
                        previews = [CloudinaryClient.url(image_id, chain, cache_bust=True) for chain in chains]
                    except CloudinaryClientError as e:
                        logger.error(f"Cloudinary processing error for {image_id}: {e.message}")
                        previews = mock_previews(original_url, suffix="fallback")
                results.append({
                    "imageId": image_id,
                    "success": True,
                    "originalUrl": original_url,
                    "previews": previews,
                })
        return results

    # -------------------------------------------------------------------------
    # Analysis & Gallery
    # -------------------------------------------------------------------------

    @staticmethod
    def analyze(public_id: str) -> dict[str, Any]:
        """
        Summarize Cloudinary's analysis of an image.

        Returns:
            {colors, faces, labels, metadata, quality}
        """
        try:
            resource = CloudinaryClient.resource(public_id, analysis=True)
        except CloudinaryClientError as e:
            raise ProviderError("Failed to analyze image", error=e.message)

        predominant = resource.get("predominant") or {}
        quality = resource.get("quality_analysis") or {}
        return {
            "colors": {
                "predominant": resource.get("colors") or [],
                "foreground": predominant.get("foreground") or [],
                "background": predominant.get("background") or [],
            },
            "faces": resource.get("faces") or [],
            "labels": resource.get("tags") or [],
            "metadata": {
                "width": resource.get("width"),
                "height": resource.get("height"),
                "format": resource.get("format"),
                "size": resource.get("bytes"),
            },
            "quality": {
                "overall": resource.get("quality_score") or 0,
                "noise": quality.get("noise") or 0,
                "focus": quality.get("focus") or 0,
                "exposure": quality.get("exposure") or 0,
                "color": quality.get("color_score") or 0,
            },
        }

    @staticmethod
    def save_to_gallery(
        public_id: str,
        transformations: list[dict[str, Any]] | None = None,
        adjustments: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Copy an edited image into the gallery folder.

        Explicit transformations win over slider settings.
        """
        source = f"https://res.cloudinary.com/{settings.CLOUDINARY_CLOUD_NAME}/image/upload/{public_id}"
        steps = transformations or (format_transformation(adjustments) if adjustments else [])
        try:
            result = CloudinaryClient.upload(
                source,
                folder="gallery",
                transformation=steps + GALLERY_DEFAULT_TRANSFORMATION,
                resource_type="image",
                eager=GALLERY_EAGER_SIZES,
                retry=True,
            )
        except CloudinaryClientError as e:
            raise ProviderError("Failed to save image to gallery", error=e.message)
        return _upload_summary(result)


def _temporary_url(image_id: str) -> str:
    if "/" in image_id:
        return f"https://res.cloudinary.com/demo/image/upload/{image_id}.jpg"
    return f"https://example.com/mock-upload/{image_id}.jpg"

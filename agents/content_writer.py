# =============================================================================
# agents/content_writer.py - Vehicle Copywriter
# =============================================================================
# Generates marketing copy for vehicles:
# - generate_vehicle_content: description, highlights, SEO and social post
#   as one JSON document
# - generate_social_post: a single post for facebook, instagram or twitter
# - generate_listing_copy: description and/or highlighted features for a
#   stored listing, with templated copy when OpenAI isn't configured
# =============================================================================

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from app.config import settings
from agents.client import AssistantError, complete
from agents.prompts import (
    LISTING_COPY_SYSTEM_PROMPT,
    build_listing_copy_prompt,
    build_social_prompts,
    build_vehicle_content_prompts,
)
from core.models.content import GeneratedContent, GenerationOptions, VehicleInfo

logger = logging.getLogger(__name__)

CONTENT_TEMPERATURE = 0.7
SOCIAL_TEMPERATURE = 0.8
LISTING_COPY_MAX_TOKENS = 500


def generate_vehicle_content(vehicle: VehicleInfo, options: GenerationOptions | None = None) -> GeneratedContent:
    """
    Generate the full content package for a vehicle.

    Args:
        vehicle: Vehicle facts (make, model and year present)
        options: Style options, including the dealership name

    Returns:
        GeneratedContent parsed from the model's JSON

    Raises:
        AssistantError: If the call fails or the response isn't valid JSON
    """
    options = options or GenerationOptions()
    system, user = build_vehicle_content_prompts(vehicle, options)
    logger.info(f"Generating content for {vehicle.year} {vehicle.make} {vehicle.model}")

    text = complete(
        [{"role": "system", "content": system}, {"role": "user", "content": user}],
        model=settings.OPENAI_CONTENT_MODEL,
        temperature=CONTENT_TEMPERATURE,
        response_format={"type": "json_object"},
    )

    try:
        return GeneratedContent.model_validate(json.loads(text or "{}"))
    except (json.JSONDecodeError, ValidationError) as e:
        raise AssistantError(
            message=f"Invalid JSON response from model: {e}",
            code="JSON_PARSE_ERROR",
            suggestion="Try generating the content again",
            details={"raw_response": text[:500]}
        )


def generate_social_post(
    vehicle: VehicleInfo,
    platform: str,
    include_image: bool = True,
    dealership_info: dict[str, Any] | None = None,
) -> str:
    """Write one social post for the given platform."""
    system, user = build_social_prompts(vehicle, platform, include_image, dealership_info)
    logger.info(f"Generating {platform} post for {vehicle.year} {vehicle.make} {vehicle.model}")
    return complete(
        [{"role": "system", "content": system}, {"role": "user", "content": user}],
        model=settings.OPENAI_CONTENT_MODEL,
        temperature=SOCIAL_TEMPERATURE,
    )


# =============================================================================
# Listing Copy
# =============================================================================

def _feature_lines(text: str) -> list[str]:
    """Split a bullet list into items, dropping "- " prefixes and blank lines."""
    lines = [re.sub(r"^- ", "", line) for line in text.split("\n")]
    return [line for line in lines if line.strip()]


def parse_listing_copy(text: str, description: bool, features: bool) -> dict[str, Any]:
    """
    Split the model's answer into description and highlightedFeatures.

    When both were requested the first paragraph is the description and the
    second holds the feature list.
    """
    if description and features:
        parts = text.split("\n\n")
        return {
            "description": parts[0] if parts else "",
            "highlightedFeatures": _feature_lines(parts[1]) if len(parts) > 1 else [],
        }
    if description:
        return {"description": text}
    return {"highlightedFeatures": _feature_lines(text)}


def template_listing_copy(listing: dict[str, Any], description: bool, features: bool) -> dict[str, Any]:
    """Copy assembled from the listing's own fields, used without OpenAI."""
    listed = listing.get("features") or []
    result: dict[str, Any] = {}
    if description:
        result["description"] = (
            f"Experience the exceptional {listing.get('year')} {listing.get('make')} {listing.get('model')}, "
            f"a standout in its class with just {listing.get('mileage')} miles. "
            f"Featuring a stunning {listing.get('exteriorColor')} exterior paired with a refined "
            f"{listing.get('interiorColor')} interior, this vehicle delivers both style and substance. "
            f"Equipped with a reliable {listing.get('fuelType')} engine and smooth "
            f"{listing.get('transmission')} transmission, every journey promises comfort and efficiency. "
            "Don't miss the opportunity to own this meticulously maintained vehicle, complete with "
            f"modern features like {', '.join(listed[:3])} and more. Schedule your test drive today!"
        )
    if features:
        result["highlightedFeatures"] = [
            f"Advanced {listing.get('fuelType')} Engine with Optimized Efficiency",
            f"Premium {listing.get('interiorColor')} Interior with Refined Finishing",
            f"State-of-the-Art Technology Package including {listed[0] if listed else 'Modern Connectivity'}",
        ]
    return result


def generate_listing_copy(
    listing: dict[str, Any],
    description: bool,
    features: bool,
    tone: str = "professional",
) -> dict[str, Any]:
    """
    Write a description and/or highlighted features for a listing.

    Returns:
        {"description"?: str, "highlightedFeatures"?: list[str]}

    Raises:
        AssistantError: If the OpenAI call fails
    """
    if not settings.openai_configured:
        logger.warning("OpenAI API key not set, using templated listing copy")
        return template_listing_copy(listing, description, features)

    text = complete(
        [
            {"role": "system", "content": LISTING_COPY_SYSTEM_PROMPT},
            {"role": "user", "content": build_listing_copy_prompt(listing, tone, description, features)},
        ],
        model=settings.OPENAI_CONTENT_MODEL,
        temperature=CONTENT_TEMPERATURE,
        max_tokens=LISTING_COPY_MAX_TOKENS,
    )
    return parse_listing_copy(text, description, features)

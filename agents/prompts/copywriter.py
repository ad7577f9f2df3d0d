# =============================================================================
# agents/prompts/copywriter.py - Vehicle Copywriting Prompts
# =============================================================================
# Builds the prompts for:
# - Full listing content (description, highlights, SEO, social post) as JSON
# - Platform-specific social posts
# - Listing description / highlighted features for the listings screen
#
# Usage:
#   system, user = build_vehicle_content_prompts(vehicle, options)
# =============================================================================

from __future__ import annotations

import json
from typing import Any

from core.models.content import GenerationOptions, VehicleInfo

# =============================================================================
# Full Listing Content
# =============================================================================

DEFAULT_AUDIENCE = "potential car buyers"

CONTENT_JSON_FORMAT = """{
  "description": "The description text...",
  "highlights": ["Highlight 1", "Highlight 2", ...],
  "seoTitle": "SEO title...",
  "seoDescription": "SEO description...",
  "socialMediaPost": "Social media post text..."
}"""


def describe_vehicle(vehicle: VehicleInfo) -> str:
    """
    One "Key: value" line per known vehicle fact.

    Keys are the camelCase wire names with the first letter capitalized;
    features are comma-joined.
    """
    lines = []
    for key, value in vehicle.to_wire().items():
        if value in ([], ""):
            continue
        if isinstance(value, list):
            value = ", ".join(str(item) for item in value)
        lines.append(f"{key[:1].upper()}{key[1:]}: {value}")
    return "\n".join(lines)


def build_vehicle_content_prompts(vehicle: VehicleInfo, options: GenerationOptions) -> tuple[str, str]:
    """
    Build (system, user) prompts for the JSON listing content.

    Args:
        vehicle: Vehicle facts
        options: Style options; dealership_name is filled in by the caller

    Returns:
        Tuple of (system prompt, user prompt)
    """
    rules = [
        "You are an expert automotive copywriter crafting compelling vehicle listings.",
        "Create content that is factual, engaging, and persuasive, with a "
        f"{options.style.value} tone aimed at {options.target_audience or DEFAULT_AUDIENCE}.",
        "Focus on the vehicle's key selling points and unique features.",
    ]
    if options.dealership_name:
        rules.append(f"Mention {options.dealership_name} in a natural way.")
    if options.emphasize_features:
        rules.append(
            f"Emphasize these specific features in your content: {', '.join(options.emphasize_features)}."
        )
    if options.include_call_to_action:
        rules.append("Include a subtle call to action in the description.")
    rules.append("Do not use ALL CAPS for emphasis except for appropriate acronyms like AWD, 4WD, etc.")

    user = f"""Create a comprehensive listing for the following vehicle:

{describe_vehicle(vehicle)}

Please generate:
1. A {options.length.value} description (2-3 paragraphs)
2. {options.highlight_count} key feature highlights with emoji icons
3. An SEO-optimized title (max 60 characters)
4. An SEO meta description (max 155 characters)
5. A short social media post for Facebook/Instagram (max 280 characters)

Format your response in JSON exactly as follows:
{CONTENT_JSON_FORMAT}"""

    return "\n".join(rules), user


# =============================================================================
# Social Posts
# =============================================================================

PLATFORM_GUIDES = {
    "facebook": "engaging, informative, up to 250 characters, can include emoji",
    "instagram": "visual focus, trendy, emotional appeal, heavy emoji use, hashtags",
    "twitter": "concise, direct, under 280 characters, trending hashtags, call to action",
}


def build_social_prompts(
    vehicle: VehicleInfo,
    platform: str,
    include_image: bool = True,
    dealership_info: dict[str, Any] | None = None,
) -> tuple[str, str]:
    """Build (system, user) prompts for a single social media post."""
    system = "\n".join(line for line in [
        "You are a social media specialist for a car dealership.",
        f"Create a compelling {platform} post that will generate engagement and interest.",
        f"Follow these {platform} best practices: {PLATFORM_GUIDES[platform]}.",
        "The post will include an image of the vehicle." if include_image else "",
        "Use a conversational, attention-grabbing style appropriate for social media.",
    ] if line)

    simplified = {
        "make": vehicle.make,
        "model": vehicle.model,
        "year": vehicle.year,
        "price": vehicle.price,
        "key_features": vehicle.features[:3] if vehicle.features else None,
    }
    parts = [
        f"Create a {platform} post for this vehicle:",
        json.dumps({k: v for k, v in simplified.items() if v is not None}, indent=2),
    ]
    if dealership_info:
        parts.append(f"Dealership info: {json.dumps(dealership_info, indent=2)}")
    parts.append(f"For {platform}, create a post that will stand out and drive engagement.")
    if platform == "instagram":
        parts.append("Include relevant hashtags.")
    return system, "\n\n".join(parts)


# =============================================================================
# Listing Description & Features
# =============================================================================

LISTING_COPY_SYSTEM_PROMPT = (
    "You are an expert automotive copywriter who specializes in creating compelling "
    "vehicle descriptions and highlighting key features for car dealerships."
)

NOT_SPECIFIED = "Not specified"


def build_listing_copy_prompt(
    listing: dict[str, Any],
    tone: str,
    description: bool,
    features: bool,
) -> str:
    """Prompt asking for a description and/or highlighted features of a stored listing."""
    listed = ", ".join(listing.get("features") or []) or "None listed"
    prompt = f"""Vehicle information:
- Make: {listing.get('make')}
- Model: {listing.get('model')}
- Year: {listing.get('year')}
- Mileage: {listing.get('mileage')} miles
- Price: ${listing.get('price')}
- Condition: {listing.get('condition')}
- Exterior Color: {listing.get('exteriorColor') or NOT_SPECIFIED}
- Interior Color: {listing.get('interiorColor') or NOT_SPECIFIED}
- Fuel Type: {listing.get('fuelType') or NOT_SPECIFIED}
- Transmission: {listing.get('transmission') or NOT_SPECIFIED}
- Drivetrain: {listing.get('drivetrain') or NOT_SPECIFIED}
- Features: {listed}

Tone of voice: {tone}
"""
    if description:
        prompt += (
            "\nGenerate a compelling and detailed vehicle description that highlights the key "
            "selling points. Be specific about this exact vehicle rather than generic. "
            "The description should be 100-150 words.\n"
        )
    if features:
        prompt += (
            "\nGenerate 3-5 highlighted feature points that make this vehicle stand out. "
            "Each should be 5-10 words and focus on the most appealing aspects.\n"
        )
    return prompt

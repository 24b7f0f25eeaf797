"""
Prompt construction for virtual staging.
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Instructions that would let a custom prompt override window preservation
_WINDOW_OVERRIDES = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"change.*window",
        r"modify.*window",
        r"add.*curtain",
        r"add.*blind",
        r"cover.*window",
        r"replace.*window",
        r"new.*window",
        r"different.*window",
        r"alter.*window",
        r"transform.*window",
    )
]


@dataclass
class RoomDimensions:
    """Room size in meters."""

    width: float | None = None
    height: float | None = None


def _format_meters(value: float) -> str:
    return f"{value:g}"


def build_variant_prompt(
    base_prompt: str,
    room_type: str | None = None,
    palette: str | None = None,
    custom_prompt: str | None = None,
    dimensions: RoomDimensions | None = None,
) -> str:
    """
    Compose the stored prompt for a variant.

    Example:
        "Modern minimalist interior for a Living Room with warm neutrals color
        palette. Add plants. Room dimensions: 4m wide by 2.5m high"
    """
    prompt = base_prompt.strip()

    if room_type:
        prompt += f" for a {room_type}"
    if palette:
        prompt += f" with {palette.lower()} color palette"
    if custom_prompt and custom_prompt.strip():
        prompt += f". {custom_prompt.strip()}"

    if dimensions and (dimensions.width or dimensions.height):
        parts = []
        if dimensions.width:
            parts.append(f"{_format_meters(dimensions.width)}m wide")
        if dimensions.height:
            parts.append(f"{_format_meters(dimensions.height)}m high")
        prompt += f". Room dimensions: {' by '.join(parts)}"

    return prompt


def sanitize_custom_prompt(prompt: str) -> str:
    """Strip instructions that would alter windows."""
    sanitized = prompt
    for pattern in _WINDOW_OVERRIDES:
        if pattern.search(sanitized):
            logger.warning(f"Removing window-altering instruction from prompt: {pattern.pattern}")
            sanitized = pattern.sub("", sanitized)

    if re.search(r"window", sanitized, re.IGNORECASE) and not re.search(
        r"preserve.*window", sanitized, re.IGNORECASE
    ):
        sanitized += " (Note: Windows must be preserved exactly as shown in original)"

    return sanitized.strip()


def build_staging_prompt(
    prompt: str,
    style: str | None = None,
    room_type: str | None = None,
    palette: str | None = None,
) -> str:
    """Wrap a variant prompt with the architectural preservation rules."""
    style = style or "Modern"
    room_type = room_type or "auto-detect"
    palette = palette or "neutral tones"
    requirements = sanitize_custom_prompt(prompt) or "None"

    return f"""Create a picture of this empty room transformed into a professionally staged {room_type} space.

CRITICAL RULES - YOU MUST FOLLOW:
1. DO NOT MODIFY WINDOWS - Keep all windows EXACTLY as they are (same size, position, frame, glass, view)
2. DO NOT CHANGE WINDOW TREATMENTS - No curtains, blinds, or coverings unless already present
3. PRESERVE ALL ARCHITECTURAL FEATURES - Maintain exact room shape, walls, ceiling, doors, moldings
4. NATURAL FURNITURE PLACEMENT - Only add furniture that fits naturally in visible space
5. PARTIAL ROOM VIEWS - If room is partially visible, only furnish the visible area naturally

STYLE SPECIFICATIONS:
- Design Style: {style} interior design aesthetic
- Color Palette: {palette}
- Requirements: {requirements}

STAGING GUIDELINES:
- Add {style.lower()} furniture appropriate for a {room_type}
- Use realistic proportions and spacing between furniture
- Keep original lighting conditions and natural light from windows
- Professional real estate photography quality

Generate a single, professionally staged image that looks natural and realistic."""

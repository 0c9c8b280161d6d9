"""Feature tag extraction from vision descriptions (simple keyword match)."""

from __future__ import annotations

FEATURE_KEYWORDS: tuple[str, ...] = (
    "modern", "spacious", "natural light", "hardwood", "granite", "stainless steel",
    "updated", "luxury", "cozy", "bright", "open concept", "high ceilings",
    "backyard", "pool", "fireplace", "balcony", "parking", "storage",
    "equipment", "facility", "amenity", "premium", "quality", "design",
)

MAX_FEATURES = 5


def extract_feature_tags(text: str, limit: int = MAX_FEATURES) -> list[str]:
    """Return up to *limit* known feature keywords found in *text*, in table order."""
    lower = text.lower()
    found = [kw for kw in FEATURE_KEYWORDS if kw in lower]
    return found[:limit]

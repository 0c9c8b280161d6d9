"""Category → keyword phrase table used by the timing allocator.

The table is plain data: callers may pass their own mapping, and extra
categories can be configured through ``settings.category_keywords``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from adforge.config import settings

KeywordVocabulary = Mapping[str, Sequence[str]]

# Category labels offered per niche (upload form options)
NICHE_CATEGORIES: dict[str, tuple[str, ...]] = {
    "real-estate": ("exterior", "living-room", "bedroom", "kitchen", "bathroom", "backyard"),
    "e-commerce": ("main-product", "detail-shot", "lifestyle", "packaging"),
    "fitness": ("gym-floor", "equipment", "class", "amenities"),
    "coaching": ("headshot", "workspace", "testimonial", "results"),
}

DEFAULT_VOCABULARY: dict[str, tuple[str, ...]] = {
    # real-estate
    "exterior": ("exterior", "curb appeal", "facade", "front", "outside", "home", "house", "property"),
    "living-room": ("living room", "living", "lounge", "family room", "fireplace", "open concept", "entertain"),
    "bedroom": ("bedroom", "master suite", "suite", "sleep", "retreat", "closet"),
    "kitchen": ("kitchen", "cook", "appliances", "granite", "countertop", "dining"),
    "bathroom": ("bathroom", "bath", "shower", "spa", "vanity", "tub"),
    "backyard": ("backyard", "garden", "yard", "patio", "pool", "outdoor", "deck"),
    # e-commerce
    "main-product": ("product", "introducing", "meet", "our new"),
    "detail-shot": ("detail", "craft", "quality", "material", "finish", "texture"),
    "lifestyle": ("lifestyle", "everyday", "life", "wherever", "on the go", "perfect for"),
    "packaging": ("packaging", "package", "box", "unbox", "gift", "delivered"),
    # fitness
    "gym-floor": ("gym", "floor", "facility", "space", "training floor"),
    "equipment": ("equipment", "machine", "weights", "dumbbell", "rack", "cardio"),
    "class": ("class", "classes", "training", "trainer", "session", "group"),
    "amenities": ("amenities", "amenity", "locker", "sauna", "shower", "juice bar"),
    # coaching
    "headshot": ("coach", "i'm", "i am", "my name", "meet"),
    "workspace": ("workspace", "office", "studio", "session", "work with"),
    "testimonial": ("testimonial", "client", "clients", "said", "review", "story"),
    "results": ("results", "success", "transform", "achieve", "growth", "goal"),
}


def category_phrases(category: str, vocabulary: KeywordVocabulary | None = None) -> list[str]:
    """Return lower-cased phrases for *category*, the label itself always included."""
    vocab = vocabulary if vocabulary is not None else build_vocabulary()
    label = category.strip().lower()
    phrases = [label.replace("-", " ")] if label else []
    for phrase in vocab.get(category, vocab.get(label, ())):
        phrase = phrase.strip().lower()
        if phrase and phrase not in phrases:
            phrases.append(phrase)
    return phrases


def build_vocabulary(extra: KeywordVocabulary | None = None) -> dict[str, tuple[str, ...]]:
    """Merge configured keyword overrides over the built-in table."""
    merged = dict(DEFAULT_VOCABULARY)
    overrides = settings.category_keywords if extra is None else extra
    for category, phrases in overrides.items():
        merged[category] = tuple(phrases)
    return merged

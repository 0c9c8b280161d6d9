"""Keyword timing allocator — maps script mentions to image display durations.

A best-effort heuristic: each category's images are shown roughly when the
narration talks about that category, found by naive substring search for
the category's keyword phrases. Categories the script never mentions are
shown last.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import structlog

from adforge.models.asset import UploadedAsset
from adforge.models.timing import TimingEntry, TimingPlan
from adforge.planning.vocabulary import KeywordVocabulary, build_vocabulary, category_phrases

logger = structlog.get_logger()

DEFAULT_CHARS_PER_SECOND = 15
MIN_CATEGORY_SECONDS = 3


@dataclass
class _CategoryWindow:
    label: str
    order: int
    assets: list[UploadedAsset] = field(default_factory=list)
    start: int = 0
    end: int = 0
    matched: bool = False

    @property
    def width(self) -> int:
        return max(0, self.end - self.start)


def estimate_speech_duration(text: str, chars_per_second: int = DEFAULT_CHARS_PER_SECOND) -> int:
    """Estimated seconds of speech for *text* at a fixed character rate."""
    return math.ceil(len(text) / chars_per_second)


def _find_window(script_lower: str, phrases: list[str]) -> tuple[int, int] | None:
    earliest: int | None = None
    latest = 0
    for phrase in phrases:
        pos = script_lower.find(phrase)
        while pos != -1:
            if earliest is None or pos < earliest:
                earliest = pos
            latest = max(latest, pos + len(phrase))
            pos = script_lower.find(phrase, pos + 1)
    if earliest is None:
        return None
    return earliest, latest


def _group_by_category(assets: list[UploadedAsset]) -> list[_CategoryWindow]:
    windows: dict[str, _CategoryWindow] = {}
    for asset in assets:
        label = asset.category_label or "general"
        if label not in windows:
            windows[label] = _CategoryWindow(label=label, order=len(windows))
        windows[label].assets.append(asset)
    return list(windows.values())


def allocate(
    assets: list[UploadedAsset],
    script: str | None,
    vocabulary: KeywordVocabulary | None = None,
    chars_per_second: int = DEFAULT_CHARS_PER_SECOND,
) -> TimingPlan | None:
    """Order and time *assets* by where their categories are mentioned in *script*.

    Returns ``None`` when there is nothing to allocate from (no assets, or a
    missing/blank script); callers then use :func:`equal_split`.

    Category weights are ``max(3, ceil(window_chars / cps))`` seconds and are
    scaled so the plan's durations sum to ``ceil(len(script) / cps)``.
    """
    if not assets or not isinstance(script, str) or not script.strip():
        return None

    vocab = vocabulary if vocabulary is not None else build_vocabulary()
    script_lower = script.lower()
    total = estimate_speech_duration(script, chars_per_second)

    windows = _group_by_category(assets)
    for window in windows:
        found = _find_window(script_lower, category_phrases(window.label, vocab))
        if found is None:
            window.start = window.end = len(script_lower)
        else:
            window.start, window.end = found
            window.matched = True

    # sorted() is stable, so ties keep first-upload order
    windows = sorted(windows, key=lambda w: w.start)

    weights = [
        max(MIN_CATEGORY_SECONDS, math.ceil(w.width / chars_per_second)) for w in windows
    ]
    weight_sum = sum(weights)

    entries: list[TimingEntry] = []
    for window, weight in zip(windows, weights):
        category_seconds = total * weight / weight_sum
        per_asset = category_seconds / len(window.assets)
        for asset in window.assets:
            entries.append(TimingEntry(asset=asset, duration_sec=per_asset))

    logger.info(
        "allocator.allocated",
        total_sec=total,
        order=[w.label for w in windows],
        unmatched=[w.label for w in windows if not w.matched],
    )
    return TimingPlan(entries=entries, total_duration_sec=float(total), strategy="keyword")


def equal_split(assets: list[UploadedAsset], total_duration_sec: float) -> TimingPlan:
    """Divide *total_duration_sec* evenly across *assets* in upload order."""
    per_asset = total_duration_sec / len(assets) if assets else 0.0
    return TimingPlan(
        entries=[TimingEntry(asset=a, duration_sec=per_asset) for a in assets],
        total_duration_sec=float(total_duration_sec),
        strategy="equal",
    )


def plan_timing(
    assets: list[UploadedAsset],
    script: str | None,
    vocabulary: KeywordVocabulary | None = None,
    chars_per_second: int = DEFAULT_CHARS_PER_SECOND,
) -> TimingPlan:
    """Keyword allocation with an explicit equal-split fallback."""
    plan = allocate(assets, script, vocabulary=vocabulary, chars_per_second=chars_per_second)
    if plan is not None:
        return plan

    total = estimate_speech_duration(script or "", chars_per_second) if isinstance(script, str) else 0
    logger.info("allocator.fallback_equal_split", assets=len(assets), total_sec=total)
    return equal_split(assets, total)

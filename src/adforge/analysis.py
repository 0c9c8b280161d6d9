"""Vision analysis — niche prompts, retry with linear backoff, per-item outcomes."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from adforge.config import settings
from adforge.errors import AdForgeError, AnalysisError
from adforge.models.analysis import AnalysisOutcome, ImageAnalysisItem
from adforge.models.asset import UploadedAsset
from adforge.planning.features import extract_feature_tags
from adforge.tools.capabilities import ImageDescriber

logger = structlog.get_logger()

# ---------------------------------------------------------------------------
# Prompt templates
# ---------------------------------------------------------------------------

_NICHE_PROMPTS: dict[str, str] = {
    "real-estate": """\
Analyze this {category} image of a property. Describe in 2-3 sentences:
1. Key features and amenities
2. Design style and aesthetics
3. What makes it attractive to potential buyers/renters
Be specific and highlight benefits.""",
    "e-commerce": """\
Analyze this {category} product image. Describe in 2-3 sentences:
1. Product features and quality
2. Design and aesthetics
3. What makes it appealing to customers""",
    "fitness": """\
Analyze this {category} gym/fitness image. Describe in 2-3 sentences:
1. Equipment and facilities
2. Atmosphere and environment
3. What makes it attractive to fitness enthusiasts""",
}

_GENERIC_PROMPT = (
    "Analyze this {category} image and describe key features, benefits, "
    "and what makes it appealing in 2-3 sentences."
)


def build_vision_prompt(niche: str, category: str) -> str:
    """Niche-specific vision prompt; coaching and unknown niches use the generic one."""
    template = _NICHE_PROMPTS.get(niche, _GENERIC_PROMPT)
    return template.format(category=(category or "general").replace("-", " "))


async def describe_with_retry(
    describer: ImageDescriber,
    image_bytes: bytes,
    mime_type: str,
    prompt: str,
    max_attempts: int | None = None,
    backoff_sec: float | None = None,
) -> str:
    """Call the describer, retrying with linear backoff (1s, 2s, ...) between attempts."""
    attempts = max_attempts if max_attempts is not None else settings.vision_max_attempts
    step = backoff_sec if backoff_sec is not None else settings.vision_backoff_sec

    last_error: AnalysisError | None = None
    for attempt in range(1, attempts + 1):
        try:
            text = await describer.describe(image_bytes, mime_type, prompt)
            logger.info("analysis.describe.success", attempt=attempt)
            return text
        except AnalysisError as exc:
            last_error = exc
            logger.warning(
                "analysis.describe.attempt_failed",
                attempt=attempt,
                max_attempts=attempts,
                error=exc.message,
            )
            if attempt < attempts:
                await asyncio.sleep(step * attempt)

    raise AnalysisError(
        f"Image analysis failed after {attempts} attempts: {last_error.message if last_error else 'unknown'}",
        stage="analysis",
        diagnostic=last_error.diagnostic if last_error else None,
    )


async def analyze_asset(
    asset: UploadedAsset,
    niche: str,
    describer: ImageDescriber,
    max_attempts: int | None = None,
    backoff_sec: float | None = None,
) -> ImageAnalysisItem:
    """Describe one uploaded image and extract its feature tags."""
    path = Path(asset.path)
    if not path.is_file():
        raise AnalysisError(f"Uploaded file not found on disk: {asset.file_name}", stage="analysis")

    try:
        image_bytes = path.read_bytes()
    except OSError as exc:
        raise AnalysisError(f"Could not read {asset.file_name}: {exc}", stage="analysis") from exc
    prompt = build_vision_prompt(niche, asset.category_label)

    logger.info(
        "analysis.start",
        file_name=asset.file_name,
        category=asset.category_label,
        niche=niche,
        size_kb=round(asset.size_bytes / 1024, 2),
    )
    description = await describe_with_retry(
        describer,
        image_bytes,
        asset.mime_type,
        prompt,
        max_attempts=max_attempts,
        backoff_sec=backoff_sec,
    )
    return ImageAnalysisItem(
        category_label=asset.category_label,
        description=description,
        features=extract_feature_tags(description),
    )


async def analyze_batch(
    assets: list[UploadedAsset],
    niche: str,
    describer: ImageDescriber,
    max_attempts: int | None = None,
    backoff_sec: float | None = None,
) -> list[AnalysisOutcome]:
    """Analyze images one at a time; a failed image is reported, not raised."""
    outcomes: list[AnalysisOutcome] = []
    for asset in assets:
        try:
            item = await analyze_asset(
                asset, niche, describer, max_attempts=max_attempts, backoff_sec=backoff_sec
            )
        except AdForgeError as exc:
            logger.warning("analysis.item_failed", file_name=asset.file_name, error=exc.message)
            outcomes.append(AnalysisOutcome(file_name=asset.file_name, ok=False, error=exc.message))
            continue
        outcomes.append(AnalysisOutcome(file_name=asset.file_name, ok=True, analysis=item))

    logger.info(
        "analysis.batch_done",
        total=len(outcomes),
        failed=sum(1 for o in outcomes if not o.ok),
    )
    return outcomes

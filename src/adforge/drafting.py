"""Ad script drafting from image analysis."""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from adforge.errors import DraftError
from adforge.models.analysis import ImageAnalysisItem
from adforge.tools.capabilities import ScriptDrafter

logger = structlog.get_logger()


def combine_descriptions(analysis: Mapping[str, ImageAnalysisItem]) -> str:
    """``category: description`` blocks, one per analysed image, upload order."""
    return "\n\n".join(
        f"{item.category_label}: {item.description}" for item in analysis.values()
    )


async def draft_ad_script(
    analysis: Mapping[str, ImageAnalysisItem],
    niche: str,
    drafter: ScriptDrafter,
    user_script: str | None = None,
) -> str:
    """Return the user's own script when given, otherwise a model draft."""
    if user_script and user_script.strip():
        logger.info("drafting.user_script", script_len=len(user_script))
        return user_script

    if not analysis:
        raise DraftError("No image analysis available to draft a script from", stage="drafting")

    combined = combine_descriptions(analysis)
    return await drafter.draft(combined, niche)

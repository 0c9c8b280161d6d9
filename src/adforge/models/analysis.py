"""Pydantic models for vision analysis results."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class ImageAnalysisItem(BaseModel):
    # the upload form posts "category"
    category_label: str = Field(validation_alias=AliasChoices("category_label", "category"))
    description: str
    features: list[str] = Field(default_factory=list)


# file_name → analysis
ImageAnalysis = dict[str, ImageAnalysisItem]


class AnalysisOutcome(BaseModel):
    """Per-image result of a batch analysis; failures don't sink the batch."""

    file_name: str
    ok: bool
    analysis: Optional[ImageAnalysisItem] = None
    error: Optional[str] = None

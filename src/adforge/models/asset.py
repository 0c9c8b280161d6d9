"""Pydantic models for uploaded image assets."""

from pydantic import BaseModel, Field


class UploadedAsset(BaseModel):
    file_name: str
    mime_type: str
    size_bytes: int = Field(ge=0)
    category_label: str = "general"
    path: str  # on-disk upload, owned by exactly one run

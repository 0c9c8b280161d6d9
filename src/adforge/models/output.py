"""Pydantic models for final output."""

from pydantic import BaseModel


class TimingSummaryItem(BaseModel):
    file_name: str
    category_label: str
    duration_sec: float


class VideoResult(BaseModel):
    run_id: str
    video_file: str
    video_url: str
    video_path: str
    size_bytes: int
    size_mb: float
    duration_sec: float
    timing_strategy: str
    timing: list[TimingSummaryItem]

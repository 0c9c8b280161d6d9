"""Pydantic models for the image display timing plan."""

from typing import Literal

from pydantic import BaseModel, Field

from adforge.models.asset import UploadedAsset


class TimingEntry(BaseModel):
    asset: UploadedAsset
    duration_sec: float = Field(ge=0)


class TimingPlan(BaseModel):
    entries: list[TimingEntry]
    total_duration_sec: float
    strategy: Literal["keyword", "equal"]

    @property
    def assets(self) -> list[UploadedAsset]:
        return [e.asset for e in self.entries]

    @property
    def durations(self) -> list[float]:
        return [e.duration_sec for e in self.entries]

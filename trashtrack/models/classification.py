"""Structured result returned by the classification gateway."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trashtrack.models.report import DESCRIPTION_MAX_LENGTH, WasteCategory


class ClassificationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: WasteCategory
    description: str
    severity: int = Field(ge=1, le=5)
    estimated_weight_kg: float = Field(ge=0, alias="estimatedWeightKg")
    safety_warning: str = Field(default="", alias="safetyWarning")

    @field_validator("description")
    @classmethod
    def _cap_description(cls, v: str) -> str:
        return v.strip()[:DESCRIPTION_MAX_LENGTH]

    @field_validator("safety_warning", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

"""Pydantic models for the tier-wise market report returned by the LLM."""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from job_market.models.filters import LocationTier

SCHEMA_VERSION = "1.0"

_TIER_PATTERN = re.compile(r"^\s*tier[\s\-_]*([1-4])\b", re.IGNORECASE)


class DemandLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class TierAnalysis(BaseModel):
    """Market indicators for a single city tier."""

    # Unknown backend keys are dropped, never carried into the report
    model_config = ConfigDict(frozen=True, extra="ignore")

    tier: LocationTier
    demand_level: DemandLevel
    estimated_openings: int = Field(ge=0)
    salary_min_lpa: float = Field(ge=0)
    salary_max_lpa: float = Field(ge=0)
    top_cities: tuple[str, ...]
    top_employers: tuple[str, ...]
    in_demand_skills: tuple[str, ...]
    growth_outlook: str = Field(min_length=1)
    key_insight: str = Field(min_length=1)

    @field_validator("tier", mode="before")
    @classmethod
    def _normalize_tier(cls, value):
        if isinstance(value, str):
            match = _TIER_PATTERN.match(value)
            if match:
                return list(LocationTier)[int(match.group(1)) - 1]
        return value

    @field_validator("demand_level", mode="before")
    @classmethod
    def _normalize_demand(cls, value):
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @model_validator(mode="after")
    def _check_salary_range(self) -> TierAnalysis:
        if self.salary_max_lpa < self.salary_min_lpa:
            raise ValueError("salary_max_lpa must be >= salary_min_lpa")
        return self


class MarketReport(BaseModel):
    """Ordered per-tier analyses. An empty list means the search found nothing."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    tier_analyses: tuple[TierAnalysis, ...]
    summary: str = ""

    @model_validator(mode="after")
    def _check_unique_tiers(self) -> MarketReport:
        seen: set[LocationTier] = set()
        for row in self.tier_analyses:
            if row.tier in seen:
                raise ValueError(f"duplicate tier in report: {row.tier.value}")
            seen.add(row.tier)
        return self

    @property
    def is_empty(self) -> bool:
        return not self.tier_analyses


def report_json_schema() -> dict:
    """JSON Schema handed to the model as the output contract."""
    schema = MarketReport.model_json_schema()
    schema["title"] = f"MarketReport v{SCHEMA_VERSION}"
    return schema

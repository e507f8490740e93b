"""Data models for the job market dashboard."""

from job_market.models.filters import (
    Filters,
    JobRole,
    LocationTier,
    Qualification,
    Sector,
    filter_options,
)
from job_market.models.report import (
    SCHEMA_VERSION,
    DemandLevel,
    MarketReport,
    TierAnalysis,
)

__all__ = [
    "DemandLevel",
    "Filters",
    "JobRole",
    "LocationTier",
    "MarketReport",
    "Qualification",
    "SCHEMA_VERSION",
    "Sector",
    "TierAnalysis",
    "filter_options",
]

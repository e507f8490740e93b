"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from job_market.clients.llm_client import LLMClient, LLMResponse
from job_market.models.report import MarketReport, TierAnalysis


def make_tier(tier: str = "Tier 1 (Metros)", **overrides) -> dict:
    """A backend-shaped tier row."""
    row = {
        "tier": tier,
        "demand_level": "High",
        "estimated_openings": 12000,
        "salary_min_lpa": 2.5,
        "salary_max_lpa": 4.5,
        "top_cities": ["Bengaluru", "Hyderabad"],
        "top_employers": ["TCS", "Infosys"],
        "in_demand_skills": ["Excel", "Communication"],
        "growth_outlook": "Strong hiring through FY26",
        "key_insight": "Night-shift roles pay a 10-15% premium",
    }
    row.update(overrides)
    return row


def make_response(payload, stop_reason: str = "end_turn") -> LLMResponse:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return LLMResponse(text=text, input_tokens=800, output_tokens=400, stop_reason=stop_reason)


@pytest.fixture
def tier1_row() -> dict:
    return make_tier("Tier 1 (Metros)")


@pytest.fixture
def tier3_row() -> dict:
    return make_tier(
        "Tier 3",
        demand_level="Medium",
        estimated_openings=1800,
        salary_min_lpa=1.6,
        salary_max_lpa=2.4,
        top_cities=["Nashik", "Hubli"],
        top_employers=["Teleperformance"],
        in_demand_skills=["Hindi, English", 'Typing "40 wpm"'],
        growth_outlook="Steady",
        key_insight="Remote BPO hubs expanding",
    )


@pytest.fixture
def sample_report(tier1_row, tier3_row) -> MarketReport:
    return MarketReport(
        tier_analyses=[TierAnalysis(**tier1_row), TierAnalysis(**tier3_row)],
        summary="IT hiring for BSC graduates is concentrated in metros.",
    )


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(return_value=make_response({"tier_analyses": []}))
    return client


@pytest.fixture
def tier_factory():
    return make_tier


@pytest.fixture
def response_factory():
    return make_response

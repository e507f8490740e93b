"""Query Builder - turns a filter selection into a prompt plus output schema."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from job_market.models.filters import DIMENSIONS, Filters, LocationTier
from job_market.models.report import SCHEMA_VERSION, report_json_schema

SYSTEM_PROMPT = """\
You are a labour-market analyst specialising in entry-level hiring in India.
You classify Indian cities into tiers: Tier 1 (Metros), Tier 2, Tier 3 and Tier 4.
Given a set of filters, you produce a strategic market analysis broken down by
city tier, grounded in current hiring trends.

Respond with a single JSON object only, no prose before or after it.
The object MUST validate against this JSON Schema (version {version}):

{schema}

Rules:
- "tier" must be exactly one of: {tiers}.
- Report each tier at most once, in ascending tier order.
- "demand_level" is one of "High", "Medium" or "Low".
- Salaries are in lakh rupees per annum (LPA), salary_min_lpa <= salary_max_lpa.
- "estimated_openings" is a whole number of currently open positions.
- If there is no meaningful hiring activity for the filters, return
  {{"tier_analyses": [], "summary": "<why>"}}."""


@dataclass(frozen=True)
class QuerySpec:
    """Everything sent to the backend for one analysis request."""

    system: str
    prompt: str
    constraints: dict[str, str] = field(default_factory=dict)
    output_schema: dict = field(default_factory=dict)
    schema_version: str = SCHEMA_VERSION


def _constraint_clauses(constraints: dict[str, str]) -> list[str]:
    return [f"- {DIMENSIONS[name][1]}: {value}" for name, value in constraints.items()]


def build_query(filters: Filters) -> QuerySpec:
    """Build the prompt for ``filters``. Unconstrained dimensions produce no clause."""
    constraints = filters.constraints()
    schema = report_json_schema()

    if constraints:
        scope = "Analyse the job market for candidates matching ALL of these filters:\n"
        scope += "\n".join(_constraint_clauses(constraints))
    else:
        scope = "Analyse the overall entry-level job market for fresh graduates."

    if filters.location is not None:
        coverage = f"Report on {filters.location.value} only."
    else:
        coverage = "Report on every tier: " + ", ".join(t.value for t in LocationTier) + "."

    prompt = f"""{scope}

{coverage}

For each tier give the demand level, estimated openings, salary range, the
top hiring cities and employers, the most in-demand skills, the growth
outlook and one key insight for job seekers.

Respond in JSON only."""

    system = SYSTEM_PROMPT.format(
        version=SCHEMA_VERSION,
        schema=json.dumps(schema, indent=2),
        tiers=", ".join(f'"{t.value}"' for t in LocationTier),
    )
    return QuerySpec(
        system=system,
        prompt=prompt,
        constraints=constraints,
        output_schema=schema,
    )

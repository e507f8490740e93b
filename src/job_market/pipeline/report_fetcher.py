"""Report Fetcher - one LLM request, validated into a MarketReport."""

from __future__ import annotations

import logging

import anthropic
from pydantic import ValidationError

from job_market.clients.llm_client import DEFAULT_MODEL, LLMClient
from job_market.errors import BackendError, NetworkError, SchemaViolation
from job_market.models.report import MarketReport
from job_market.pipeline.query_builder import QuerySpec
from job_market.utils.json_parser import extract_json

logger = logging.getLogger(__name__)

_MAX_REPORTED_ERRORS = 5


def _describe_validation_error(exc: ValidationError) -> str:
    """Summarize field paths and reasons without echoing input values."""
    parts = []
    for err in exc.errors()[:_MAX_REPORTED_ERRORS]:
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    extra = len(exc.errors()) - _MAX_REPORTED_ERRORS
    if extra > 0:
        parts.append(f"... and {extra} more")
    return "; ".join(parts)


def decode_report(text: str) -> MarketReport:
    """Parse raw model output into a MarketReport or raise SchemaViolation."""
    try:
        data = extract_json(text)
    except ValueError:
        logger.debug("Unparseable report payload: %.500s", text)
        raise SchemaViolation(
            "The analysis service did not return structured data."
        ) from None

    if not isinstance(data, dict):
        raise SchemaViolation(
            f"Expected a JSON object from the analysis service, got {type(data).__name__}."
        )
    if "tier_analyses" not in data:
        raise SchemaViolation("Response is missing the 'tier_analyses' field.")

    try:
        return MarketReport.model_validate(data)
    except ValidationError as exc:
        logger.debug("Report failed validation: %s", exc)
        raise SchemaViolation(
            f"Response did not match the report schema ({_describe_validation_error(exc)})."
        ) from None


def _backend_message(exc: anthropic.APIStatusError) -> str:
    body = exc.body
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return f"{error['message']} (HTTP {exc.status_code})"
    return f"{exc.message} (HTTP {exc.status_code})"


class ReportFetcher:
    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ):
        self.llm = llm
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def fetch(self, query: QuerySpec) -> MarketReport:
        """Issue one request for ``query`` and return the validated report.

        Raises:
            NetworkError: the backend could not be reached.
            BackendError: the backend answered with an error or a refusal.
            SchemaViolation: the answer does not match the report schema.
        """
        logger.info("Fetching market report: constraints=%s", query.constraints or "none")
        try:
            response = await self.llm.generate(
                prompt=query.prompt,
                system=query.system,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except anthropic.APIConnectionError as exc:
            # APITimeoutError is a subclass
            raise NetworkError() from exc
        except anthropic.APIStatusError as exc:
            raise BackendError(_backend_message(exc)) from exc
        except anthropic.APIError as exc:
            raise BackendError(exc.message) from exc

        if response.stop_reason == "refusal":
            raise BackendError("The analysis request was declined by the content policy.")
        if response.stop_reason == "max_tokens":
            raise SchemaViolation(
                "The analysis was cut off before it was complete. Try narrowing the filters."
            )

        report = decode_report(response.text)
        logger.info("Market report received: %d tier(s)", len(report.tier_analyses))
        return report
